"""
Dialect-specific escaping of text embedded in single-quoted SQL literals.
"""

from typing import Callable

from .models import Dialect

Escaper = Callable[[str], str]


def add_slashes(text: str) -> str:
    """Escape text for a MySQL string literal.

    Backslashes go first so the escapes added for quotes are not doubled.
    """
    return text.replace("\\", "\\\\").replace("'", "\\'").replace('"', '\\"')


def pg_escape(text: str) -> str:
    """Escape text for a standard-conforming PostgreSQL string literal."""
    return text.replace("'", "''")


_ESCAPERS: dict[Dialect, Escaper] = {
    Dialect.MYSQL: add_slashes,
    Dialect.POSTGRES: pg_escape,
}


def get_escaper(dialect: Dialect) -> Escaper:
    """Return the escaping function bound to a dialect."""
    return _ESCAPERS[dialect]
