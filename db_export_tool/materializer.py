"""
Conversion of result rows into SQL literal strings.
"""

from typing import Any, Callable, Sequence

from .escaper import Escaper
from .exceptions import RowShapeError
from .models import Dialect, SqlValue, ValueKind


class RowMaterializer:
    """Renders the rows of one statement, dropping skipped columns.

    The kept column indexes are computed once from the column set, so every
    row of the statement is filtered the same way.
    """

    def __init__(
        self,
        columns: Sequence[str],
        skip_fields: frozenset[str],
        escape: Escaper,
        dialect: Dialect = Dialect.MYSQL
    ):
        self.columns = list(columns)
        self.escape = escape
        self.dialect = dialect
        self._kept_indexes = [
            i for i, name in enumerate(self.columns) if name not in skip_fields
        ]

        self._kind_formatters: dict[ValueKind, Callable[[SqlValue], str]] = {
            ValueKind.NULL: lambda v: 'NULL',
            ValueKind.BINARY: self._format_binary,
            ValueKind.ARRAY: self._format_array,
        }

    @property
    def kept_columns(self) -> list[str]:
        """Column names that appear in the INSERT column clause."""
        return [self.columns[i] for i in self._kept_indexes]

    def materialize(self, row: Sequence[Any]) -> list[str]:
        """Render one row as a list of SQL literals, one per kept column."""
        if len(row) != len(self.columns):
            raise RowShapeError(
                f"Row has {len(row)} values but the column set has "
                f"{len(self.columns)} columns: {', '.join(self.columns)}"
            )
        return [self.format_value(row[i]) for i in self._kept_indexes]

    def format_value(self, raw: Any) -> str:
        """Format a single driver value as a SQL literal."""
        value = SqlValue.from_python(raw)
        formatter = self._kind_formatters.get(value.kind)
        if formatter:
            return formatter(value)
        return self._quote(value)

    def _quote(self, value: SqlValue) -> str:
        return f"'{self.escape(value.as_text())}'"

    def _format_binary(self, value: SqlValue) -> str:
        if self.dialect is Dialect.POSTGRES:
            return f"'\\x{value.as_text()}'"
        return f"X'{value.as_text()}'"

    def _format_array(self, value: SqlValue) -> str:
        # MySQL has no array type; lists land in JSON columns
        if self.dialect is Dialect.MYSQL:
            value = SqlValue(ValueKind.JSON, value.value)
        return self._quote(value)
