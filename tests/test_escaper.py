"""
Unit tests for escaper.py
"""

import pytest

from db_export_tool.escaper import add_slashes, get_escaper, pg_escape
from db_export_tool.models import Dialect


def mysql_unescape(text: str) -> str:
    """Reverse add_slashes, undoing the replacements in reverse order."""
    return text.replace('\\"', '"').replace("\\'", "'").replace("\\\\", "\\")


class TestAddSlashes:
    """Tests for the MySQL escaper."""

    def test_plain_text_unchanged(self):
        """Test text without special characters."""
        assert add_slashes("hello world") == "hello world"

    def test_single_quote(self):
        """Test single quote escaping."""
        assert add_slashes("O'Brien") == "O\\'Brien"

    def test_double_quote(self):
        """Test double quote escaping."""
        assert add_slashes('say "hi"') == 'say \\"hi\\"'

    def test_backslash(self):
        """Test backslash escaping."""
        assert add_slashes("C:\\temp") == "C:\\\\temp"

    def test_backslash_escaped_first(self):
        """Test a backslash before a quote is not collapsed into the quote escape."""
        assert add_slashes("\\'") == "\\\\\\'"

    @pytest.mark.parametrize("original", [
        "",
        "plain",
        "it's",
        'a "quoted" word',
        "back\\slash",
        "\\'\"\\\\''\"",
    ])
    def test_round_trip(self, original):
        """Test escaping then unescaping returns the original text."""
        assert mysql_unescape(add_slashes(original)) == original

    def test_not_idempotent(self):
        """Test escaping an escaped string escapes it again."""
        once = add_slashes("it's")
        assert add_slashes(once) != once
        assert add_slashes(once) == "it\\\\\\'s"


class TestPgEscape:
    """Tests for the PostgreSQL escaper."""

    def test_single_quote_doubled(self):
        """Test single quotes are doubled."""
        assert pg_escape("O'Brien") == "O''Brien"

    def test_backslash_untouched(self):
        """Test backslashes are left alone."""
        assert pg_escape("C:\\temp") == "C:\\temp"

    def test_double_quote_untouched(self):
        """Test double quotes are left alone."""
        assert pg_escape('say "hi"') == 'say "hi"'

    def test_not_idempotent(self):
        """Test escaping twice quadruples the quote."""
        assert pg_escape(pg_escape("'")) == "''''"


class TestGetEscaper:
    """Tests for escaper selection."""

    def test_mysql(self):
        """Test MySQL dialect selects add_slashes."""
        assert get_escaper(Dialect.MYSQL) is add_slashes

    def test_postgres(self):
        """Test PostgreSQL dialect selects pg_escape."""
        assert get_escaper(Dialect.POSTGRES) is pg_escape
