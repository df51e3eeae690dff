"""
Unit tests for models.py
"""

import dataclasses
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from uuid import UUID

import pytest

from db_export_tool.models import (
    CHUNK_SIZE,
    PROGRAM_NAME,
    ChunkDescriptor,
    Dialect,
    ExportConfig,
    ExportMode,
    ExportStats,
    SqlValue,
    ValueKind,
)


class TestDialect:
    """Tests for Dialect enum."""

    def test_values(self):
        """Test dialect values match the CLI names."""
        assert Dialect("mysql") is Dialect.MYSQL
        assert Dialect("postgres") is Dialect.POSTGRES

    def test_invalid_value(self):
        """Test unknown dialect names are rejected."""
        with pytest.raises(ValueError):
            Dialect("oracle")

    def test_default_ports(self):
        """Test default ports per dialect."""
        assert Dialect.MYSQL.default_port == 3306
        assert Dialect.POSTGRES.default_port == 5432

    def test_quote_identifier_mysql(self):
        """Test MySQL identifiers use backticks."""
        assert Dialect.MYSQL.quote_identifier("user id") == "`user id`"
        assert Dialect.MYSQL.quote_identifier("a`b") == "`a``b`"

    def test_quote_identifier_postgres(self):
        """Test PostgreSQL identifiers use double quotes."""
        assert Dialect.POSTGRES.quote_identifier("name") == '"name"'
        assert Dialect.POSTGRES.quote_identifier('a"b') == '"a""b"'

    def test_quote_table_mysql(self):
        """Test MySQL tables quote each part with backticks."""
        assert Dialect.MYSQL.quote_table("users") == "`users`"
        assert Dialect.MYSQL.quote_table("shop.users") == "`shop`.`users`"

    def test_quote_table_postgres_plain_names_bare(self):
        """Test plain PostgreSQL table names stay bare so the server folds their case."""
        assert Dialect.POSTGRES.quote_table("public.users") == "public.users"
        assert Dialect.POSTGRES.quote_table("Users") == "Users"

    def test_quote_table_postgres_quotes_when_needed(self):
        """Test PostgreSQL names that would not parse bare are quoted."""
        assert Dialect.POSTGRES.quote_table("order items") == '"order items"'
        assert Dialect.POSTGRES.quote_table("public.User") == 'public."user"'

    def test_catalog_name(self):
        """Test catalog lookups use the name PostgreSQL stores."""
        assert Dialect.POSTGRES.catalog_name("Users") == "users"
        assert Dialect.POSTGRES.catalog_name("order items") == "order items"
        assert Dialect.MYSQL.catalog_name("Users") == "Users"


class TestSqlValue:
    """Tests for SqlValue classification and text rendering."""

    @pytest.mark.parametrize("raw,kind", [
        (None, ValueKind.NULL),
        ("abc", ValueKind.TEXT),
        (42, ValueKind.INTEGER),
        (True, ValueKind.BOOLEAN),
        (1.5, ValueKind.FLOAT),
        (Decimal("9.99"), ValueKind.DECIMAL),
        (datetime(2024, 1, 15, 10, 30, 45), ValueKind.TEMPORAL),
        (date(2024, 1, 15), ValueKind.TEMPORAL),
        (time(10, 30), ValueKind.TEMPORAL),
        (timedelta(hours=1), ValueKind.TEMPORAL),
        (b"\x00\x01", ValueKind.BINARY),
        (bytearray(b"\x00"), ValueKind.BINARY),
        (memoryview(b"\x00"), ValueKind.BINARY),
        ({"a": 1}, ValueKind.JSON),
        ([1, 2], ValueKind.ARRAY),
        ((1, 2), ValueKind.ARRAY),
        ({"a"}, ValueKind.SET),
        (frozenset({"a"}), ValueKind.SET),
    ])
    def test_from_python_kind(self, raw, kind):
        """Test driver values map to the right kind."""
        assert SqlValue.from_python(raw).kind is kind

    def test_unknown_type_is_text(self):
        """Test values with no kind of their own fall back to their str() form."""
        value = SqlValue.from_python(UUID("12345678-1234-5678-1234-567812345678"))
        assert value.kind is ValueKind.TEXT
        assert value.as_text() == "12345678-1234-5678-1234-567812345678"

    def test_dict_is_json(self):
        """Test mappings render as JSON documents."""
        value = SqlValue.from_python({"a": "x", "n": [1, None]})
        assert value.kind is ValueKind.JSON
        assert value.as_text() == '{"a": "x", "n": [1, null]}'

    def test_list_is_array_literal(self):
        """Test lists render as PostgreSQL array literals."""
        assert SqlValue.from_python([1, 2]).as_text() == "{1,2}"
        assert SqlValue.from_python([]).as_text() == "{}"
        assert SqlValue.from_python([[1, 2], [3, None]]).as_text() == "{{1,2},{3,NULL}}"

    def test_array_elements_quoted_when_needed(self):
        """Test array elements with special characters are double-quoted."""
        value = SqlValue.from_python(["plain", "a b", 'say "hi"', "back\\slash", "", "NULL", None])
        assert value.as_text() == '{plain,"a b","say \\"hi\\"","back\\\\slash","","NULL",NULL}'

    def test_set_members_joined(self):
        """Test MySQL SET values render as sorted comma-separated members."""
        value = SqlValue.from_python({"b", "a"})
        assert value.kind is ValueKind.SET
        assert value.as_text() == "a,b"
        assert SqlValue.from_python(set()).as_text() == ""

    def test_bool_text(self):
        """Test booleans render as 1/0."""
        assert SqlValue.from_python(True).as_text() == "1"
        assert SqlValue.from_python(False).as_text() == "0"

    def test_datetime_text(self):
        """Test datetimes render in ISO form with a space separator."""
        value = SqlValue.from_python(datetime(2024, 1, 15, 10, 30, 45))
        assert value.as_text() == "2024-01-15 10:30:45"

    def test_datetime_microseconds(self):
        """Test fractional seconds are kept."""
        value = SqlValue.from_python(datetime(2024, 1, 15, 10, 30, 45, 120000))
        assert value.as_text() == "2024-01-15 10:30:45.120000"

    def test_date_text(self):
        """Test dates render as YYYY-MM-DD."""
        assert SqlValue.from_python(date(2024, 1, 5)).as_text() == "2024-01-05"

    def test_timedelta_text(self):
        """Test MySQL TIME values (timedelta) render as HH:MM:SS."""
        assert SqlValue.from_python(timedelta(hours=26, minutes=3, seconds=4)).as_text() == "26:03:04"
        assert SqlValue.from_python(timedelta(seconds=-90)).as_text() == "-00:01:30"

    def test_timedelta_fractional_seconds(self):
        """Test TIME(6) and interval values keep microseconds and sign."""
        assert SqlValue.from_python(timedelta(seconds=1.25)).as_text() == "00:00:01.250000"
        assert SqlValue.from_python(timedelta(seconds=-0.5)).as_text() == "-00:00:00.500000"
        assert SqlValue.from_python(timedelta(days=-1, hours=23)).as_text() == "-01:00:00"

    def test_decimal_text(self):
        """Test decimals keep their exact digits."""
        assert SqlValue.from_python(Decimal("10.50")).as_text() == "10.50"

    def test_binary_text_is_hex(self):
        """Test binary values render as hex digits."""
        assert SqlValue.from_python(b"\x00\xff\xab").as_text() == "00ffab"


class TestExportConfig:
    """Tests for ExportConfig."""

    def test_defaults(self):
        """Test default values."""
        config = ExportConfig(table="users")
        assert config.dialect is Dialect.MYSQL
        assert config.mode is ExportMode.SCHEMA
        assert config.chunk is True
        assert config.chunk_size == CHUNK_SIZE == 1000
        assert config.skip_fields == frozenset()
        assert config.input_path is None
        assert config.output_path is None
        assert config.program_name == PROGRAM_NAME

    def test_immutable(self):
        """Test the configuration cannot be changed after creation."""
        config = ExportConfig(table="users")
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.table = "orders"


class TestChunkDescriptor:
    """Tests for ChunkDescriptor."""

    def test_fields(self):
        """Test descriptor fields."""
        chunk = ChunkDescriptor(index=2, offset=2000, limit=1000)
        assert (chunk.index, chunk.offset, chunk.limit) == (2, 2000, 1000)


class TestExportStats:
    """Tests for ExportStats."""

    def test_defaults(self):
        """Test default counters."""
        stats = ExportStats(mode=ExportMode.DATA, table="users")
        assert stats.chunks == 0
        assert stats.statements == 0
        assert stats.rows_exported == 0
        assert stats.tables == []
        assert stats.output_path == "<stdout>"
