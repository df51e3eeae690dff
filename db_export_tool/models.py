"""
Data models and enums for the database export tool.
"""

import json
import re
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Sequence


PROGRAM_NAME = "db-export-tool"
CHUNK_SIZE = 1000

PLAIN_IDENTIFIER_PATTERN = re.compile(r'[A-Za-z_][A-Za-z0-9_$]*')

# Reserved words PostgreSQL refuses as bare table names
PG_RESERVED_WORDS = frozenset({
    'all', 'analyse', 'analyze', 'and', 'any', 'array', 'as', 'asc', 'both',
    'case', 'cast', 'check', 'collate', 'column', 'constraint', 'create',
    'current_user', 'default', 'desc', 'distinct', 'do', 'else', 'end',
    'except', 'false', 'fetch', 'for', 'foreign', 'from', 'grant', 'group',
    'having', 'in', 'limit', 'not', 'null', 'offset', 'on', 'only', 'or',
    'order', 'primary', 'references', 'select', 'table', 'then', 'to', 'true',
    'union', 'unique', 'user', 'using', 'when', 'where', 'window', 'with',
})


class Dialect(Enum):
    """Supported SQL dialects."""
    MYSQL = "mysql"
    POSTGRES = "postgres"

    @property
    def default_port(self) -> int:
        return 3306 if self is Dialect.MYSQL else 5432

    def quote_identifier(self, name: str) -> str:
        """Quote a table or column name for this dialect."""
        if self is Dialect.MYSQL:
            return f"`{name.replace('`', '``')}`"
        escaped = name.replace('"', '""')
        return f'"{escaped}"'

    def quote_table(self, table: str) -> str:
        """Quote a possibly schema-qualified table name (schema.table).

        On PostgreSQL plain names stay bare so the server folds them to lower
        case, the same way it treats them in hand-written SQL. Only names that
        would not parse bare are quoted.
        """
        return '.'.join(self._quote_table_part(part) for part in table.split('.'))

    def _quote_table_part(self, part: str) -> str:
        if self is Dialect.MYSQL:
            return self.quote_identifier(part)
        if not PLAIN_IDENTIFIER_PATTERN.fullmatch(part):
            return self.quote_identifier(part)
        if part.lower() in PG_RESERVED_WORDS:
            return self.quote_identifier(part.lower())
        return part

    def catalog_name(self, part: str) -> str:
        """Name of a table part as the catalog stores it."""
        if self is Dialect.POSTGRES and PLAIN_IDENTIFIER_PATTERN.fullmatch(part):
            return part.lower()
        return part


class ExportMode(Enum):
    """What gets exported: table DDL or table rows."""
    SCHEMA = "schema"
    DATA = "data"


class ExportState(Enum):
    """Lifecycle of a single data export run."""
    IDLE = "idle"
    COUNTING_ROWS = "counting_rows"
    ITERATING_CHUNKS = "iterating_chunks"
    RUNNING_FILE_QUERY = "running_file_query"
    DONE = "done"
    FAILED = "failed"


class ValueKind(Enum):
    """Kinds of column values a driver can hand back."""
    NULL = "null"
    TEXT = "text"
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    TEMPORAL = "temporal"
    BINARY = "binary"
    JSON = "json"
    ARRAY = "array"
    SET = "set"


@dataclass(frozen=True)
class SqlValue:
    """A single column value tagged with its kind."""
    kind: ValueKind
    value: Any = None

    @classmethod
    def from_python(cls, value: Any) -> "SqlValue":
        """Classify a value returned by mysql.connector or psycopg2.

        Structured values get their own kinds: mappings are JSON documents,
        lists are arrays and sets are MySQL SET members.
        """
        if value is None:
            return cls(ValueKind.NULL)
        # bool is a subclass of int, check it first
        if isinstance(value, bool):
            return cls(ValueKind.BOOLEAN, value)
        if isinstance(value, int):
            return cls(ValueKind.INTEGER, value)
        if isinstance(value, float):
            return cls(ValueKind.FLOAT, value)
        if isinstance(value, Decimal):
            return cls(ValueKind.DECIMAL, value)
        if isinstance(value, (datetime, date, time, timedelta)):
            return cls(ValueKind.TEMPORAL, value)
        if isinstance(value, (bytes, bytearray, memoryview)):
            return cls(ValueKind.BINARY, bytes(value))
        if isinstance(value, dict):
            return cls(ValueKind.JSON, value)
        if isinstance(value, (list, tuple)):
            return cls(ValueKind.ARRAY, list(value))
        if isinstance(value, (set, frozenset)):
            return cls(ValueKind.SET, frozenset(value))
        return cls(ValueKind.TEXT, str(value))

    def as_text(self) -> str:
        """Natural text form of the value, before escaping and quoting."""
        if self.kind is ValueKind.NULL:
            return "NULL"
        if self.kind is ValueKind.BOOLEAN:
            return "1" if self.value else "0"
        if self.kind is ValueKind.TEMPORAL:
            if isinstance(self.value, datetime):
                return self.value.isoformat(sep=" ")
            if isinstance(self.value, (date, time)):
                return self.value.isoformat()
            return _format_interval(self.value)
        if self.kind is ValueKind.BINARY:
            return self.value.hex()
        if self.kind is ValueKind.JSON:
            return json.dumps(self.value, ensure_ascii=False, default=str)
        if self.kind is ValueKind.ARRAY:
            return _format_array(self.value)
        if self.kind is ValueKind.SET:
            return ','.join(sorted(str(member) for member in self.value))
        return str(self.value)


def _format_interval(delta: timedelta) -> str:
    """Render a timedelta the way MySQL renders TIME columns.

    HH:MM:SS, with .ffffff appended when there are microseconds.
    """
    sign = "-" if delta < timedelta(0) else ""
    delta = abs(delta)
    hours, remainder = divmod(delta.days * 86400 + delta.seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    text = f"{sign}{hours:02d}:{minutes:02d}:{seconds:02d}"
    if delta.microseconds:
        text += f".{delta.microseconds:06d}"
    return text


ARRAY_BARE_ELEMENT_PATTERN = re.compile(r'[^{}",\\\s]+')


def _format_array(items: Sequence[Any]) -> str:
    """Render a list as a PostgreSQL array literal, e.g. {1,2,"a b",NULL}."""
    return '{' + ','.join(_format_array_element(item) for item in items) + '}'


def _format_array_element(item: Any) -> str:
    if isinstance(item, (list, tuple)):
        return _format_array(item)
    value = SqlValue.from_python(item)
    if value.kind is ValueKind.NULL:
        return 'NULL'
    text = value.as_text()
    if value.kind is ValueKind.BINARY:
        text = '\\x' + text
    if ARRAY_BARE_ELEMENT_PATTERN.fullmatch(text) and text.upper() != 'NULL':
        return text
    escaped = text.replace('\\', '\\\\').replace('"', '\\"')
    return f'"{escaped}"'


@dataclass(frozen=True)
class ChunkDescriptor:
    """One page of a table: rows [offset, offset + limit)."""
    index: int
    offset: int
    limit: int


@dataclass(frozen=True)
class ExportConfig:
    """Immutable parameters of one export run."""
    table: str
    dialect: Dialect = Dialect.MYSQL
    mode: ExportMode = ExportMode.SCHEMA
    chunk: bool = True
    chunk_size: int = CHUNK_SIZE
    skip_fields: frozenset[str] = field(default_factory=frozenset)
    input_path: Optional[str] = None
    output_path: Optional[str] = None
    program_name: str = PROGRAM_NAME


@dataclass(frozen=True)
class ConnectionSettings:
    """Connection parameters handed to DatabaseConnection."""
    dialect: Dialect
    host: str
    port: int
    user: str
    password: str
    database: str
    charset: str = "utf8"


@dataclass
class ExportStats:
    """Statistics for one export run."""
    mode: ExportMode
    table: str
    chunks: int = 0
    statements: int = 0
    rows_exported: int = 0
    tables: list[str] = field(default_factory=list)
    output_path: str = "<stdout>"
