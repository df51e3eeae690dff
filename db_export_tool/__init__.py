"""
Database Export Tool
====================
A command-line tool to export MySQL or PostgreSQL tables as SQL:
- Schema export (DROP TABLE IF EXISTS + CREATE TABLE)
- Data export as INSERT statements, chunked by 1000 rows
- Data export from a custom query file
- Skipping columns from INSERT statements
"""

from .chunk_planner import chunk_count, plan_chunks
from .config import ConfigLoader, build_connection_settings, build_export_config
from .connection import DatabaseConnection
from .data_exporter import DataExporter
from .escaper import add_slashes, get_escaper, pg_escape
from .exceptions import (
    ColumnSetMismatchError,
    ConfigurationError,
    DatabaseConnectionError,
    ExportError,
    InputReadError,
    OutputOpenError,
    OutputWriteError,
    QueryExecutionError,
    RowShapeError,
)
from .main import main
from .materializer import RowMaterializer
from .models import (
    ChunkDescriptor,
    ConnectionSettings,
    Dialect,
    ExportConfig,
    ExportMode,
    ExportState,
    ExportStats,
    SqlValue,
    ValueKind,
)
from .schema_exporter import SchemaExporter
from .statement_builder import StatementBuilder
from .utils import open_output, setup_logging, write_header

__version__ = "1.0.0"

__all__ = [
    # Main entry point
    "main",
    # Core classes
    "ConfigLoader",
    "DatabaseConnection",
    "DataExporter",
    "RowMaterializer",
    "SchemaExporter",
    "StatementBuilder",
    # Functions
    "add_slashes",
    "build_connection_settings",
    "build_export_config",
    "chunk_count",
    "get_escaper",
    "pg_escape",
    "plan_chunks",
    # Models
    "ChunkDescriptor",
    "ConnectionSettings",
    "Dialect",
    "ExportConfig",
    "ExportMode",
    "ExportState",
    "ExportStats",
    "SqlValue",
    "ValueKind",
    # Exceptions
    "ColumnSetMismatchError",
    "ConfigurationError",
    "DatabaseConnectionError",
    "ExportError",
    "InputReadError",
    "OutputOpenError",
    "OutputWriteError",
    "QueryExecutionError",
    "RowShapeError",
    # Utilities
    "open_output",
    "setup_logging",
    "write_header",
]
