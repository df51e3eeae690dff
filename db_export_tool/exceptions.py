"""
Exceptions raised by the database export tool.

Every fatal condition carries the process exit code the CLI terminates with,
so distinct failure sites stay distinguishable from the shell.
"""

from typing import Optional


class ExportError(Exception):
    """Base error for a failed export run."""
    exit_code = 1

    def __init__(self, message: str, exit_code: Optional[int] = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigurationError(ExportError):
    """Missing or invalid command-line / config file options."""
    exit_code = 15


class DatabaseConnectionError(ExportError):
    """Could not connect to the database server."""
    exit_code = 110


class OutputOpenError(ExportError):
    """The output destination could not be created."""
    exit_code = 20


class OutputWriteError(ExportError):
    """Writing exported statements to the output failed."""
    exit_code = 21


class InputReadError(ExportError):
    """The query file for file-query mode could not be read."""
    exit_code = 30


class QueryExecutionError(ExportError):
    """A query failed on the server."""
    exit_code = 40

    def __init__(self, query: str, original: Exception):
        super().__init__(f"Query failed: {original} (sql: {query[:200]})")
        self.query = query
        self.original_exception = original


class RowShapeError(ExportError):
    """A row does not match the column set of its statement."""
    exit_code = 41


class ColumnSetMismatchError(ExportError):
    """A later chunk returned a different column set than the first one."""
    exit_code = 41
