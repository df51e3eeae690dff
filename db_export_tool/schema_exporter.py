"""
Table schema export: DROP + CREATE TABLE statements.
"""

import logging
import re
from typing import TextIO

from .connection import DatabaseConnection
from .exceptions import OutputWriteError, QueryExecutionError
from .models import ExportMode, ExportStats


class SchemaExporter:
    """Writes the DDL of one or more tables."""

    AUTO_INCREMENT_PATTERN = re.compile(r'AUTO_INCREMENT=(\d+) ')

    def __init__(self, connection: DatabaseConnection, sink: TextIO):
        self.connection = connection
        self.sink = sink

    def run(self, tables: str) -> ExportStats:
        """Export the comma-separated list of tables, or every table for 'all'."""
        logging.info("[schema] start work")
        stats = ExportStats(mode=ExportMode.SCHEMA, table=tables)

        for table in self.resolve_tables(tables):
            self.export_table(table)
            stats.tables.append(table)
            stats.statements += 2

        logging.info("[schema] jobs have done.")
        return stats

    def resolve_tables(self, tables: str) -> list[str]:
        """Expand the table argument into table names."""
        if tables == 'all':
            try:
                return self.connection.get_tables()
            except self.connection.driver_error as e:
                raise QueryExecutionError("SHOW TABLES", e) from e
        return [t.strip() for t in tables.split(',') if t.strip()]

    def export_table(self, table: str) -> None:
        """Write DROP TABLE IF EXISTS and the CREATE TABLE for one table."""
        try:
            create_statement = self.connection.get_create_table(table)
        except self.connection.driver_error as e:
            raise QueryExecutionError(f"SHOW CREATE TABLE {table}", e) from e

        create_statement = self.strip_auto_increment(create_statement)
        try:
            self.sink.write(f"DROP TABLE IF EXISTS {table};\n")
            self.sink.write(f"{create_statement};\n")
            self.sink.write("\n")
        except OSError as e:
            raise OutputWriteError(f"write schema of '{table}' failed: {e}") from e
        logging.debug(f"[schema] exported '{table}'")

    @classmethod
    def strip_auto_increment(cls, create_statement: str) -> str:
        """Remove the AUTO_INCREMENT=<n> table option."""
        return cls.AUTO_INCREMENT_PATTERN.sub('', create_statement)

