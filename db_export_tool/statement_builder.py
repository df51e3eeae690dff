"""
Assembly of multi-row INSERT statements.
"""

from typing import Optional, Sequence, TextIO

from .models import Dialect


class StatementBuilder:
    """Writes one INSERT statement incrementally as rows arrive.

    Nothing is written until the first row, so an empty result set produces
    no statement at all.
    """

    def __init__(self, sink: TextIO, table: str, dialect: Dialect = Dialect.MYSQL):
        self.sink = sink
        self.table = table
        self.dialect = dialect
        self.columns: Optional[list[str]] = None
        self.rows_written = 0

    def add_row(self, columns: Sequence[str], values: Sequence[str]) -> None:
        """Append a value tuple, opening the statement on the first row."""
        if self.rows_written == 0:
            self.columns = list(columns)
            quoted = ', '.join(self.dialect.quote_identifier(c) for c in self.columns)
            table = self.dialect.quote_table(self.table)
            self.sink.write(f"INSERT INTO {table} ({quoted}) VALUES\n")
        else:
            self.sink.write(",\n")

        self.sink.write(f"({', '.join(values)})")
        self.rows_written += 1

    def finish(self) -> bool:
        """Terminate the statement. Returns True if one was written."""
        if self.rows_written == 0:
            return False
        self.sink.write(";\n\n")
        return True
