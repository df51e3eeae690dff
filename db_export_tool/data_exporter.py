"""
Table data export: rows to INSERT statements, chunked or from a query file.

Chunk queries are independent SELECTs with no snapshot around them. If the
table is modified while the export runs, rows can be skipped or repeated
between chunks.
"""

import logging
from pathlib import Path
from typing import Optional, Sequence, TextIO

from .chunk_planner import plan_chunks
from .connection import DatabaseConnection
from .escaper import get_escaper
from .exceptions import (
    ColumnSetMismatchError,
    ExportError,
    InputReadError,
    OutputWriteError,
    QueryExecutionError,
)
from .materializer import RowMaterializer
from .models import ChunkDescriptor, ExportConfig, ExportMode, ExportState, ExportStats
from .statement_builder import StatementBuilder


class DataExporter:
    """Drives one data export run over a live connection."""

    def __init__(self, connection: DatabaseConnection, config: ExportConfig, sink: TextIO):
        self.connection = connection
        self.config = config
        self.sink = sink
        self.escape = get_escaper(config.dialect)
        self.state = ExportState.IDLE
        self.stats = ExportStats(mode=ExportMode.DATA, table=config.table)
        self._column_set: Optional[list[str]] = None

    def run(self) -> ExportStats:
        """Export the configured table. Any failure is final; nothing is retried."""
        if self.state is not ExportState.IDLE:
            raise RuntimeError(f"Export already ran (state: {self.state.value})")

        logging.info(f"[data] start exporting '{self.config.table}'")
        try:
            if self.config.chunk:
                self._run_chunked()
            else:
                self._run_file_query()
        except ExportError:
            self.state = ExportState.FAILED
            raise
        except OSError as e:
            self.state = ExportState.FAILED
            raise OutputWriteError(f"write to output failed: {e}") from e

        self.state = ExportState.DONE
        logging.info(
            f"[data] done: {self.stats.rows_exported} rows in "
            f"{self.stats.statements} statement(s)"
        )
        return self.stats

    def _run_chunked(self) -> None:
        """Count the rows, then export one LIMIT/OFFSET page at a time."""
        logging.info("[data] use chunk")
        self.state = ExportState.COUNTING_ROWS
        count_query = f"SELECT COUNT(*) AS total FROM {self.config.dialect.quote_table(self.config.table)}"
        try:
            total = self.connection.get_row_count(self.config.table)
        except self.connection.driver_error as e:
            raise QueryExecutionError(count_query, e) from e

        logging.debug(f"[data] total rows: {total}, chunk size: {self.config.chunk_size}")
        self.state = ExportState.ITERATING_CHUNKS

        for chunk in plan_chunks(total, self.config.chunk_size):
            self.sink.write(f"/** chunk: {chunk.index} */\n")
            self._export_result_set(self._chunk_query(chunk))
            self.stats.chunks += 1

    def _chunk_query(self, chunk: ChunkDescriptor) -> str:
        table = self.config.dialect.quote_table(self.config.table)
        return f"SELECT * FROM {table} LIMIT {chunk.limit} OFFSET {chunk.offset}"

    def _run_file_query(self) -> None:
        """Run the query from the input file once, verbatim."""
        self.state = ExportState.RUNNING_FILE_QUERY
        query = self._read_query_file(self.config.input_path)
        self._export_result_set(query)

    def _read_query_file(self, path: Optional[str]) -> str:
        if not path:
            raise InputReadError("export data without chunk needs an input sql file")
        try:
            return Path(path).read_text(encoding='utf-8')
        except OSError as e:
            raise InputReadError(f"can not read sql file: {path}, err: {e}") from e

    def _export_result_set(self, query: str) -> int:
        """Stream one result set into a single INSERT statement.

        Returns the number of rows written.
        """
        logging.debug(f"[data] sql: {query}")
        builder = StatementBuilder(self.sink, self.config.table, self.config.dialect)
        materializer: Optional[RowMaterializer] = None

        cursor = self.connection.get_cursor()
        try:
            cursor.execute(query)
            for row in cursor:
                if materializer is None:
                    columns = [desc[0] for desc in cursor.description]
                    self._check_column_set(columns)
                    materializer = RowMaterializer(
                        columns, self.config.skip_fields, self.escape, self.config.dialect
                    )
                builder.add_row(materializer.kept_columns, materializer.materialize(row))
        except self.connection.driver_error as e:
            raise QueryExecutionError(query, e) from e
        finally:
            self._close_cursor(cursor)

        if builder.finish():
            self.stats.statements += 1
        self.stats.rows_exported += builder.rows_written
        return builder.rows_written

    def _check_column_set(self, columns: Sequence[str]) -> None:
        """Every non-empty result set of a run must share one column set."""
        if self._column_set is None:
            self._column_set = list(columns)
        elif list(columns) != self._column_set:
            raise ColumnSetMismatchError(
                f"Column set changed during export of '{self.config.table}': "
                f"expected ({', '.join(self._column_set)}), got ({', '.join(columns)})"
            )

    def _close_cursor(self, cursor) -> None:
        # Unbuffered MySQL cursors raise on close while rows are still unread
        try:
            cursor.close()
        except self.connection.driver_error as e:
            logging.debug(f"[data] cursor close failed: {e}")
