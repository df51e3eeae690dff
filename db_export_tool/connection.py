"""
Database connection management for MySQL and PostgreSQL.
"""

import logging
from typing import Any, Optional

import mysql.connector
import psycopg2
import psycopg2.extras
from mysql.connector import Error as MySQLError

from .exceptions import DatabaseConnectionError
from .models import ConnectionSettings, Dialect


def _identity(text: str) -> str:
    return text


class DatabaseConnection:
    """Wraps a DB-API connection for either dialect, with context manager support."""

    DEFAULT_CHARSET = 'utf8'

    def __init__(self, settings: ConnectionSettings):
        self.settings = settings
        self.dialect = settings.dialect
        self.connection = None

    def __enter__(self) -> "DatabaseConnection":
        """Context manager entry - establish connection."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - close connection."""
        self.disconnect()

    @property
    def driver_error(self) -> type[Exception]:
        """Base exception class of the underlying driver."""
        return MySQLError if self.dialect is Dialect.MYSQL else psycopg2.Error

    def connect(self) -> None:
        """Establish database connection."""
        s = self.settings
        try:
            if self.dialect is Dialect.MYSQL:
                self.connection = mysql.connector.connect(
                    host=s.host,
                    port=s.port,
                    user=s.user,
                    password=s.password,
                    database=s.database,
                    charset=s.charset,
                    use_unicode=True
                )
            else:
                self.connection = psycopg2.connect(
                    host=s.host,
                    port=s.port,
                    user=s.user,
                    password=s.password,
                    dbname=s.database,
                    client_encoding=s.charset
                )
                self._keep_json_text()
            logging.info(f"Connected to {self.dialect.value} {s.host}:{s.port}/{s.database}")
        except (MySQLError, psycopg2.Error) as e:
            code = 110 if self.dialect is Dialect.MYSQL else 111
            raise DatabaseConnectionError(
                f"can not connect to {self.dialect.value} at {s.host}:{s.port}/{s.database}: {e}",
                exit_code=code
            ) from e

    def _keep_json_text(self) -> None:
        """Have psycopg2 return json/jsonb columns as the server's text.

        Decoded documents would come back as lists and dicts, and a JSON list
        could not be told apart from an array column.
        """
        psycopg2.extras.register_default_json(self.connection, loads=_identity)
        psycopg2.extras.register_default_jsonb(self.connection, loads=_identity)

    def disconnect(self) -> None:
        """Close database connection."""
        if self.connection is None:
            return
        if self.dialect is Dialect.MYSQL:
            if self.connection.is_connected():
                self.connection.close()
        elif not self.connection.closed:
            self.connection.close()
        logging.debug("Database connection closed")

    def execute_query(self, query: str, params: Optional[tuple] = None) -> list[tuple]:
        """Execute a query and return results."""
        logging.debug(f"sql: {query}")
        cursor = self.connection.cursor()
        try:
            cursor.execute(query, params)
            return cursor.fetchall()
        finally:
            cursor.close()

    def get_cursor(self):
        """Get a cursor for iterating large results.

        MySQL cursors are unbuffered so rows stream from the server instead of
        being loaded up front.
        """
        if self.dialect is Dialect.MYSQL:
            return self.connection.cursor(buffered=False)
        return self.connection.cursor()

    def quote_table(self, table: str) -> str:
        """Quote a table name for this connection's dialect."""
        return self.dialect.quote_table(table)

    def get_row_count(self, table: str) -> int:
        """Get row count for a table."""
        results = self.execute_query(f"SELECT COUNT(*) AS total FROM {self.quote_table(table)}")
        return results[0][0]

    def get_tables(self) -> list[str]:
        """Get list of all tables in the current database (or schema)."""
        if self.dialect is Dialect.MYSQL:
            results = self.execute_query("SHOW TABLES")
        else:
            results = self.execute_query(
                "SELECT tablename FROM pg_catalog.pg_tables "
                "WHERE schemaname = current_schema() ORDER BY tablename"
            )
        return [row[0] for row in results]

    def get_create_table(self, table: str) -> str:
        """Get the CREATE TABLE statement, without a trailing semicolon."""
        if self.dialect is Dialect.MYSQL:
            results = self.execute_query(f"SHOW CREATE TABLE {self.quote_table(table)}")
            return results[0][1]
        return self._build_pg_create_table(table)

    def _build_pg_create_table(self, table: str) -> str:
        """Reconstruct a CREATE TABLE statement from information_schema."""
        schema, _, name = table.rpartition('.')
        schema, name = self.dialect.catalog_name(schema), self.dialect.catalog_name(name)
        schema_filter = "%s" if schema else "current_schema()"
        params: tuple[Any, ...] = (schema, name) if schema else (name,)

        columns = self.execute_query(
            "SELECT column_name, data_type, character_maximum_length, "
            "numeric_precision, numeric_scale, is_nullable, column_default "
            "FROM information_schema.columns "
            f"WHERE table_schema = {schema_filter} AND table_name = %s "
            "ORDER BY ordinal_position",
            params
        )
        if not columns:
            raise psycopg2.ProgrammingError(f'relation "{table}" does not exist')

        primary_key = self.execute_query(
            "SELECT kcu.column_name "
            "FROM information_schema.table_constraints tc "
            "JOIN information_schema.key_column_usage kcu "
            "ON tc.constraint_name = kcu.constraint_name "
            "AND tc.table_schema = kcu.table_schema "
            "WHERE tc.constraint_type = 'PRIMARY KEY' "
            f"AND tc.table_schema = {schema_filter} AND tc.table_name = %s "
            "ORDER BY kcu.ordinal_position",
            params
        )

        q = self.dialect.quote_identifier
        lines = []
        for col_name, data_type, char_len, precision, scale, nullable, default in columns:
            col_type = data_type
            if char_len is not None:
                col_type += f"({char_len})"
            elif data_type == 'numeric' and precision is not None:
                col_type += f"({precision},{scale or 0})"

            line = f"  {q(col_name)} {col_type}"
            if nullable == 'NO':
                line += " NOT NULL"
            if default is not None:
                line += f" DEFAULT {default}"
            lines.append(line)

        if primary_key:
            lines.append(f"  PRIMARY KEY ({', '.join(q(row[0]) for row in primary_key)})")

        return f"CREATE TABLE {self.quote_table(table)} (\n" + ",\n".join(lines) + "\n)"
