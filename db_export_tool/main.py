#!/usr/bin/env python3
"""
Database Export Tool - CLI Entry Point
======================================
Exports MySQL or PostgreSQL tables to a SQL file (or stdout) as either:
- Schema: DROP TABLE IF EXISTS + CREATE TABLE
- Data: INSERT statements, in chunks of 1000 rows or from a query file
"""

import argparse
import logging
import sys

import yaml

from .config import (
    ConfigLoader,
    build_connection_settings,
    build_export_config,
    parse_bool,
)
from .connection import DatabaseConnection
from .data_exporter import DataExporter
from .exceptions import ConfigurationError, ExportError
from .models import ExportConfig, ExportMode, ExportStats, PROGRAM_NAME
from .schema_exporter import SchemaExporter
from .utils import close_output, open_output, setup_logging, write_header


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        prog=PROGRAM_NAME,
        description='Export MySQL/PostgreSQL table schema or data as SQL',
        epilog=(
            f"examples:\n"
            f"  {PROGRAM_NAME} --db-type mysql --db-name db --table t1,t2 "
            f"--db-host host --db-user user --db-pwd pwd [--output ./output.sql]\n"
            f"  {PROGRAM_NAME} --db-type postgres --db-name db --model data --table tb "
            f"--chunk false --input ./input.sql [--skip-field f1,f2] [--output ./output.sql]"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('-c', '--config', help='Optional YAML file with connection/export defaults')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose output')

    db = parser.add_argument_group('database')
    db.add_argument('--db-type', help='Database type: mysql, postgres (default: mysql)')
    db.add_argument('--db-name', help='Database name')
    db.add_argument('--db-host', help='Database host[:port] (default: 127.0.0.1:<default port>)')
    db.add_argument('--db-user', help='Database user')
    db.add_argument('--db-pwd', help='Database password')
    db.add_argument('--db-charset', help='Connection charset (default: utf8)')

    export = parser.add_argument_group('export')
    export.add_argument('--model', help='Export model: schema, data (default: schema)')
    export.add_argument('--table', help="Table name(s), comma separated, or 'all' for schema")
    export.add_argument('--chunk', type=parse_bool, help='Export data in chunks of 1000 rows (default: true)')
    export.add_argument('--input', help='SQL file with the export query, used when --chunk=false')
    export.add_argument('--output', help='Output file (default: stdout)')
    export.add_argument('--skip-field', help='Columns left out of INSERT statements, comma separated')
    return parser


def run_export(conn: DatabaseConnection, config: ExportConfig, sink) -> ExportStats:
    """Run the configured export against an open connection."""
    write_header(sink, config.mode, config.program_name)
    if config.mode is ExportMode.SCHEMA:
        return SchemaExporter(conn, sink).run(config.table)
    return DataExporter(conn, config, sink).run()


def main(argv=None):
    """Main entry point."""
    args = build_parser().parse_args(argv)

    # Load configuration
    try:
        loader = ConfigLoader(args.config)
    except FileNotFoundError:
        print(f"Error: Configuration file '{args.config}' not found", file=sys.stderr)
        sys.exit(ConfigurationError.exit_code)
    except yaml.YAMLError as e:
        print(f"Error: Invalid YAML in configuration file: {e}", file=sys.stderr)
        sys.exit(ConfigurationError.exit_code)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(e.exit_code)

    # Setup logging
    log_settings = loader.get_logging_settings()
    if args.verbose:
        log_settings['level'] = 'DEBUG'
    setup_logging(log_settings)

    try:
        # connection checks (db name, type, host, user) come before export ones
        settings = build_connection_settings(args, loader)
        config = build_export_config(args, loader)

        with DatabaseConnection(settings) as conn:
            sink = open_output(config.output_path)
            try:
                stats = run_export(conn, config, sink)
            finally:
                close_output(sink)

    except ExportError as e:
        logging.error(f"Fatal error: {e}")
        sys.exit(e.exit_code)

    if config.output_path:
        stats.output_path = config.output_path

    # Print summary
    logging.info("=" * 50)
    logging.info(f"EXPORT COMPLETE ({stats.mode.value})")
    if stats.mode is ExportMode.SCHEMA:
        logging.info(f"Tables: {len(stats.tables)}")
    else:
        logging.info(f"Table: {stats.table}")
        logging.info(f"Chunks: {stats.chunks}")
        logging.info(f"Rows: {stats.rows_exported}")
    logging.info(f"Output: {stats.output_path}")


if __name__ == '__main__':
    main()
