"""
Configuration loading and validation for the database export tool.

Command-line flags win over the optional YAML config file, which wins over
built-in defaults.
"""

import argparse
import os
import re
from typing import Any, Optional

import yaml

from .exceptions import ConfigurationError
from .models import ConnectionSettings, Dialect, ExportConfig, ExportMode


class ConfigLoader:
    """Loads an optional YAML config file, resolving ${ENV_VAR} references."""

    ENV_VAR_PATTERN = re.compile(r'\$\{([^}]+)\}')

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path
        self.config = self._load_config() if config_path else {}

    def _load_config(self) -> dict[str, Any]:
        """Load configuration from YAML file."""
        with open(self.config_path, 'r') as f:
            config = yaml.safe_load(f) or {}

        if not isinstance(config, dict):
            raise ConfigurationError(f"Config file '{self.config_path}' must contain a mapping")
        return self._resolve_env_vars(config)

    def _resolve_env_vars(self, obj: Any) -> Any:
        """Recursively resolve environment variables in config."""
        if isinstance(obj, str):
            matches = self.ENV_VAR_PATTERN.findall(obj)
            for match in matches:
                env_value = os.environ.get(match, '')
                obj = obj.replace(f'${{{match}}}', env_value)
            return obj
        elif isinstance(obj, dict):
            return {k: self._resolve_env_vars(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [self._resolve_env_vars(item) for item in obj]
        return obj

    def get_connection_settings(self) -> dict[str, Any]:
        """Get connection defaults."""
        return self.config.get('connection') or {}

    def get_export_settings(self) -> dict[str, Any]:
        """Get export defaults."""
        return self.config.get('export') or {}

    def get_logging_settings(self) -> dict[str, Any]:
        """Get logging settings."""
        return self.config.get('logging') or {}


def parse_bool(value: Any) -> bool:
    """Parse true/false flag values (true, false, 1, 0, yes, no...)."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ('1', 't', 'true', 'yes', 'y', 'on'):
        return True
    if text in ('0', 'f', 'false', 'no', 'n', 'off'):
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value: '{value}'")


def parse_skip_fields(value: Any) -> frozenset[str]:
    """Turn 'a,b' or ['a', 'b'] into a set of column names."""
    if not value:
        return frozenset()
    if isinstance(value, str):
        value = value.split(',')
    return frozenset(str(v).strip() for v in value if str(v).strip())


def parse_host(host: str, default_port: int) -> tuple[str, int]:
    """Split 'host:port' into its parts."""
    name, sep, port = host.rpartition(':')
    if not sep or not name:
        return host, default_port
    try:
        return name, int(port)
    except ValueError:
        raise ConfigurationError(f"invalid port in db host: '{host}'", exit_code=9)


def _pick(cli_value: Any, file_settings: dict[str, Any], key: str, default: Any = None) -> Any:
    if cli_value is not None:
        return cli_value
    return file_settings.get(key, default)


def _resolve_dialect(args: argparse.Namespace, conn: dict[str, Any]) -> Dialect:
    try:
        return Dialect(_pick(args.db_type, conn, 'db_type', 'mysql'))
    except ValueError:
        raise ConfigurationError("need to set db type: mysql | postgres", exit_code=8)


def build_export_config(args: argparse.Namespace, loader: ConfigLoader) -> ExportConfig:
    """Merge and validate CLI and file settings into an ExportConfig."""
    conn = loader.get_connection_settings()
    export = loader.get_export_settings()

    dialect = _resolve_dialect(args, conn)

    model = _pick(args.model, export, 'model', 'schema')
    try:
        mode = ExportMode(model)
    except ValueError:
        raise ConfigurationError(f"no support model: {model}", exit_code=11)

    table = _pick(args.table, export, 'table', '') or ''
    try:
        chunk = parse_bool(_pick(args.chunk, export, 'chunk', True))
    except argparse.ArgumentTypeError as e:
        raise ConfigurationError(str(e), exit_code=13)
    input_path = _pick(args.input, export, 'input')

    if mode is ExportMode.SCHEMA and not table:
        raise ConfigurationError("export schema, but no table assign.", exit_code=12)
    if mode is ExportMode.DATA and not chunk and not input_path:
        raise ConfigurationError("export data, but no sql file assign.", exit_code=13)
    if not table:
        raise ConfigurationError("please assign table name.", exit_code=14)

    return ExportConfig(
        table=table,
        dialect=dialect,
        mode=mode,
        chunk=chunk,
        skip_fields=parse_skip_fields(_pick(args.skip_field, export, 'skip_fields')),
        input_path=input_path,
        output_path=_pick(args.output, export, 'output') or None,
    )


def build_connection_settings(args: argparse.Namespace, loader: ConfigLoader) -> ConnectionSettings:
    """Merge and validate the connection parameters."""
    conn = loader.get_connection_settings()

    database = _pick(args.db_name, conn, 'database', '')
    if not database:
        raise ConfigurationError("please set db name", exit_code=2)

    dialect = _resolve_dialect(args, conn)
    host = _pick(args.db_host, conn, 'host', f'127.0.0.1:{dialect.default_port}')
    if not host:
        raise ConfigurationError("please set db host", exit_code=9)

    user = _pick(args.db_user, conn, 'user', '')
    if not user:
        raise ConfigurationError("please set db user", exit_code=10)

    hostname, port = parse_host(host, conn.get('port', dialect.default_port))
    return ConnectionSettings(
        dialect=dialect,
        host=hostname,
        port=int(port),
        user=user,
        password=_pick(args.db_pwd, conn, 'password', ''),
        database=database,
        charset=_pick(args.db_charset, conn, 'charset', 'utf8'),
    )
