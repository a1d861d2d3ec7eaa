"""Command-line and environment configuration for an import run.

Every database flag falls back to an environment variable (DB_HOST, DB_PORT,
DB_UID, DB_PASSWORD, DB_NAME, DB_TLS, DB_TABLE, or a full DB_URL), so the
importer can be driven entirely from a ``.env`` file.
"""

import argparse
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Sequence
from urllib.parse import quote

from ledgerdb import validate_identifier
from ledger_ingest.errors import ConfigError
from ledger_ingest.schema import DEFAULT_TABLE
from ledger_ingest.source import resolve_source
from ledger_ingest.writer import DEFAULT_CHUNK_SIZE

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _parse_bool(name: str, value: str) -> bool:
    v = value.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ConfigError(f"{name} must be true or false, got {value!r}")


def _parse_int(name: str, value: str, minimum: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be an integer, got {value!r}") from None
    if number < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {number}")
    return number


def _parse_level(value: str) -> int:
    level = getattr(logging, value.strip().upper(), None)
    if not isinstance(level, int):
        raise ConfigError(f"Unknown log level: {value!r}")
    return level


@dataclass(frozen=True)
class DatabaseConfig:
    host: str = "localhost"
    port: int = 5432
    username: str = "postgres"
    password: str = "postgres"
    name: str = "postgres"
    tls: bool = False

    def url(self) -> str:
        """PostgreSQL URL; without TLS the driver still tries an encrypted connection first."""
        sslmode = "require" if self.tls else "prefer"
        user = quote(self.username, safe="")
        password = quote(self.password, safe="")
        return (
            f"postgresql://{user}:{password}@{self.host}:{self.port}/"
            f"{quote(self.name, safe='')}?sslmode={sslmode}"
        )


@dataclass(frozen=True)
class ImportConfig:
    db_url: str
    source: Path
    is_directory: bool = False
    table: str = DEFAULT_TABLE
    chunk_size: int = DEFAULT_CHUNK_SIZE
    init_schema: bool = False
    log_level: int = logging.INFO


def build_parser(environ: Mapping[str, str] | None = None) -> argparse.ArgumentParser:
    env = os.environ if environ is None else environ
    parser = argparse.ArgumentParser(
        description="Import formatted ledger CSV files into a transactions table"
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("-f", "--file", help="CSV file to import")
    source.add_argument("-d", "--directory", help="Import every *.csv file in this directory")

    db = parser.add_argument_group("database")
    db.add_argument(
        "--db-url",
        default=env.get("DB_URL"),
        help="Database URL (postgresql:// or sqlite:///); overrides the fields below",
    )
    db.add_argument("--host", default=env.get("DB_HOST", "localhost"))
    db.add_argument("--port", default=env.get("DB_PORT", "5432"))
    db.add_argument("-u", "--uid", default=env.get("DB_UID", "postgres"), help="Database user")
    db.add_argument("--password", default=env.get("DB_PASSWORD", "postgres"))
    db.add_argument("-n", "--name", default=env.get("DB_NAME", "postgres"), help="Database name")
    db.add_argument(
        "--tls", default=env.get("DB_TLS", "false"), help="Require TLS (true/false)"
    )
    db.add_argument(
        "--table", default=env.get("DB_TABLE", DEFAULT_TABLE), help="Destination table"
    )

    parser.add_argument(
        "--chunk-size",
        default=env.get("IMPORT_CHUNK_SIZE", str(DEFAULT_CHUNK_SIZE)),
        help=f"Records per write chunk (default {DEFAULT_CHUNK_SIZE})",
    )
    parser.add_argument(
        "--init",
        action="store_true",
        help="Create the table and its indexes before importing",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def load_config(
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> ImportConfig:
    """Parse arguments (falling back to the environment) into an ImportConfig.

    Raises:
        ConfigError: a value is malformed.
        SourceError: the file or directory does not exist, or the directory
            holds no CSV files.
    """
    env = os.environ if environ is None else environ
    args = build_parser(env).parse_args(argv)

    try:
        table = validate_identifier(args.table)
    except ValueError as e:
        raise ConfigError(str(e)) from None

    if args.db_url:
        db_url = args.db_url
    else:
        db_url = DatabaseConfig(
            host=args.host,
            port=_parse_int("port", args.port, 1),
            username=args.uid,
            password=args.password,
            name=args.name,
            tls=_parse_bool("tls", args.tls),
        ).url()

    is_directory = args.directory is not None
    source = resolve_source(args.directory if is_directory else args.file, is_directory)

    return ImportConfig(
        db_url=db_url,
        source=source,
        is_directory=is_directory,
        table=table,
        chunk_size=_parse_int("chunk-size", args.chunk_size, 1),
        init_schema=args.init,
        log_level=logging.DEBUG if args.verbose else _parse_level(env.get("LOG_LEVEL", "INFO")),
    )
