"""Abstract DatabaseService interface."""

import re
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator

from ledgerdb.types import Params, Row

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")


def validate_identifier(name: str) -> str:
    """Return ``name`` if it is a plain (optionally schema-qualified) SQL identifier.

    Table and column names are interpolated into statements, so anything that
    is not a bare identifier is rejected with ValueError.
    """
    if not _IDENTIFIER.match(name or ""):
        raise ValueError(f"Invalid SQL identifier: {name!r}")
    return name


class DatabaseService(ABC):
    """Database-agnostic interface for the operations the importer needs.

    Design principles:
    - One connection per service, held for the lifetime of the run
    - Every statement runs inside ``transaction()``; callers decide the
      transaction boundaries
    - Driver errors surface as ledgerdb.errors types, never driver types
    """

    #: Parameter placeholder used by the driver ("?" or "%s").
    placeholder = "?"

    @abstractmethod
    def connect(self) -> None:
        """Open the connection and verify it with a trivial query."""

    @abstractmethod
    def close(self) -> None:
        """Close the connection and release resources."""

    @abstractmethod
    def execute(self, sql: str, params: Params | None = None) -> list[Row]:
        """Execute a single SQL statement and return rows as dicts."""

    @abstractmethod
    def execute_write(self, sql: str, params: Params | None = None) -> int:
        """Execute a single DML statement and return the affected row count."""

    @abstractmethod
    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Context manager: commits on success, rolls back on error."""

    @abstractmethod
    def execute_ddl(self, sql: str) -> None:
        """Execute DDL statements (CREATE TABLE, CREATE INDEX, etc.)."""

    def insert_ignore(
        self,
        table: str,
        columns: list[str],
        row: tuple,
        conflict_columns: list[str],
    ) -> bool:
        """Insert one row, doing nothing if it conflicts on ``conflict_columns``.

        Returns True when the row was inserted, False when it was skipped
        because of the conflict. Must be called inside ``transaction()``.
        """
        return self.execute_write(self.insert_ignore_sql(table, columns, conflict_columns), row) > 0

    def insert_ignore_sql(self, table: str, columns: list[str], conflict_columns: list[str]) -> str:
        validate_identifier(table)
        for column in (*columns, *conflict_columns):
            validate_identifier(column)
        cols = ", ".join(columns)
        placeholders = ", ".join(self.placeholder for _ in columns)
        conflict_cols = ", ".join(conflict_columns)
        return (
            f"INSERT INTO {table} ({cols}) VALUES ({placeholders}) "
            f"ON CONFLICT ({conflict_cols}) DO NOTHING"
        )

    def __enter__(self) -> "DatabaseService":
        self.connect()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
