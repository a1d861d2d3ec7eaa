"""SQLite implementation of DatabaseService."""

import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterator

from ledgerdb.errors import DatabaseConnectionError, StatementError
from ledgerdb.service import DatabaseService
from ledgerdb.types import Params, Row

logger = logging.getLogger(__name__)


class SQLiteDatabaseService(DatabaseService):
    """SQLite backend using stdlib sqlite3.

    Used for tests and local dry runs. SQLite (3.24+) accepts the same
    ``ON CONFLICT (...) DO NOTHING`` clause as PostgreSQL.
    """

    placeholder = "?"

    def __init__(self, db_path: str):
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._in_transaction = False

    def connect(self) -> None:
        try:
            conn = sqlite3.connect(self._db_path)
        except sqlite3.Error as e:
            raise DatabaseConnectionError(
                f"Could not open SQLite database {self._db_path}: {e}"
            ) from e
        try:
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("SELECT 1").fetchone()
        except sqlite3.Error as e:
            conn.close()
            raise DatabaseConnectionError(
                f"Could not open SQLite database {self._db_path}: {e}"
            ) from e
        self._conn = conn
        logger.debug("Connected to SQLite database %s", self._db_path)

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise DatabaseConnectionError("Not connected. Call connect() first.")
        return self._conn

    def _get_conn(self) -> sqlite3.Connection:
        """Get the connection for the current transaction."""
        if self._in_transaction:
            return self._connection()
        raise RuntimeError(
            "No active transaction. Wrap calls in a `with service.transaction():` block."
        )

    @contextmanager
    def transaction(self) -> Iterator[None]:
        conn = self._connection()
        self._in_transaction = True
        try:
            yield
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            self._in_transaction = False

    def execute(self, sql: str, params: Params | None = None) -> list[Row]:
        conn = self._get_conn()
        try:
            cursor = conn.execute(sql, params or ())
            if cursor.description is None:
                return []
            columns = [desc[0] for desc in cursor.description]
            return [dict(zip(columns, row)) for row in cursor.fetchall()]
        except sqlite3.Error as e:
            raise StatementError(str(e)) from e

    def execute_write(self, sql: str, params: Params | None = None) -> int:
        conn = self._get_conn()
        try:
            return conn.execute(sql, params or ()).rowcount
        except sqlite3.Error as e:
            raise StatementError(str(e)) from e

    def execute_ddl(self, sql: str) -> None:
        conn = self._connection()
        try:
            conn.executescript(sql)
            conn.commit()
        except sqlite3.Error as e:
            raise StatementError(str(e)) from e
