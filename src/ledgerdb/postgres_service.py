"""PostgreSQL implementation of DatabaseService."""

import logging
from contextlib import contextmanager
from typing import Iterator

import psycopg2
import psycopg2.extras

from ledgerdb.errors import DatabaseConnectionError, StatementError
from ledgerdb.service import DatabaseService
from ledgerdb.types import Params, Row

logger = logging.getLogger(__name__)


class PostgresDatabaseService(DatabaseService):
    """PostgreSQL backend using psycopg2.

    Holds a single connection with autocommit off; every ``transaction()``
    block is committed (or rolled back) on exit.
    """

    placeholder = "%s"

    def __init__(self, dsn: str, connect_timeout: int = 10):
        self._dsn = dsn
        self._connect_timeout = connect_timeout
        self._conn = None
        self._in_transaction = False

    def connect(self) -> None:
        logger.info("Attempting to connect to database.")
        try:
            conn = psycopg2.connect(self._dsn, connect_timeout=self._connect_timeout)
        except psycopg2.Error as e:
            raise DatabaseConnectionError(f"Could not connect to database: {e}") from e
        try:
            conn.autocommit = False
            with conn.cursor() as cur:
                cur.execute("SELECT 1")
                cur.fetchone()
            conn.rollback()
        except psycopg2.Error as e:
            conn.close()
            raise DatabaseConnectionError(f"Could not connect to database: {e}") from e
        self._conn = conn
        logger.info("Successfully connected to database.")

    def close(self) -> None:
        if self._conn is not None:
            if not self._conn.closed:
                self._conn.close()
            self._conn = None

    def _connection(self):
        if self._conn is None:
            raise DatabaseConnectionError("Not connected. Call connect() first.")
        if self._conn.closed:
            raise DatabaseConnectionError("Database connection was lost.")
        return self._conn

    def _get_conn(self):
        if self._in_transaction:
            return self._connection()
        raise RuntimeError(
            "No active transaction. Wrap calls in a `with service.transaction():` block."
        )

    def _translate(self, conn, e: psycopg2.Error) -> Exception:
        if conn.closed:
            return DatabaseConnectionError(f"Database connection was lost: {e}")
        return StatementError(str(e).strip())

    @contextmanager
    def transaction(self) -> Iterator[None]:
        conn = self._connection()
        self._in_transaction = True
        try:
            yield
            try:
                conn.commit()
            except psycopg2.Error as e:
                raise self._translate(conn, e) from e
        except Exception:
            if not conn.closed:
                conn.rollback()
            raise
        finally:
            self._in_transaction = False

    def execute(self, sql: str, params: Params | None = None) -> list[Row]:
        conn = self._get_conn()
        try:
            with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
                cur.execute(sql, params or ())
                if cur.description is None:
                    return []
                return [dict(row) for row in cur.fetchall()]
        except psycopg2.Error as e:
            raise self._translate(conn, e) from e

    def execute_write(self, sql: str, params: Params | None = None) -> int:
        conn = self._get_conn()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params or ())
                return cur.rowcount
        except psycopg2.Error as e:
            raise self._translate(conn, e) from e

    def execute_ddl(self, sql: str) -> None:
        conn = self._connection()
        try:
            with conn.cursor() as cur:
                for statement in sql.split(";"):
                    statement = statement.strip()
                    if statement:
                        cur.execute(statement)
            conn.commit()
        except psycopg2.Error as e:
            if not conn.closed:
                conn.rollback()
            raise self._translate(conn, e) from e
