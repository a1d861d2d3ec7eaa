"""Database error hierarchy.

Backends translate driver exceptions into these so callers never depend on
sqlite3 or psycopg2 exception types.
"""


class DatabaseError(Exception):
    """Base exception for database service failures."""


class StatementError(DatabaseError):
    """A single statement failed; the connection is still usable."""


class DatabaseConnectionError(DatabaseError):
    """The connection could not be established or was lost."""
