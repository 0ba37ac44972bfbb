"""
Error taxonomy for shapedb.

Every failure raised by the package derives from DBError, so callers can
catch the whole family at once or pick out a specific kind:

    DBConnectionError      backend unreachable, bad credentials, bad DSN
    ConnectionClosedError  statement issued after DB.close()
    ExecutionError         driver rejected or failed a statement
    ShapeMismatchError     result column count does not fit the operation
    MissingKeyError        record lacks the primary-key column for an update

An absent row is NOT an error: read()/get() return None for it.
"""

from __future__ import annotations

from typing import Any


class DBError(Exception):
    """Base class for all shapedb errors."""


class DBConnectionError(DBError):
    """Raised when a connection cannot be established."""


class ConnectionClosedError(DBError):
    """Raised when a closed connection is asked to run a statement."""

    def __init__(self, message: str = "Database connection is closed"):
        super().__init__(message)


class ExecutionError(DBError, RuntimeError):
    """
    Wrapped driver failure for a single statement.

    The original driver exception is always chained (``raise ... from e``),
    so the backend's own error type stays reachable via ``__cause__``.
    """

    def __init__(self, message: str, *, query: str, params: Any = None):
        super().__init__(message)
        self.query = query
        self.params = params


class ShapeMismatchError(DBError, ValueError):
    """Raised when a result's column count does not match what is required."""

    def __init__(self, expected: int, actual: int, operation: str = "read_hash"):
        super().__init__(
            f"{operation}() expects {expected} columns returned from query, got {actual}"
        )
        self.expected = expected
        self.actual = actual


class MissingKeyError(DBError, ValueError):
    """Raised when an update is requested for a record without its key column."""

    def __init__(self, table: str, key: str, operation: str = "update"):
        super().__init__(
            f"{operation}() called on {table!r} with data missing primary key ({key})"
        )
        self.table = table
        self.key = key


__all__ = [
    "DBError",
    "DBConnectionError",
    "ConnectionClosedError",
    "ExecutionError",
    "ShapeMismatchError",
    "MissingKeyError",
]
