"""
Backend base interfaces for shapedb.

This module defines the minimal contract that every database backend
(SQLite, Postgres, test doubles) must satisfy.

It is intentionally light-weight:

- It does NOT depend on any specific DB driver.
- It only encodes the structural requirements assumed by:
      * shapedb.db.connection.DBConnection
      * shapedb.db.connection.connect
      * shapedb.core.DB  (placeholder style for generated SQL)

Backends must expose:

    backend.placeholder                  -> "?" or "%s"
    backend.helpers                      -> module with:
                                              - safe_execute(conn, query, params)
                                              - safe_execute_for_count(conn, query, params)
                                              - column_names(cursor)
    backend.connect(username, password)  -> raw DB-API connection
    backend.last_insert_id(conn, cursor) -> identifier or None

This file provides:
- DBBackend: abstract base class
- BackendLike: structural protocol
- ensure_backend: runtime validator
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional, Protocol, runtime_checkable

from . import helpers


# ---------------------------------------------------------------------------
# Abstract Base Backend
# ---------------------------------------------------------------------------

class DBBackend(ABC):
    """
    Abstract base class for a shapedb backend.

    A backend is built from an already-resolved DSN (database name
    substituted) and knows how to open one raw connection for it.

    Subclasses set:

        name         short label used in logs ("sqlite", "postgres")
        placeholder  positional paramstyle marker used by generated SQL
    """

    name: str = "abstract"
    placeholder: str = "?"

    def __init__(self, dsn: str):
        self.dsn = dsn

    @property
    def helpers(self) -> Any:
        """
        Return the helper module associated with this backend.

        Normally this is shapedb.db.helpers, but test backends may
        provide compatible modules.
        """
        return helpers

    @abstractmethod
    def connect(self, username: Optional[str] = None, password: Optional[str] = None) -> Any:
        """
        Open and return a new raw DB-API 2.0 connection.

        Implementations must leave the driver in its raising mode: every
        backend error surfaces as an exception.
        """
        raise NotImplementedError

    def last_insert_id(self, conn: Any, cursor: Any) -> Optional[Any]:
        """
        Identifier assigned by the backend to the row just inserted
        through `cursor`, or None if the backend cannot tell.

        Default: DB-API's optional cursor.lastrowid.
        """
        return getattr(cursor, "lastrowid", None)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name})"


# ---------------------------------------------------------------------------
# Structural Protocol
# ---------------------------------------------------------------------------

@runtime_checkable
class BackendLike(Protocol):
    """
    Structural protocol for objects usable as a shapedb backend.

    This lets DBConnection drive a backend without knowing the concrete
    implementation (fakes in tests need not subclass DBBackend).
    """

    placeholder: str
    helpers: Any

    def connect(self, username: Optional[str] = None, password: Optional[str] = None) -> Any:
        ...

    def last_insert_id(self, conn: Any, cursor: Any) -> Optional[Any]:
        ...


# ---------------------------------------------------------------------------
# Runtime Guard
# ---------------------------------------------------------------------------

def ensure_backend(backend: Any) -> BackendLike:
    """
    Validate that an object behaves like a shapedb backend.

    Raises:
        TypeError if required attributes are missing.
    """
    if not isinstance(backend, BackendLike):
        missing = [
            attr
            for attr in ("placeholder", "helpers", "connect", "last_insert_id")
            if not hasattr(backend, attr)
        ]
        if missing:
            raise TypeError(
                f"Invalid shapedb backend {backend!r}: missing attributes {missing}"
            )

    return backend  # type: ignore[return-value]


__all__ = [
    "DBBackend",
    "BackendLike",
    "ensure_backend",
]
