"""
Connection provider and statement executor for shapedb.

This file defines:
- resolve_dsn:      substitute a database name into a DSN template
- backend_for_dsn:  pick the backend class from the DSN scheme
- connect:          build a live DBConnection from a DBConfig
- DBConnection:     a wrapper around one live database handle
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from ..config import DBConfig
from ..errors import ConnectionClosedError, DBConnectionError
from .backend_base import BackendLike, DBBackend, ensure_backend
from .postgres_backend import PostgresBackend
from .sqlite_backend import SQLiteBackend

logger = logging.getLogger(__name__)

DB_NAME_PLACEHOLDER = "@"

BACKENDS: Dict[str, Callable[[str], DBBackend]] = {
    "sqlite": SQLiteBackend,
    "pgsql": PostgresBackend,
    "postgres": PostgresBackend,
    "postgresql": PostgresBackend,
}


# ----------------------------------------------------------------------
# DSN handling
# ----------------------------------------------------------------------

def resolve_dsn(template: str, database_name: Optional[str] = None) -> str:
    """
    Substitute `database_name` for every "@" in the DSN template.

    With no database name, or no placeholder in the template, the
    template is returned unchanged.
    """
    if not database_name:
        return template
    return template.replace(DB_NAME_PLACEHOLDER, database_name)


def backend_for_dsn(dsn: str) -> DBBackend:
    """
    Instantiate the appropriate backend for a resolved DSN.
    """
    scheme = dsn.partition(":")[0].lower()
    factory = BACKENDS.get(scheme)
    if factory is None:
        raise DBConnectionError(f"Unsupported DSN scheme {scheme!r} in {dsn!r}")
    try:
        return factory(dsn)
    except ValueError as e:
        raise DBConnectionError(str(e)) from e


def connect(config: DBConfig, backend: Optional[BackendLike] = None) -> "DBConnection":
    """
    Open the connection described by `config`.

    `backend` overrides DSN-based backend selection; it must satisfy
    BackendLike.

    Raises
    ------
    DBConnectionError
        Unknown DSN scheme, unreachable backend, bad credentials.
    """
    if backend is None:
        backend = backend_for_dsn(resolve_dsn(config.dsn, config.database_name))
    else:
        backend = ensure_backend(backend)

    try:
        raw = backend.connect(config.username, config.password)
    except Exception as e:
        raise DBConnectionError(f"Could not connect via {backend!r}: {e}") from e

    logger.info("Connected to %r", backend)
    return DBConnection(raw, backend)


# ----------------------------------------------------------------------
# Connection wrapper
# ----------------------------------------------------------------------

class DBConnection:
    """
    Thin wrapper around a raw DB-API 2.0 connection.

    Responsibilities:
        - Provide a stable API for SQL execution
        - Refuse to run anything once closed
        - Report backend-assigned identifiers after inserts

    Notes:
        - Backends open connections in autocommit mode
        - Safe to close() multiple times
    """

    def __init__(self, raw_conn: Any, backend: BackendLike):
        self._raw = raw_conn
        self.backend = backend
        self.helpers = backend.helpers

    @property
    def raw(self) -> Optional[Any]:
        """Underlying driver connection, or None once closed."""
        return self._raw

    @property
    def closed(self) -> bool:
        return self._raw is None

    @property
    def placeholder(self) -> str:
        return self.backend.placeholder

    def _require_open(self) -> Any:
        if self._raw is None:
            raise ConnectionClosedError()
        return self._raw

    # ------------------------------------------------------------------
    # SQL execution wrappers
    # ------------------------------------------------------------------

    def execute(self, query: str, params: Optional[Any] = None):
        """
        Execute a single SQL statement.
        Returns the underlying cursor.
        """
        return self.helpers.safe_execute(self._require_open(), query, params)

    def execute_for_count(self, query: str, params: Optional[Any] = None) -> int:
        """
        Execute a single SQL statement and return the affected-row count.
        """
        return self.helpers.safe_execute_for_count(self._require_open(), query, params)

    def last_insert_id(self, cursor: Any) -> Optional[Any]:
        """
        Identifier the backend assigned to the row inserted via `cursor`.
        """
        return self.backend.last_insert_id(self._require_open(), cursor)

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """
        Close the underlying connection. Further calls are no-ops.
        """
        raw, self._raw = self._raw, None
        if raw is None:
            return
        raw.close()
        logger.info("Closed connection to %r", self.backend)
