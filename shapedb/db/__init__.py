"""
shapedb.db

Connection and statement layer for shapedb.

This package provides:

- The connection provider:
      * connect
      * resolve_dsn
      * backend_for_dsn
      * DBConnection

- Helper functions for parameter binding and execution:
      * normalize_params
      * safe_execute
      * safe_execute_for_count
      * column_names

- Concrete database backend implementations:
      * SQLiteBackend   (default: local development + tests)
      * PostgresBackend (psycopg2)

- Backend contracts:
      * DBBackend
      * BackendLike
      * ensure_backend
"""

from .backend_base import DBBackend, BackendLike, ensure_backend
from .sqlite_backend import SQLiteBackend
from .postgres_backend import PostgresBackend
from .connection import DBConnection, backend_for_dsn, connect, resolve_dsn
from .helpers import (
    normalize_params,
    safe_execute,
    safe_execute_for_count,
    column_names,
)

__all__ = [
    # Connection provider
    "connect",
    "resolve_dsn",
    "backend_for_dsn",
    "DBConnection",

    # Backends
    "SQLiteBackend",
    "PostgresBackend",
    "DBBackend",
    "BackendLike",
    "ensure_backend",

    # Helpers
    "normalize_params",
    "safe_execute",
    "safe_execute_for_count",
    "column_names",
]
