"""
SQLite backend for shapedb.

Used for:
    - local development
    - tests
    - small single-file databases

DSN forms (PDO style, database name already substituted):

    sqlite::memory:          in-memory database
    sqlite:                  in-memory database
    sqlite:/var/data/app.db  file database
    sqlite:app.db            file database, relative path
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Optional

from .backend_base import DBBackend

logger = logging.getLogger(__name__)

MEMORY = ":memory:"


def sqlite_path_from_dsn(dsn: str) -> str:
    """
    Strip the "sqlite:" prefix and return the database path.
    An empty remainder means an in-memory database.
    """
    scheme, _, rest = dsn.partition(":")
    if scheme.lower() != "sqlite":
        raise ValueError(f"Not a sqlite DSN: {dsn!r}")
    return rest or MEMORY


# ----------------------------------------------------------------------
# Backend implementation
# ----------------------------------------------------------------------

class SQLiteBackend(DBBackend):
    """
    Minimal SQLite backend.

    Parameters
    ----------
    dsn : str
        "sqlite:<path>" or "sqlite::memory:".
    """

    name = "sqlite"
    placeholder = "?"

    def __init__(self, dsn: str):
        super().__init__(dsn)
        self.path = sqlite_path_from_dsn(dsn)

    # ------------------------------------------------------------------
    # Connection handling
    # ------------------------------------------------------------------

    def connect(self, username: Optional[str] = None, password: Optional[str] = None) -> sqlite3.Connection:
        """
        Open a SQLite3 connection in autocommit mode.

        SQLite has no notion of credentials; username/password are
        accepted for interface parity and ignored.
        Also ensures foreign keys are enforced.
        """
        conn = sqlite3.connect(self.path, isolation_level=None)
        conn.execute("PRAGMA foreign_keys = ON;")
        logger.debug("Opened sqlite database %s", self.path)
        return conn
