"""
shapedb

A small convenience layer over a DB-API connection that hands back
results in the shape the query produced: a bare value, a record, a list,
or a key/value dict. Single-table CRUD helpers build parameterized SQL
from plain records.

Submodules include:
    - config    DBConfig + loaders
    - db/       connection provider, backends, statement helpers
    - results   result normalizer
    - records   record adapters and row shapes
    - errors    error taxonomy
    - core      DB façade
"""

from .config import DBConfig, config_from_settings, load_config
from .core import DB, create_db
from .errors import (
    ConnectionClosedError,
    DBConnectionError,
    DBError,
    ExecutionError,
    MissingKeyError,
    ShapeMismatchError,
)
from .records import RecordShape

__all__ = [
    "DB",
    "create_db",
    "DBConfig",
    "load_config",
    "config_from_settings",
    "RecordShape",
    "DBError",
    "DBConnectionError",
    "ConnectionClosedError",
    "ExecutionError",
    "ShapeMismatchError",
    "MissingKeyError",
]
