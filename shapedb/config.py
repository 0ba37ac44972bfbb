"""
Configuration for shapedb.

This module centralizes configuration for:

    - the DSN template and database-name substitution
    - credentials
    - the shape of multi-column rows
    - feature flags (logging)

It provides:
    DBConfig               – structured, immutable config object
    load_config()          – load from environment variables or defaults
    config_from_settings() – load from a host framework's settings mapping
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from .records import RecordShape

DEFAULT_DSN = "sqlite::memory:"


@dataclass(frozen=True)
class DBConfig:
    """
    Canonical configuration for a shapedb.DB instance.

    Attributes
    ----------
    dsn:
        Driver connection string. "@" marks where database_name goes,
        e.g. "pgsql:host=localhost;dbname=@" or "sqlite:/srv/@.db".

    database_name:
        Substituted for "@" in dsn when given.

    username, password:
        Credentials, if the backend needs them.

    record_shape:
        How multi-column rows are materialized (object, mapping, tuple).

    enable_logging:
        Whether construction should switch on basic INFO logging.
    """

    dsn: str = DEFAULT_DSN
    database_name: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    record_shape: RecordShape = RecordShape.OBJECT
    enable_logging: bool = False

    def __post_init__(self):
        # frozen: normalise string shapes through object.__setattr__
        object.__setattr__(self, "record_shape", RecordShape.parse(self.record_shape))


def _env_flag(name: str, default: bool) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return val.strip().lower() in ("1", "true", "yes", "on")


def load_config() -> DBConfig:
    """
    Load DBConfig from environment variables, falling back to defaults.

    Recognized variables:
        SHAPEDB_DSN              (DSN template)
        SHAPEDB_DATABASE         (substituted for "@")
        SHAPEDB_USER
        SHAPEDB_PASSWORD
        SHAPEDB_RECORD_SHAPE     (object|mapping|tuple)
        SHAPEDB_ENABLE_LOGGING   ("true" / "false" / "1" / "0")

    Returns
    -------
    DBConfig
    """
    return DBConfig(
        dsn=os.getenv("SHAPEDB_DSN", DEFAULT_DSN),
        database_name=os.getenv("SHAPEDB_DATABASE") or None,
        username=os.getenv("SHAPEDB_USER") or None,
        password=os.getenv("SHAPEDB_PASSWORD") or None,
        record_shape=RecordShape.parse(
            os.getenv("SHAPEDB_RECORD_SHAPE", RecordShape.OBJECT.value)
        ),
        enable_logging=_env_flag("SHAPEDB_ENABLE_LOGGING", default=False),
    )


def config_from_settings(settings: Mapping[str, Any]) -> DBConfig:
    """
    Build a DBConfig from a host application's string-keyed settings.

    Recognized keys:
        dsn           DSN template (required in practice; defaults to in-memory SQLite)
        db_name       substituted for "@"
        db_user
        db_password
        fetch_style   record shape (object|mapping|tuple)

    The mapping is read once; later changes to it are not observed.
    """
    return DBConfig(
        dsn=settings.get("dsn") or DEFAULT_DSN,
        database_name=settings.get("db_name") or None,
        username=settings.get("db_user") or None,
        password=settings.get("db_password") or None,
        record_shape=settings.get("fetch_style") or RecordShape.OBJECT,
        enable_logging=bool(settings.get("enable_logging", False)),
    )


__all__ = [
    "DEFAULT_DSN",
    "DBConfig",
    "load_config",
    "config_from_settings",
]
