from __future__ import annotations

"""
Core façade for shapedb.

DB is the single, high-level entrypoint. It wraps one live connection and
offers:

    - raw execution          query(), execute()
    - shaped reads           read(), read_set(), read_hash()
    - single-table CRUD      insert(), update(), delete(), save(), get()

Values are always bound as statement parameters. Table and column names
are interpolated into the SQL text as-is, so they must come from trusted
code, never from end users. The same holds for the condition string
accepted by get().

Example:

    with DB.from_dsn("sqlite:/srv/@.db", database_name="inventory") as db:
        new_id = db.insert("box", {"name": "dora", "fiddlynum": 7})
        box = db.get("box", new_id)
        names = db.read_hash("SELECT id, name FROM box")
"""

import logging
from contextlib import closing
from dataclasses import replace
from typing import Any, Dict, List, Optional

from .config import DBConfig, load_config
from .db import BackendLike, DBConnection, connect
from .errors import MissingKeyError
from .records import RecordShape, to_record
from .results import read_many, read_one, read_pairs

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# DB façade
# ---------------------------------------------------------------------------

class DB:
    """
    Shape-aware convenience layer over one database connection.

    One instance owns one connection; it is not safe to share across
    threads without external locking.

    Attributes
    ----------
    config:
        DBConfig used to construct this instance. Read once.

    conn:
        DBConnection wrapping the live driver handle.
    """

    def __init__(self, config: DBConfig, *, backend: Optional[BackendLike] = None):
        if config.enable_logging:
            logging.basicConfig(level=logging.INFO)
            logger.info("Initializing DB with config: %s", config)

        self.config = config
        self.record_shape = config.record_shape
        self.conn: Optional[DBConnection] = None
        self.conn = connect(config, backend=backend)

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_config(
        cls,
        config: Optional[DBConfig] = None,
        database_name: Optional[str] = None,
    ) -> "DB":
        """
        Construct a DB from a DBConfig (or the environment when omitted).

        database_name, when given, replaces the configured one.
        """
        cfg = config or load_config()
        if database_name:
            cfg = replace(cfg, database_name=database_name)
        return cls(cfg)

    @classmethod
    def from_dsn(
        cls,
        dsn: str,
        database_name: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        record_shape: RecordShape = RecordShape.OBJECT,
    ) -> "DB":
        return cls(
            DBConfig(
                dsn=dsn,
                database_name=database_name,
                username=username,
                password=password,
                record_shape=record_shape,
            )
        )

    @classmethod
    def from_env(cls) -> "DB":
        """Construct DB using environment variables."""
        return cls(load_config())

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def connection(self) -> Optional[Any]:
        """The raw driver connection, for direct use. None once closed."""
        return self.conn.raw if self.conn is not None else None

    @property
    def closed(self) -> bool:
        return self.conn is None or self.conn.closed

    def close(self) -> None:
        """Close the connection. Safe to call repeatedly."""
        if self.conn is not None:
            self.conn.close()

    def __enter__(self) -> "DB":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def __del__(self):
        # __init__ may have failed before the connection existed
        if getattr(self, "conn", None) is not None:
            self.close()

    # ------------------------------------------------------------------
    # Raw execution
    # ------------------------------------------------------------------

    def query(self, sql: str, params: Optional[Any] = None):
        """
        Execute a statement and return the live cursor.

        params may be a single value, a list/tuple for positional
        placeholders, or a mapping for named placeholders. Usually
        read(), read_set() and read_hash() are more convenient.
        """
        return self.conn.execute(sql, params)

    def execute(self, sql: str, params: Optional[Any] = None) -> int:
        """Execute a statement and return the count of affected rows."""
        return self.conn.execute_for_count(sql, params)

    # ------------------------------------------------------------------
    # Shaped reads
    # ------------------------------------------------------------------

    def read(self, sql: str, params: Optional[Any] = None) -> Optional[Any]:
        """
        Read a single record.

        Returns the bare value for a one-column query, otherwise a record
        in the configured shape. None when no row matches.
        """
        with closing(self.query(sql, params)) as cur:
            return read_one(cur, self.record_shape)

    def read_set(self, sql: str, params: Optional[Any] = None) -> List[Any]:
        """
        Read every record: a list of values for a one-column query,
        otherwise a list of records.
        """
        with closing(self.query(sql, params)) as cur:
            return read_many(cur, self.record_shape)

    def read_hash(self, sql: str, params: Optional[Any] = None) -> Dict[Any, Any]:
        """
        Read a two-column query as {first column: second column}.

        Raises ShapeMismatchError for any other column count.
        """
        with closing(self.query(sql, params)) as cur:
            return read_pairs(cur)

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def insert(self, table: str, data: Any) -> Optional[Any]:
        """
        Insert one record and return the id the backend assigned to it
        (None if the backend cannot report one).
        """
        record = to_record(data)
        columns = ", ".join(record)
        values = ", ".join([self.conn.placeholder] * len(record))
        sql = f"INSERT INTO {table} ({columns}) VALUES ({values})"
        with closing(self.query(sql, list(record.values()))) as cur:
            return self.conn.last_insert_id(cur)

    def update(self, table: str, data: Any, key: str = "id") -> int:
        """
        Update the row whose `key` column matches the record's key value.

        Every column in the record is written, the key column included.
        Returns the count of affected rows.
        """
        record = to_record(data)
        if record.get(key) is None:
            raise MissingKeyError(table, key, operation="update")

        mark = self.conn.placeholder
        assignments = ", ".join(f"{col} = {mark}" for col in record)
        sql = f"UPDATE {table} SET {assignments} WHERE {key} = {mark}"
        params = list(record.values())
        params.append(record[key])
        return self.execute(sql, params)

    def delete(self, table: str, id_value: Any, key: str = "id") -> int:
        """Delete the row(s) whose `key` column equals id_value."""
        sql = f"DELETE FROM {table} WHERE {key} = {self.conn.placeholder}"
        return self.execute(sql, [id_value])

    def save(self, table: str, data: Any, key: str = "id") -> Optional[Any]:
        """
        Insert or update, depending only on whether the record carries a
        key value. The database is not consulted.

        Returns the new id after an insert, or the affected-row count
        after an update.
        """
        record = to_record(data)
        if record.get(key) is None:
            record.pop(key, None)
            return self.insert(table, record)
        return self.update(table, record, key)

    def get(
        self,
        table: str,
        where: Any,
        key: str = "id",
        params: Optional[Any] = None,
    ) -> Any:
        """
        Read all columns of one or more rows.

        Two call forms:

            db.get("box", 2)                        # row with id = 2, or None
            db.get("box", 2, key="box_id")
            db.get("box", "id >= 100 AND id < 200") # list of rows
            db.get("box", "id >= ? AND id < ?", params=[x, y])

        A string `where` is ALWAYS taken as a raw condition, so tables with
        string primary keys must use the condition form:
        db.get("user", "login = ?", params="ada").
        """
        sql = f"SELECT * FROM {table} WHERE "
        if isinstance(where, str):
            return self.read_set(sql + where, params)
        return self.read(sql + f"{key} = {self.conn.placeholder}", [where])


# ---------------------------------------------------------------------------
# Convenience
# ---------------------------------------------------------------------------

def create_db(
    config: Optional[DBConfig] = None,
    database_name: Optional[str] = None,
) -> DB:
    """
    Convenience constructor used by services / scripts.
    """
    return DB.from_config(config, database_name=database_name)


__all__ = [
    "DB",
    "create_db",
]
