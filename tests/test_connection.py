"""
Connection provider, statement helpers and backends.
"""

import psycopg2
import psycopg2.errors
import pytest

from shapedb import DB, DBConfig, DBConnectionError
from shapedb.db import (
    PostgresBackend,
    SQLiteBackend,
    backend_for_dsn,
    ensure_backend,
    normalize_params,
    resolve_dsn,
)
from shapedb.db.postgres_backend import libpq_dsn
from shapedb.db.sqlite_backend import sqlite_path_from_dsn


class TestResolveDsn:
    def test_substitutes_placeholder(self):
        assert resolve_dsn("pgsql:host=db;dbname=@", "inventory") == "pgsql:host=db;dbname=inventory"

    def test_no_database_name(self):
        assert resolve_dsn("pgsql:host=db;dbname=@") == "pgsql:host=db;dbname=@"

    def test_no_placeholder(self):
        assert resolve_dsn("sqlite::memory:", "inventory") == "sqlite::memory:"


class TestBackendSelection:
    @pytest.mark.parametrize(
        "dsn, backend_cls",
        [
            ("sqlite::memory:", SQLiteBackend),
            ("SQLITE:/tmp/x.db", SQLiteBackend),
            ("pgsql:host=db;dbname=app", PostgresBackend),
            ("postgresql://u@db/app", PostgresBackend),
            ("postgres://db/app", PostgresBackend),
        ],
    )
    def test_scheme(self, dsn, backend_cls):
        assert isinstance(backend_for_dsn(dsn), backend_cls)

    def test_unknown_scheme(self):
        with pytest.raises(DBConnectionError):
            backend_for_dsn("oracle:whatever")

    def test_sqlite_paths(self):
        assert sqlite_path_from_dsn("sqlite::memory:") == ":memory:"
        assert sqlite_path_from_dsn("sqlite:") == ":memory:"
        assert sqlite_path_from_dsn("sqlite:/srv/app.db") == "/srv/app.db"


class TestNormalizeParams:
    def test_shapes(self):
        assert normalize_params(None) == ()
        assert normalize_params(5) == (5,)
        assert normalize_params(0) == (0,)
        assert normalize_params("abc") == ("abc",)
        assert normalize_params([1, 2]) == (1, 2)
        assert normalize_params((1,)) == (1,)
        assert normalize_params({"id": 3}) == {"id": 3}


class TestLibpqDsn:
    def test_uri_passthrough(self):
        assert libpq_dsn("postgresql://u:p@db:5432/app") == "postgresql://u:p@db:5432/app"

    def test_pdo_style(self):
        assert libpq_dsn("pgsql:host=localhost; port=5432;dbname=app;") == (
            "host=localhost port=5432 dbname=app"
        )

    def test_quotes_values(self):
        assert libpq_dsn("pgsql:host=db;application_name=my app") == (
            "host=db application_name='my app'"
        )

    def test_malformed_segment(self):
        with pytest.raises(ValueError):
            libpq_dsn("pgsql:host")


# ----------------------------------------------------------------------
# Postgres backend against a fake psycopg2 connection
# ----------------------------------------------------------------------

class FakePgCursor:
    def __init__(self, conn):
        self.conn = conn
        self.description = None
        self.rowcount = 1
        self.lastrowid = 0

    def execute(self, query, params=None):
        self.conn.statements.append((query, params))
        if query == "SELECT lastval()":
            if self.conn.lastval is None:
                raise psycopg2.errors.ObjectNotInPrerequisiteState("lastval is not yet defined")
            self.description = (("lastval",),)

    def fetchone(self):
        return (self.conn.lastval,)

    def close(self):
        pass


class FakePgConnection:
    def __init__(self, dsn, **kwargs):
        self.dsn = dsn
        self.kwargs = kwargs
        self.autocommit = False
        self.statements = []
        self.lastval = 7
        self.closed = False

    def cursor(self):
        return FakePgCursor(self)

    def close(self):
        self.closed = True


@pytest.fixture()
def fake_pg(monkeypatch):
    made = []

    def _connect(dsn, **kwargs):
        conn = FakePgConnection(dsn, **kwargs)
        made.append(conn)
        return conn

    monkeypatch.setattr(psycopg2, "connect", _connect)
    return made


class TestPostgresBackend:
    def test_connect_passes_credentials(self, fake_pg):
        raw = PostgresBackend("pgsql:host=db;dbname=app").connect("ada", "secret")
        assert raw.dsn == "host=db dbname=app"
        assert raw.kwargs == {"user": "ada", "password": "secret"}
        assert raw.autocommit is True

    def test_db_uses_percent_placeholders(self, fake_pg):
        db = DB.from_dsn("pgsql:host=db;dbname=@", database_name="inventory", username="ada")
        try:
            new_id = db.insert("box", {"name": "dora", "fiddlynum": 3})
            db.update("box", {"id": 7, "name": "eve"})
        finally:
            db.close()

        conn = fake_pg[0]
        assert conn.dsn == "host=db dbname=inventory"
        assert conn.closed
        assert new_id == 7
        assert conn.statements[0] == (
            "INSERT INTO box (name, fiddlynum) VALUES (%s, %s)",
            ("dora", 3),
        )
        assert conn.statements[2] == (
            "UPDATE box SET id = %s, name = %s WHERE id = %s",
            (7, "eve", 7),
        )

    def test_insert_without_sequence_has_no_id(self, fake_pg):
        db = DB.from_dsn("postgresql://db/app")
        fake_pg[0].lastval = None
        try:
            assert db.insert("tag", {"label": "x"}) is None
        finally:
            db.close()

    def test_connect_failure_wrapped(self, monkeypatch):
        def _refuse(dsn, **kwargs):
            raise psycopg2.OperationalError("could not connect to server")

        monkeypatch.setattr(psycopg2, "connect", _refuse)
        with pytest.raises(DBConnectionError) as exc:
            DB.from_dsn("pgsql:host=nowhere;dbname=app")
        assert isinstance(exc.value.__cause__, psycopg2.OperationalError)


# ----------------------------------------------------------------------
# Injected backends
# ----------------------------------------------------------------------

def test_ensure_backend_rejects_incomplete_objects():
    with pytest.raises(TypeError, match="missing attributes"):
        ensure_backend(object())


def test_injected_backend_is_used(tmp_path):
    backend = SQLiteBackend(f"sqlite:{tmp_path}/injected.db")
    with DB(DBConfig(dsn="mysql:ignored"), backend=backend) as db:
        assert db.read("SELECT 40 + 2") == 42
    assert (tmp_path / "injected.db").exists()
