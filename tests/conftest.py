import sys
from pathlib import Path

import pytest

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from shapedb import DB, DBConfig  # noqa: E402


BOX_SQL = [
    "DROP TABLE IF EXISTS box",
    'CREATE TABLE "box" ("id" INTEGER PRIMARY KEY AUTOINCREMENT, "name" TEXT UNIQUE, '
    '"fiddlybit" TEXT, "fiddlynum" INTEGER DEFAULT 42)',
    "INSERT INTO box VALUES (1, 'bob', 'banana', 42)",
    "INSERT INTO box VALUES (2, 'agatha', 'foobar', 99)",
    "INSERT INTO box VALUES (3, 'coyote', 'nota bene', 1)",
]


def seed_box(db: DB) -> DB:
    for statement in BOX_SQL:
        db.execute(statement)
    return db


@pytest.fixture()
def make_db():
    """Factory for seeded in-memory databases; closes everything it opened."""
    opened = []

    def _make(**overrides) -> DB:
        db = DB(DBConfig(dsn="sqlite::memory:", **overrides))
        opened.append(db)
        return seed_box(db)

    yield _make

    for db in opened:
        db.close()


@pytest.fixture()
def db(make_db):
    return make_db()
