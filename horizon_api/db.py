"""SQLite connection and transaction helpers."""

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager

from horizon_api import config, entity_db, node_db, workspace_db

DB_PATH = config.HORIZON_DB_PATH


def connect() -> sqlite3.Connection:
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def transaction() -> Iterator[sqlite3.Connection]:
    """Yield a connection whose writes commit together or not at all."""
    conn = connect()
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_all() -> None:
    """initialize all sqlite tables."""
    with transaction() as conn:
        workspace_db.init_db(conn)
        node_db.init_db(conn)
        entity_db.init_db(conn)
