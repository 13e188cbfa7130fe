"""SQLite configuration store.

Holds channel definitions, their program lists and runtime settings.
The scheduling core never touches the database; callers load Channel
values here and pass them in.
"""

import logging
import os
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager

from channelarr.config import get_db_path

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS channels (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    number TEXT NOT NULL DEFAULT '1',
    channel_group TEXT NOT NULL DEFAULT 'Virtual',
    mode TEXT NOT NULL DEFAULT 'shuffle',
    library_ids JSON NOT NULL DEFAULT '[]',
    enabled INTEGER NOT NULL DEFAULT 1,
    image_url TEXT,
    anchor TEXT NOT NULL DEFAULT '1970-01-01T00:00:00+00:00',
    revision INTEGER NOT NULL DEFAULT 0,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS channel_programs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    channel_id TEXT NOT NULL REFERENCES channels(id) ON DELETE CASCADE,
    position INTEGER NOT NULL,
    item_id TEXT NOT NULL,
    name TEXT NOT NULL,
    runtime_ticks INTEGER NOT NULL DEFAULT 0
);

CREATE INDEX IF NOT EXISTS idx_channel_programs_channel
    ON channel_programs (channel_id, position);

CREATE TABLE IF NOT EXISTS settings (
    id INTEGER PRIMARY KEY CHECK (id = 1),
    guide_days INTEGER DEFAULT 3,
    preview_hours INTEGER DEFAULT 24,
    enrichment_timeout_seconds REAL DEFAULT 10.0,
    catalog_cache_ttl_seconds INTEGER DEFAULT 300
);

INSERT OR IGNORE INTO settings (id) VALUES (1);
"""


def connect(db_path: str | None = None) -> sqlite3.Connection:
    """Open a connection with Row access and foreign keys enabled."""
    conn = sqlite3.connect(db_path or get_db_path(), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_db(db_path: str | None = None) -> Iterator[sqlite3.Connection]:
    """Connection context: commits on success, rolls back on error."""
    conn = connect(db_path)
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db(db_path: str | None = None) -> None:
    """Create the schema if it does not exist."""
    path = db_path or get_db_path()
    directory = os.path.dirname(path)
    if directory and path != ":memory:":
        os.makedirs(directory, exist_ok=True)

    with get_db(path) as conn:
        init_schema(conn)
    logger.info("[DB] Database ready at %s", path)


def init_schema(conn: sqlite3.Connection) -> None:
    """Apply the schema to an open connection (used by tests with :memory:)."""
    conn.executescript(SCHEMA)


__all__ = ["SCHEMA", "connect", "get_db", "init_db", "init_schema"]
