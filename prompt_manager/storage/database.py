"""SQLite connection, schema management, and transaction helper.

Architectural role:
    Owns the single `sqlite3` connection used by every repository module in
    `prompt_manager.storage`. Repository functions receive a `Database` and
    run their statements through `Database.transaction()`.

Concurrency model:
    FastAPI executes sync endpoints on a worker thread pool, so the connection
    is opened with `check_same_thread=False` and every transaction holds a
    re-entrant lock. Writes are therefore serialized, and a read-then-write
    sequence inside one transaction sees a consistent snapshot.

Schema evolution:
    Tables are created with `CREATE TABLE IF NOT EXISTS`; columns added after
    the first release are appended through `ensure_column` so older database
    files keep working.

Side effects:
    Creates the database file (and its parent directory) on first connect.
"""

import logging
import os
import sqlite3
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone

from prompt_manager.storage.settings import seed_settings


logger = logging.getLogger(__name__)


SCHEMA = """
CREATE TABLE IF NOT EXISTS category (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    order_index INTEGER NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS phrase (
    id TEXT PRIMARY KEY,
    category_id TEXT NOT NULL,
    text TEXT NOT NULL,
    favorite INTEGER NOT NULL DEFAULT 0,
    order_index INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    FOREIGN KEY (category_id) REFERENCES category(id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS prompt_saved (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    content TEXT NOT NULL,
    tokens_json TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS prompt_history (
    id TEXT PRIMARY KEY,
    content TEXT NOT NULL,
    tokens_json TEXT,
    created_at TEXT NOT NULL,
    source TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS app_settings (
    id INTEGER PRIMARY KEY,
    prompt_output_path TEXT NOT NULL,
    join_mode TEXT NOT NULL,
    lm_base_url TEXT NOT NULL,
    lm_api_key TEXT NOT NULL,
    lm_model TEXT,
    lm_temperature REAL NOT NULL,
    lm_top_p REAL NOT NULL,
    lm_top_k INTEGER NOT NULL,
    lm_use_temperature INTEGER NOT NULL,
    lm_use_top_p INTEGER NOT NULL,
    lm_use_top_k INTEGER NOT NULL
);
"""

# Columns introduced after the initial schema: (table, column, declaration).
LATE_COLUMNS = [
    ("phrase", "order_index", "INTEGER NOT NULL DEFAULT 0"),
    ("prompt_saved", "tokens_json", "TEXT"),
    ("prompt_history", "tokens_json", "TEXT"),
    ("app_settings", "lm_temperature", "REAL NOT NULL DEFAULT 0.2"),
    ("app_settings", "lm_top_p", "REAL NOT NULL DEFAULT 0.9"),
    ("app_settings", "lm_top_k", "INTEGER NOT NULL DEFAULT 40"),
    ("app_settings", "lm_use_temperature", "INTEGER NOT NULL DEFAULT 1"),
    ("app_settings", "lm_use_top_p", "INTEGER NOT NULL DEFAULT 1"),
    ("app_settings", "lm_use_top_k", "INTEGER NOT NULL DEFAULT 1"),
]


def now_iso() -> str:
    """Return the current UTC time as an ISO-8601 string with milliseconds."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_id() -> str:
    return str(uuid.uuid4())


class Database:
    """Lazily opened, lock-guarded SQLite connection.

    Args:
        path: Database file path, or `":memory:"` for a private in-memory store.
    """

    def __init__(self, path: str):
        self.path = path
        self._conn = None
        self._lock = threading.RLock()

    @property
    def conn(self) -> sqlite3.Connection:
        with self._lock:
            if self._conn is None:
                self._conn = self._connect()
            return self._conn

    def _connect(self) -> sqlite3.Connection:
        if self.path != ":memory:":
            parent = os.path.dirname(os.path.abspath(self.path))
            os.makedirs(parent, exist_ok=True)

        conn = sqlite3.connect(self.path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode = WAL")
        conn.execute("PRAGMA foreign_keys = ON")

        conn.executescript(SCHEMA)
        for table, column, declaration in LATE_COLUMNS:
            ensure_column(conn, table, column, declaration)

        seed_settings(conn)
        backfill_phrase_order(conn)
        conn.commit()

        logger.info("Database ready at %s", self.path)
        return conn

    @contextmanager
    def transaction(self):
        """Yield the connection under the lock; commit on success, roll back on error."""
        with self._lock:
            conn = self.conn
            try:
                yield conn
            except Exception:
                conn.rollback()
                raise
            else:
                conn.commit()

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None


def ensure_column(conn: sqlite3.Connection, table: str, column: str, declaration: str) -> None:
    """Add `column` to `table` when an older database file lacks it."""
    columns = conn.execute(f"PRAGMA table_info({table})").fetchall()
    if not any(row["name"] == column for row in columns):
        logger.info("Adding missing column %s.%s", table, column)
        conn.execute(f"ALTER TABLE {table} ADD COLUMN {column} {declaration}")


def backfill_phrase_order(conn: sqlite3.Connection) -> None:
    """Assign creation-order positions to phrases stored without one.

    Phrases of each category are walked in `created_at` order; rows whose
    `order_index` is 0 or NULL receive their 1-based position.
    """
    categories = conn.execute("SELECT id FROM category").fetchall()
    for category in categories:
        phrases = conn.execute(
            "SELECT id, order_index FROM phrase WHERE category_id = ? ORDER BY created_at ASC",
            (category["id"],),
        ).fetchall()
        for index, phrase in enumerate(phrases, start=1):
            if not phrase["order_index"]:
                conn.execute(
                    "UPDATE phrase SET order_index = ? WHERE id = ?",
                    (index, phrase["id"]),
                )
