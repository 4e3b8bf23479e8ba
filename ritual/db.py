"""
SQLite layer for the dashboard.

Habits and logs are stored as two JSON blobs in a tiny key/value table.
Every save replaces a whole blob, so there are no partial writes to recover.
"""

from __future__ import annotations

import json
import logging
import os
import sqlite3
from contextlib import contextmanager, suppress
from typing import Any, Optional

from ritual import config
from ritual.errors import StorageError

logger = logging.getLogger(__name__)

HABITS_KEY = "ritual_habits"
LOGS_KEY = "ritual_logs"


def _resolve(db_path: Optional[str]) -> str:
    return db_path if db_path else config.DB_PATH


def _ensure_parent_dir(path: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)


@contextmanager
def connect(db_path: Optional[str] = None):
    path = _resolve(db_path)
    _ensure_parent_dir(path)
    try:
        conn = sqlite3.connect(path)
    except sqlite3.DatabaseError as e:
        raise StorageError(f"cannot open database {path}: {e}") from e
    conn.row_factory = sqlite3.Row
    try:
        yield conn
        conn.commit()
    except sqlite3.DatabaseError as e:
        with suppress(sqlite3.Error):
            conn.rollback()
        raise StorageError(f"database {path} is unusable: {e}") from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db(db_path: Optional[str] = None) -> None:
    """
    Create the storage table if it doesn't exist yet.
    """
    with connect(db_path) as conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS storage (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL                 -- JSON document
            )
            """
        )


# --- Slots -------------------------------------------------------------------

def load(key: str, db_path: Optional[str] = None) -> Any:
    """
    Return the decoded value stored under `key`, or None on first run.
    """
    with connect(db_path) as conn:
        row = conn.execute("SELECT value FROM storage WHERE key = ?", (key,)).fetchone()
    if row is None:
        return None
    try:
        return json.loads(row["value"])
    except json.JSONDecodeError as e:
        raise StorageError(f"slot '{key}' does not hold valid JSON: {e}") from e


def save(key: str, collection: Any, db_path: Optional[str] = None) -> None:
    payload = json.dumps(collection)
    with connect(db_path) as conn:
        conn.execute(
            """
            INSERT INTO storage (key, value) VALUES (?, ?)
            ON CONFLICT(key) DO UPDATE SET value=excluded.value
            """,
            (key, payload),
        )
    logger.debug("saved %s (%d bytes)", key, len(payload))


def save_many(slots: dict[str, Any], db_path: Optional[str] = None) -> None:
    """
    Write several slots in one transaction.
    """
    payloads = [(key, json.dumps(value)) for key, value in slots.items()]
    with connect(db_path) as conn:
        conn.executemany(
            """
            INSERT INTO storage (key, value) VALUES (?, ?)
            ON CONFLICT(key) DO UPDATE SET value=excluded.value
            """,
            payloads,
        )
    logger.debug("saved %s", ", ".join(key for key, _ in payloads))


def clear(db_path: Optional[str] = None) -> None:
    with connect(db_path) as conn:
        conn.execute("DELETE FROM storage")
    logger.info("storage cleared")


def discard(db_path: Optional[str] = None) -> str:
    """
    Move an unreadable database file aside so a fresh one can be created.
    Returns the path it was moved to.
    """
    path = _resolve(db_path)
    moved = path + ".corrupt"
    os.replace(path, moved)
    for suffix in ("-wal", "-shm", "-journal"):
        with suppress(FileNotFoundError):
            os.remove(path + suffix)
    logger.warning("moved unreadable database to %s", moved)
    return moved
