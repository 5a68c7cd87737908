from __future__ import annotations

import os
import sqlite3
from datetime import datetime
from typing import Callable, Optional

SCHEMA_PATH = os.path.join(os.path.dirname(__file__), "schema.sql")


def _connect(db_path: str) -> sqlite3.Connection:
    folder = os.path.dirname(db_path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(db_path: str) -> None:
    conn = _connect(db_path)
    try:
        with open(SCHEMA_PATH, "r", encoding="utf-8") as f:
            conn.executescript(f.read())
        conn.commit()
    finally:
        conn.close()


class SqliteCounterStore:
    """Counter values live in the `counters` table, one row per key."""

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path
        init_db(db_path)

    def read(self, key: str) -> Optional[str]:
        conn = _connect(self.db_path)
        try:
            row = conn.execute("SELECT value FROM counters WHERE key = ?", (key,)).fetchone()
            return str(row["value"]) if row else None
        finally:
            conn.close()

    def write(self, key: str, value: str) -> None:
        updated_at = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        conn = _connect(self.db_path)
        try:
            conn.execute(
                "INSERT INTO counters(key, value, updated_at) VALUES(?,?,?) "
                "ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at",
                (key, value, updated_at),
            )
            conn.commit()
        finally:
            conn.close()

    def swap(self, key: str, update: Callable[[Optional[str]], str]) -> Optional[str]:
        """
        Read the value, store update(value), return what was read.
        BEGIN IMMEDIATE takes the write lock before the read, so every process
        sharing the file sees a different value.
        """
        updated_at = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        conn = _connect(self.db_path)
        try:
            conn.execute("BEGIN IMMEDIATE")
            row = conn.execute("SELECT value FROM counters WHERE key = ?", (key,)).fetchone()
            old = str(row["value"]) if row else None
            conn.execute(
                "INSERT INTO counters(key, value, updated_at) VALUES(?,?,?) "
                "ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at",
                (key, update(old), updated_at),
            )
            conn.commit()
            return old
        except Exception:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise
        finally:
            conn.close()
