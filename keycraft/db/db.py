#!/usr/bin/env python3
# keycraft/db/db.py
from __future__ import annotations
"""
SQLite plumbing for the key store.

One file, one table. The file lives in the per-user data directory:
  Windows: %LOCALAPPDATA%/KeyCraft/keycraft.db
  POSIX:   ~/.local/share/keycraft/keycraft.db
"""

import sqlite3
from pathlib import Path

DB_FILENAME = "keycraft.db"

# ---------- schema ----------

SCHEMA = """
CREATE TABLE IF NOT EXISTS api_keys (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    vendor TEXT NOT NULL,
    value TEXT NOT NULL,
    masked_value TEXT NOT NULL,
    base_url TEXT,
    doc_url TEXT,
    code_snippets TEXT,
    tags TEXT,
    notes TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_api_keys_created ON api_keys(created_at DESC);
"""

COLUMNS: tuple[str, ...] = (
    "id", "name", "vendor", "value", "masked_value", "base_url", "doc_url",
    "code_snippets", "tags", "notes", "created_at", "updated_at",
)


def open_connection(path: str | Path) -> sqlite3.Connection:
    """Open (creating if absent) the database file with WAL + relaxed sync."""
    conn = sqlite3.connect(str(path), check_same_thread=False)
    try:
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA synchronous=NORMAL;")
    except sqlite3.Error:
        conn.close()
        raise
    return conn


def initialize_schema(conn: sqlite3.Connection) -> None:
    conn.executescript(SCHEMA)
    conn.commit()


def journal_mode(conn: sqlite3.Connection) -> str:
    row = conn.execute("PRAGMA journal_mode;").fetchone()
    return str(row[0]).lower()


def synchronous_mode(conn: sqlite3.Connection) -> int:
    """PRAGMA synchronous as a number (0 OFF, 1 NORMAL, 2 FULL, 3 EXTRA)."""
    row = conn.execute("PRAGMA synchronous;").fetchone()
    return int(row[0])
