#!/usr/bin/env python3
# keycraft/db/vault/keystore.py
from __future__ import annotations

"""SQLite key store: one connection, one lock, four operations.

Operations:
- add(record)      -> new row; id, masked_value and timestamps assigned here.
- list_all()       -> every row, newest first.
- update(record)   -> full-record replace by id (no existence check).
- delete(id)       -> remove by id (missing id is not an error).

Notes:
- Every operation holds the store lock for its whole duration, so calls are
  fully serialized. Slow reads block writes and vice versa.
- `code_snippets` / `tags` are stored as the JSON encoding of the optional
  string (`null` or a JSON string literal). On read, a value that fails to
  decode is replaced by None for that row only; the rest of the listing is
  returned. This is lossy on purpose: one corrupt row must not hide the others.
- `update` returns the caller's record with the recomputed fields. It does
  not re-read the row, so it cannot tell whether a row was actually changed.
"""

import json
import logging
import sqlite3
import threading
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from keycraft.db.db import COLUMNS, initialize_schema, open_connection
from .errors import DecodeFailure, EncodeFailure, NotInitialized, StorageUnavailable
from .models import REQUIRED_FIELDS, STRUCTURED_FIELDS, ApiKey

logger = logging.getLogger(__name__)

_SELECT = f"SELECT {', '.join(COLUMNS)} FROM api_keys"


# ==== Derived fields ============================================================

def mask_value(value: str) -> str:
    """Display form of a secret: 'sk-...IJKL' when longer than 7 chars, else '***'."""
    if len(value) > 7:
        return f"{value[:3]}...{value[-4:]}"
    return "***"


def _now_iso() -> str:
    # fixed microsecond width keeps the text sortable
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


# ==== Field codecs ==============================================================

def _check_required(record: ApiKey) -> None:
    for name in REQUIRED_FIELDS:
        if not isinstance(getattr(record, name), str):
            raise EncodeFailure(f"{name} must be text")


def _encode_field(name: str, value: object) -> str:
    if value is not None and not isinstance(value, str):
        raise EncodeFailure(
            f"{name} must be text or None, got {type(value).__name__}")
    try:
        return json.dumps(value)
    except (TypeError, ValueError) as exc:
        raise EncodeFailure(f"{name}: {exc}") from exc


def _decode_field(name: str, raw: object) -> Optional[str]:
    if raw is None:
        return None
    try:
        decoded = json.loads(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise DecodeFailure(f"{name}: {exc}") from exc
    if decoded is not None and not isinstance(decoded, str):
        raise DecodeFailure(
            f"{name}: expected a JSON string, got {type(decoded).__name__}")
    return decoded


def _row_to_key(row: sqlite3.Row) -> ApiKey:
    structured: dict[str, Optional[str]] = {}
    for name in STRUCTURED_FIELDS:
        try:
            structured[name] = _decode_field(name, row[name])
        except DecodeFailure as exc:
            logger.warning(
                "Key %s: unreadable %s, using empty value (%s)", row["id"], name, exc)
            structured[name] = None

    return ApiKey(
        id=row["id"],
        name=row["name"],
        vendor=row["vendor"],
        value=row["value"],
        masked_value=row["masked_value"],
        base_url=row["base_url"],
        doc_url=row["doc_url"],
        code_snippets=structured["code_snippets"],
        tags=structured["tags"],
        notes=row["notes"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


# ==== Store =====================================================================

class KeyStore:
    """
    Owns the single database connection and the lock around it.

    The raw connection never leaves this object; callers only see the
    operations below. Create one per process at startup, call
    `initialize(path)`, and hand the instance to whatever dispatches host
    requests.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._conn: sqlite3.Connection | None = None
        self._path: Path | None = None

    # ---------------- lifecycle ----------------

    @property
    def path(self) -> Path | None:
        return self._path

    @property
    def is_initialized(self) -> bool:
        return self._conn is not None

    def initialize(self, path: str | Path) -> None:
        """Open (or create) the database at `path` and ensure the schema.

        Safe to call against an already-initialized file. Calling it again on
        the same store swaps in the new connection and closes the old one.

        Raises:
            StorageUnavailable: directory or file cannot be created/opened.
        """
        db_path = Path(path)
        try:
            db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageUnavailable.io(
                f"Failed to create database directory: {exc}") from exc

        try:
            conn = open_connection(db_path)
        except sqlite3.Error as exc:
            raise StorageUnavailable.database(exc) from exc
        try:
            initialize_schema(conn)
        except sqlite3.Error as exc:
            conn.close()
            raise StorageUnavailable.database(exc) from exc

        with self._lock:
            previous, self._conn = self._conn, conn
            self._path = db_path
        if previous is not None:
            previous.close()
        logger.debug("Key store opened at %s", db_path)

    def close(self) -> None:
        with self._lock:
            conn, self._conn = self._conn, None
        if conn is not None:
            conn.close()
            logger.debug("Key store closed")

    def __enter__(self) -> "KeyStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _require_conn(self) -> sqlite3.Connection:
        # caller holds self._lock
        if self._conn is None:
            raise NotInitialized()
        return self._conn

    # ---------------- operations ----------------

    def add(self, record: ApiKey) -> ApiKey:
        """Persist a new record and return it fully populated.

        Raises:
            NotInitialized: before `initialize`.
            EncodeFailure: a field cannot be stored as text.
            StorageUnavailable: the write failed.
        """
        with self._lock:
            conn = self._require_conn()
            _check_required(record)
            now = _now_iso()
            key = replace(
                record,
                id=str(uuid.uuid4()),
                masked_value=mask_value(record.value),
                created_at=now,
                updated_at=now,
            )
            snippets_json = _encode_field("code_snippets", key.code_snippets)
            tags_json = _encode_field("tags", key.tags)

            try:
                with conn:
                    conn.execute(
                        f"""
                        INSERT INTO api_keys ({', '.join(COLUMNS)})
                        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                        """,
                        (key.id, key.name, key.vendor, key.value, key.masked_value,
                         key.base_url, key.doc_url, snippets_json, tags_json,
                         key.notes, key.created_at, key.updated_at),
                    )
            except sqlite3.Error as exc:
                raise StorageUnavailable.database(exc) from exc

        logger.info("Added key %s (%s / %s) %s",
                    key.id, key.vendor, key.name, key.masked_value)
        return key

    def list_all(self) -> list[ApiKey]:
        """Return every record, newest `created_at` first (empty list if none)."""
        with self._lock:
            conn = self._require_conn()
            try:
                rows = conn.execute(
                    f"{_SELECT} ORDER BY created_at DESC, rowid DESC"
                ).fetchall()
            except sqlite3.Error as exc:
                raise StorageUnavailable.database(exc) from exc
            return [_row_to_key(row) for row in rows]

    def get(self, key_id: str) -> Optional[ApiKey]:
        """Return the record with `key_id`, or None."""
        with self._lock:
            conn = self._require_conn()
            try:
                row = conn.execute(
                    f"{_SELECT} WHERE id=?", (key_id,)).fetchone()
            except sqlite3.Error as exc:
                raise StorageUnavailable.database(exc) from exc
            return _row_to_key(row) if row else None

    def update(self, record: ApiKey) -> ApiKey:
        """Replace every mutable field of the row with id `record.id`.

        `created_at` is left as stored. The returned record is the input with
        `masked_value` and `updated_at` recomputed; it is not re-read, so an
        unknown id still "succeeds" (zero rows touched).
        """
        with self._lock:
            conn = self._require_conn()
            _check_required(record)
            masked_value = mask_value(record.value)
            updated_at = _now_iso()
            snippets_json = _encode_field("code_snippets", record.code_snippets)
            tags_json = _encode_field("tags", record.tags)

            try:
                with conn:
                    cur = conn.execute(
                        """
                        UPDATE api_keys SET
                            name=?, vendor=?, value=?, masked_value=?,
                            base_url=?, doc_url=?, code_snippets=?, tags=?,
                            notes=?, updated_at=?
                        WHERE id=?
                        """,
                        (record.name, record.vendor, record.value, masked_value,
                         record.base_url, record.doc_url, snippets_json, tags_json,
                         record.notes, updated_at, record.id),
                    )
            except sqlite3.Error as exc:
                raise StorageUnavailable.database(exc) from exc

        if cur.rowcount == 0:
            logger.debug("Update matched no key with id %s", record.id)
        else:
            logger.info("Updated key %s %s", record.id, masked_value)
        return replace(record, masked_value=masked_value, updated_at=updated_at)

    def delete(self, key_id: str) -> None:
        """Remove the row with `key_id`; a missing id is a silent success."""
        with self._lock:
            conn = self._require_conn()
            try:
                with conn:
                    cur = conn.execute(
                        "DELETE FROM api_keys WHERE id=?", (key_id,))
            except sqlite3.Error as exc:
                raise StorageUnavailable.database(exc) from exc

        if cur.rowcount:
            logger.info("Deleted key %s", key_id)
        else:
            logger.debug("Delete matched no key with id %s", key_id)
