#!/usr/bin/env python3
# keycraft/security/secure_dir.py
from __future__ import annotations
"""
Per-user data directory management.

The data directory holds the key database, the REPL history and (optionally)
the log file. It is created on first use with owner-only permissions.

Notes:
- Windows: the folder is marked HIDDEN + NOT_CONTENT_INDEXED so the
  database does not end up in search indexes.
- POSIX: the folder is chmod 0700.
- Hardening is best-effort; only failing to create the folder is fatal.
"""

import ctypes
import os
from pathlib import Path

from keycraft.db.config import AppConfig, default_data_path
from keycraft.db.vault.errors import StorageUnavailable

# Win32 file attribute flags (used to hide the directory and prevent indexing)
_FILE_ATTRIBUTE_HIDDEN = 0x2
_FILE_ATTRIBUTE_NOT_CONTENT_INDEXED = 0x2000


def _windows_hide(path: Path) -> None:
    """Best-effort: set HIDDEN and NOT_CONTENT_INDEXED on Windows paths."""
    if os.name != "nt":
        return
    try:
        ctypes.windll.kernel32.SetFileAttributesW(  # type: ignore[attr-defined]
            str(path),
            _FILE_ATTRIBUTE_HIDDEN | _FILE_ATTRIBUTE_NOT_CONTENT_INDEXED,
        )
    except (AttributeError, OSError):
        pass


def _restrict_permissions(path: Path) -> None:
    if os.name == "nt":
        _windows_hide(path)
        return
    try:
        os.chmod(path, 0o700)
    except OSError:
        pass


def default_data_root() -> Path:
    """Default data directory: %LOCALAPPDATA%/KeyCraft or ~/.local/share/keycraft."""
    return Path(default_data_path())


def ensure_data_dir(path: str | os.PathLike[str] | None = None) -> Path:
    """
    Create the data directory (and parents) if missing, then tighten it.

    Raises:
        StorageUnavailable: the directory cannot be created.
    """
    root = Path(path) if path is not None else default_data_root()
    existed = root.is_dir()
    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise StorageUnavailable.io(
            f"Failed to create app data directory: {exc}") from exc
    if not existed:
        _restrict_permissions(root)
    return root.resolve()


def resolve_db_path(config: AppConfig) -> Path:
    """Ensure the configured data directory exists; return the database file path."""
    root = ensure_data_dir(config.data_path)
    return root / config.db_filename
