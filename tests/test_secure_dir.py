"""Tests for keycraft.security.secure_dir."""

from __future__ import annotations

import os
import stat

import pytest

from keycraft.db.config import load_config
from keycraft.db.vault import StorageUnavailable
from keycraft.security import ensure_data_dir, resolve_db_path


class TestEnsureDataDir:
    def test_creates_nested_directory(self, tmp_path):
        target = tmp_path / "a" / "b"
        assert ensure_data_dir(target) == target.resolve()
        assert target.is_dir()

    def test_idempotent(self, tmp_path):
        ensure_data_dir(tmp_path / "d")
        ensure_data_dir(tmp_path / "d")
        assert (tmp_path / "d").is_dir()

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_owner_only_permissions(self, tmp_path):
        target = ensure_data_dir(tmp_path / "private")
        assert stat.S_IMODE(target.stat().st_mode) == 0o700

    def test_failure_is_storage_unavailable(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")
        with pytest.raises(StorageUnavailable, match="Failed to create app data directory"):
            ensure_data_dir(blocker / "child")


class TestResolveDbPath:
    def test_returns_file_inside_data_dir(self, clean_env):
        cfg = load_config(environ={
            "KEYCRAFT_DATA_PATH": str(clean_env / "vault"),
            "KEYCRAFT_DB_FILENAME": "keys.db",
        })
        db_path = resolve_db_path(cfg)
        assert db_path == (clean_env / "vault").resolve() / "keys.db"
        assert db_path.parent.is_dir()
        assert not db_path.exists()
