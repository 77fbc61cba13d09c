"""Tests for keycraft.db.config."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from keycraft.db.config import DEFAULTS, default_data_path, load_config


class TestDefaults:
    def test_defaults(self, clean_env):
        cfg = load_config(environ={})
        assert cfg.db_filename == DEFAULTS["DB_FILENAME"]
        assert cfg.log_level == "INFO"
        assert cfg.log_file_path is None
        assert cfg.prompt is None
        assert cfg.show_banner is True
        assert cfg.reveal_secrets is False
        assert cfg.data_path == Path(default_data_path()).resolve()
        assert cfg.db_path == cfg.data_path / "keycraft.db"
        assert cfg.history_path == cfg.data_path / ".history"

    @pytest.mark.skipif(os.name == "nt", reason="POSIX layout")
    def test_xdg_data_home(self, clean_env, monkeypatch):
        monkeypatch.setenv("XDG_DATA_HOME", str(clean_env / "xdg"))
        assert Path(default_data_path()) == clean_env / "xdg" / "keycraft"


class TestPrecedence:
    def test_toml_beats_defaults(self, clean_env):
        (clean_env / "config.toml").write_text('[log]\nlevel = "debug"\n')
        assert load_config(environ={}).log_level == "DEBUG"

    def test_env_beats_toml(self, clean_env):
        (clean_env / "config.toml").write_text('LOG_LEVEL = "DEBUG"\n')
        cfg = load_config(environ={"KEYCRAFT_LOG_LEVEL": "warning"})
        assert cfg.log_level == "WARNING"

    def test_toml_beats_json(self, clean_env):
        (clean_env / "config.json").write_text(json.dumps({"PROMPT": "json> "}))
        (clean_env / "config.toml").write_text('PROMPT = "toml> "\n')
        assert load_config(environ={}).prompt == "toml> "

    def test_dotenv_strips_prefix(self, clean_env):
        (clean_env / ".env").write_text(
            "# comment\nexport KEYCRAFT_SHOW_BANNER=no\nKEYCRAFT_PROMPT='vault> '\n")
        cfg = load_config(environ={})
        assert cfg.show_banner is False
        assert cfg.prompt == "vault> "

    def test_unprefixed_env_is_ignored(self, clean_env):
        cfg = load_config(environ={"LOG_LEVEL": "DEBUG"})
        assert cfg.log_level == "INFO"

    def test_unknown_keys_land_in_extra(self, clean_env):
        cfg = load_config(environ={"KEYCRAFT_COLOR_SCHEME": "dark"})
        assert cfg.extra == {"COLOR_SCHEME": "dark"}


class TestPaths:
    def test_relative_log_file_resolves_under_data_path(self, clean_env):
        cfg = load_config(environ={
            "KEYCRAFT_DATA_PATH": str(clean_env / "vault"),
            "KEYCRAFT_LOG_FILE_PATH": "logs/keycraft.log",
        })
        assert cfg.data_path == (clean_env / "vault").resolve()
        assert cfg.log_file_path == (clean_env / "vault" / "logs" / "keycraft.log").resolve()

    def test_no_directory_created(self, clean_env):
        load_config(environ={"KEYCRAFT_DATA_PATH": str(clean_env / "later")})
        assert not (clean_env / "later").exists()


class TestValidation:
    def test_invalid_log_level(self, clean_env):
        with pytest.raises(ValueError, match="LOG_LEVEL"):
            load_config(environ={"KEYCRAFT_LOG_LEVEL": "LOUD"})

    def test_invalid_bool(self, clean_env):
        with pytest.raises(ValueError, match="boolean"):
            load_config(environ={"KEYCRAFT_REVEAL_SECRETS": "maybe"})

    def test_db_filename_must_be_bare(self, clean_env):
        with pytest.raises(ValueError, match="DB_FILENAME"):
            load_config(environ={"KEYCRAFT_DB_FILENAME": "../elsewhere.db"})
