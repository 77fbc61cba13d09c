"""
Shared fixtures for the keycraft test suite.

Every store lives in a pytest tmp_path; nothing touches the real per-user
data directory.
"""

from __future__ import annotations

import importlib
import logging
import os

import pytest

from keycraft.commands import REGISTRY
from keycraft.db.vault import ApiKey, KeyStore
from keycraft.plugins.keys import entrypoint


@pytest.fixture(autouse=True)
def reset_app_logger():
    """Drop handlers added by init_logger so each test starts unconfigured."""
    yield
    app_logger = logging.getLogger("keycraft")
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()
    app_logger.propagate = True
    app_logger.setLevel(logging.NOTSET)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Drop KEYCRAFT_* variables and run from an empty directory."""
    for key in list(os.environ):
        if key.startswith("KEYCRAFT_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("XDG_DATA_HOME", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def store(tmp_path):
    """An initialized store backed by a fresh database file."""
    key_store = KeyStore()
    key_store.initialize(tmp_path / "data" / "keycraft.db")
    yield key_store
    key_store.close()


@pytest.fixture
def openai_key():
    return ApiKey(name="OpenAI", vendor="OpenAI", value="sk-ABCDEFGHIJKL")


@pytest.fixture
def keys_commands(store):
    """Key commands registered in a clean registry and bound to `store`."""
    REGISTRY.clear()
    importlib.reload(entrypoint)
    entrypoint.bind_store(store)
    yield entrypoint
    entrypoint.bind_store(None)
    REGISTRY.clear()
