#!/usr/bin/env python3
# keycraft/boot/boot.py
from __future__ import annotations
"""
Boot sequence for KeyCraft.

Each step prints a Linux-style status line ([  OK  ] / [FAILED]). A failing
step re-raises; the caller decides the exit status.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable
import logging
import platform

from keycraft.commands import REGISTRY
from keycraft.db.config import AppConfig, load_config
from keycraft.db.vault import KeyStore
from keycraft.interface.loader import load_commands
from keycraft.plugins.keys.entrypoint import bind_store
from keycraft.security import resolve_db_path
from keycraft.ui import colorize, enable_windows_vt, init_logger, print_line, set_terminal_title


@dataclass(slots=True)
class BootState:
    config: AppConfig
    logger: logging.Logger
    store: KeyStore
    db_path: Path
    loaded_count: int


def _step(label: str, fn: Callable[[], Any], *, quiet: bool = False) -> Any:
    """Run a boot step with status output."""
    try:
        out = fn()
    except Exception as exc:
        print_line(
            colorize(f"[FAILED] {label} ({type(exc).__name__}: {exc})", "red")
        )
        raise
    if not quiet:
        print_line(colorize(f"[  OK  ] {label}", "green"))
    return out


def boot_sequence(config: AppConfig | None = None, *, quiet: bool = False) -> BootState:
    """
    Bring the application up: config, data dir, logging, key store, commands.

    `quiet` hides the [  OK  ] lines (failures are always printed).
    """
    _step("Enable ANSI sequences", enable_windows_vt, quiet=quiet)
    _step(
        f"Detect environment: {platform.system()} {platform.release()} / Python {platform.python_version()}",
        lambda: None,
        quiet=quiet,
    )

    if config is None:
        config = _step("Load configuration", load_config, quiet=quiet)
    db_path = _step(
        f"Prepare data directory {config.data_path}",
        lambda: resolve_db_path(config),
        quiet=quiet,
    )
    logger = _step(
        "Initialize logger",
        lambda: init_logger("keycraft", config.log_level, config.log_file_path),
        quiet=quiet,
    )

    store = KeyStore()
    _step(f"Open key store {db_path.name}",
          lambda: store.initialize(db_path), quiet=quiet)

    try:
        loaded_count = _step("Load commands", load_commands, quiet=quiet)
        _step(f"Bind key store to {len(REGISTRY.all())} commands",
              lambda: bind_store(store, reveal_secrets=config.reveal_secrets),
              quiet=quiet)
    except Exception:
        store.close()
        raise

    set_terminal_title("KeyCraft")
    logger.debug("Boot complete: %d plugin modules, db=%s", loaded_count, db_path)

    return BootState(
        config=config,
        logger=logger,
        store=store,
        db_path=db_path,
        loaded_count=loaded_count,
    )
