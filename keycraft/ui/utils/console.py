#!/usr/bin/env python3
# keycraft/ui/utils/console.py
from __future__ import annotations

import ctypes
import os
import sys
import threading

# Single shared print mutex for all UI output (REPL output + log handler).
PRINT_MUTEX = threading.Lock()


def print_line(text: str = "", *, file=None, flush: bool = False) -> None:
    """Thread-safe single-line print."""
    out = file if file is not None else sys.stdout
    with PRINT_MUTEX:
        out.write(f"{text}\n")
        if flush:
            out.flush()


def set_terminal_title(title_text: str) -> None:
    """Set the terminal window title; no-op when stdout is not a terminal."""
    if os.name == "nt":
        try:
            ctypes.windll.kernel32.SetConsoleTitleW(  # type: ignore[attr-defined]
                title_text)
        except (AttributeError, OSError):
            pass
        return
    if sys.stdout.isatty():
        sys.stdout.write(f"\x1b]2;{title_text}\x07")
        sys.stdout.flush()
