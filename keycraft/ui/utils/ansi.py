#!/usr/bin/env python3
# keycraft/ui/utils/ansi.py
from __future__ import annotations

import ctypes
import os
import re
from typing import Optional

# ---- SGR map -----------------------------------------------------------------

ANSI = {
    "reset": "\x1b[0m",
    "bold": "\x1b[1m",
    "dim": "\x1b[2m",
    "underline": "\x1b[4m",

    "red": "\x1b[31m",
    "green": "\x1b[32m",
    "yellow": "\x1b[33m",
    "blue": "\x1b[34m",
    "magenta": "\x1b[35m",
    "cyan": "\x1b[36m",
    "bright_black": "\x1b[90m",
}

ANSI_REGEX = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")
# OSC 8 hyperlink wrapper: ESC ] 8 ; ; url ESC \
_OSC8_REGEX = re.compile(r"\x1b\]8;;.*?\x1b\\")

_vt_enabled_cache: Optional[bool] = None


# ---- Utilities ---------------------------------------------------------------

def strip_ansi(text: str) -> str:
    """Remove SGR sequences and hyperlink wrappers from text."""
    return ANSI_REGEX.sub("", _OSC8_REGEX.sub("", text))


def enable_windows_vt() -> bool:
    """
    Enable ANSI (VT) processing on Windows consoles when possible.
    Returns True if ANSI escapes should work on the current process.
    On non-Windows systems, always returns True.
    """
    global _vt_enabled_cache
    if _vt_enabled_cache is not None:
        return _vt_enabled_cache

    if os.name != "nt":
        _vt_enabled_cache = True
        return True

    if os.environ.get("WT_SESSION") or os.environ.get("TERM", "").startswith("xterm"):
        _vt_enabled_cache = True
        return True

    try:
        kernel32 = ctypes.windll.kernel32  # type: ignore[attr-defined]
        ENABLE_VIRTUAL_TERMINAL_PROCESSING = 0x0004

        def try_enable(handle_id: int) -> bool:
            handle = kernel32.GetStdHandle(handle_id)
            if handle in (0, -1):
                return False
            mode = ctypes.c_uint()
            if not kernel32.GetConsoleMode(handle, ctypes.byref(mode)):
                return False
            return bool(kernel32.SetConsoleMode(
                handle, mode.value | ENABLE_VIRTUAL_TERMINAL_PROCESSING))

        # stdout, stderr
        _vt_enabled_cache = bool(try_enable(-11) or try_enable(-12))
    except (AttributeError, OSError):
        _vt_enabled_cache = False

    return _vt_enabled_cache


def clear_screen() -> None:
    os.system("cls" if os.name == "nt" else "clear")


def colorize(text: str, *styles: str) -> str:
    """
    Wrap text with one or more styles from ANSI (e.g. 'red', 'bold').
    Unknown style names are ignored.
    """
    seq = "".join(ANSI[s] for s in styles if s in ANSI)
    return f"{seq}{text}{ANSI['reset']}" if seq else text

