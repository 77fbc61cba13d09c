#!/usr/bin/env python3
# keycraft/ui/static/logging.py
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from keycraft.ui.utils import ANSI, PRINT_MUTEX, enable_windows_vt, strip_ansi


class ColorizingStreamHandler(logging.StreamHandler):
    """
    StreamHandler that colors records by level when the console speaks ANSI,
    and writes plain text otherwise. Shares PRINT_MUTEX with REPL output.
    """

    _LEVEL_COLORS = {
        logging.DEBUG: ANSI["bright_black"],
        logging.INFO: "",
        logging.WARNING: ANSI["yellow"],
        logging.ERROR: ANSI["red"],
        logging.CRITICAL: ANSI["magenta"],
    }

    def __init__(self, stream=None) -> None:
        super().__init__(stream)
        isatty = getattr(self.stream, "isatty", lambda: False)
        self._use_ansi = enable_windows_vt() and bool(isatty())

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            if self._use_ansi:
                color = self._LEVEL_COLORS.get(record.levelno, "")
                if color:
                    message = f"{color}{message}{ANSI['reset']}"
            else:
                message = strip_ansi(message)
            with PRINT_MUTEX:
                self.stream.write(message + self.terminator)
                self.flush()
        except Exception:
            self.handleError(record)


class PlainFormatter(logging.Formatter):
    """Formatter that strips ANSI from the rendered line (for log files).

    The record itself is left untouched; other handlers still see the colors.
    """

    def format(self, record: logging.LogRecord) -> str:
        return strip_ansi(super().format(record))


def init_logger(
    name: str = "keycraft",
    level: int | str = logging.INFO,
    logfile: Optional[str | Path] = None,
) -> logging.Logger:
    """
    Initialize the application logger.

    Console: stderr, colored when possible.
    File (optional): rotating, plain text, UTF-8, always at DEBUG.
    Calling it again only adjusts the level; handlers are not duplicated.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG if logfile else level)
    logger.propagate = False

    console = next(
        (h for h in logger.handlers if isinstance(h, ColorizingStreamHandler)), None)
    if console is None:
        console = ColorizingStreamHandler(stream=sys.stderr)
        console.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        logger.addHandler(console)
    console.setLevel(level)

    if logfile and not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        Path(logfile).parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            logfile, maxBytes=2_000_000, backupCount=3, encoding="utf-8"
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            PlainFormatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(file_handler)

    return logger
