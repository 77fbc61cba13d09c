"""Tests for keycraft.ui table rendering and logger setup."""

from __future__ import annotations

import logging

from keycraft.ui import (
    ColorizingStreamHandler,
    PlainFormatter,
    colorize,
    format_table,
    init_logger,
    strip_ansi,
)


class TestFormatTable:
    def test_headers_and_rows(self):
        text = format_table([["a", "bb"]], headers=["X", "Y"])
        lines = text.splitlines()
        assert lines[0] == lines[-1]
        assert lines[1] == "| X | Y  |"
        assert lines[3] == "| a | bb |"

    def test_none_renders_empty(self):
        assert "| x |  |" in format_table([["x", None]], border=False)

    def test_truncation(self):
        text = format_table([["abcdefghij"]], max_cell_width=5, border=False)
        assert "abcd…" in text

    def test_colored_cells_keep_alignment(self):
        text = format_table([[colorize("ok", "green")], ["long"]], border=False)
        widths = {len(strip_ansi(line)) for line in text.splitlines()}
        assert len(widths) == 1


class TestInitLogger:
    def test_idempotent(self):
        logger = init_logger("keycraft", "DEBUG")
        init_logger("keycraft", "WARNING")
        consoles = [h for h in logger.handlers if isinstance(h, ColorizingStreamHandler)]
        assert len(consoles) == 1
        assert consoles[0].level == logging.WARNING

    def test_log_file(self, tmp_path):
        logfile = tmp_path / "logs" / "keycraft.log"
        logger = init_logger("keycraft", "WARNING", logfile)
        logger.getChild("db").debug("written to file only")
        for handler in logger.handlers:
            handler.flush()
        assert "written to file only" in logfile.read_text(encoding="utf-8")

    def test_file_formatter_leaves_record_colored(self, tmp_path):
        logfile = tmp_path / "keycraft.log"
        logger = init_logger("keycraft", "CRITICAL", logfile)
        seen: list[str] = []

        class _Recorder(logging.Handler):
            def emit(self, record):
                seen.append(record.getMessage())

        logger.addHandler(_Recorder())
        logger.warning(colorize("colored", "red"))
        for handler in logger.handlers:
            handler.flush()

        assert seen == [colorize("colored", "red")]
        assert "\x1b[" not in logfile.read_text(encoding="utf-8")
        assert "colored" in logfile.read_text(encoding="utf-8")


class TestPlainFormatter:
    def test_does_not_mutate_record(self):
        record = logging.LogRecord("keycraft", logging.INFO, __file__, 1,
                                   colorize("%s done", "green"), ("step",), None)
        assert PlainFormatter("%(message)s").format(record) == "step done"
        assert record.msg == colorize("%s done", "green")
