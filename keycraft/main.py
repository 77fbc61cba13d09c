#!/usr/bin/env python3
# keycraft/main.py
from __future__ import annotations
"""
`keycraft` console script: boot, then run the REPL or a single command.

Exit codes:
    0  normal exit
    1  boot failure, or a failed `-c` command
"""

import argparse
import sys
from typing import Sequence

from keycraft import __version__
from keycraft.boot import BootState, boot_sequence
from keycraft.db.vault import KeyStoreError
from keycraft.interface import HELP_TEXT, handle_line, make_cli, run_command
from keycraft.plugins.keys.entrypoint import bind_store
from keycraft.ui import colorize, print_line


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="keycraft",
        description="Local API key vault with an interactive shell.",
    )
    parser.add_argument(
        "-c", "--command",
        metavar="LINE",
        help='run one command and exit, e.g. -c "key-list"',
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _print_banner(state: BootState) -> None:
    print_line()
    print_line(colorize(f"KeyCraft {__version__}", "bold", "cyan"))
    print_line(colorize(f"Database: {state.db_path}", "bright_black"))
    print_line("Type 'help' to list command categories. " + HELP_TEXT)
    print_line()


def _run_once(line: str) -> int:
    try:
        output, ok = run_command(line)
    except SystemExit:
        return 0
    if output:
        print_line(output, file=sys.stdout if ok else sys.stderr)
    return 0 if ok else 1


def _repl(state: BootState) -> None:
    if state.config.show_banner:
        _print_banner(state)

    with make_cli(state.config) as cli:
        while True:
            try:
                line = cli.get_line()
            except (EOFError, KeyboardInterrupt):
                print_line()
                break
            try:
                output = handle_line(line)
            except SystemExit:
                break
            if output:
                print_line(output)


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    one_shot = args.command is not None

    try:
        state = boot_sequence(quiet=one_shot)
    except (KeyStoreError, OSError, ValueError, RuntimeError, ImportError):
        # the failing step already printed [FAILED]
        return 1

    try:
        if one_shot:
            return _run_once(args.command)
        _repl(state)
        return 0
    finally:
        bind_store(None)
        state.store.close()
        state.logger.debug("Key store closed, exiting")


if __name__ == "__main__":
    sys.exit(main())
