#!/usr/bin/env python3
# keycraft/interface/__init__.py
from __future__ import annotations

"""
Package for interactive console interface and command dispatch.

Provides:
- CLI frontends with history and completion (prompt_toolkit / readline / plain).
- Token-aware completion helpers.
- Parser utilities for binding arguments to command functions.
- Command dispatcher and help formatting.
- Dynamic command loader for the plugins package.
"""


# Completion FIRST (cli depends on it)
from .completion import suggest, BUILT_IN_COMMANDS

from .parser import tokenize, bind_args, build_usage

from .handler import (
    handle_line,
    run_command,
    HELP_TEXT,
    list_categories,
    format_command_help,
)

from .loader import load_commands, PLUGINS_PACKAGE

from .cli import (
    BaseCLI,
    PromptToolkitCLI,
    ReadlineCLI,
    make_cli,
    DEFAULT_PROMPT,
)

__all__ = [
    # completion
    "suggest",
    "BUILT_IN_COMMANDS",
    # parser
    "tokenize",
    "bind_args",
    "build_usage",
    # handler
    "handle_line",
    "run_command",
    "HELP_TEXT",
    "list_categories",
    "format_command_help",
    # loader
    "load_commands",
    "PLUGINS_PACKAGE",
    # cli
    "BaseCLI",
    "PromptToolkitCLI",
    "ReadlineCLI",
    "make_cli",
    "DEFAULT_PROMPT",
]
