#!/usr/bin/env python3
# keycraft/commands/__init__.py
from __future__ import annotations

"""
Package for command management and registration.

Provides:
- Data structures (`Command`, `CommandResult`, `CommandCallback`).
- In-memory registry and decorator (`REGISTRY`, `command`).
"""


from .command_types import Command, CommandResult, CommandCallback, CompletionProvider
from .commands import CommandRegistry, REGISTRY, command

__all__ = [
    "Command",
    "CommandResult",
    "CommandCallback",
    "CompletionProvider",
    "CommandRegistry",
    "REGISTRY",
    "command",
]
