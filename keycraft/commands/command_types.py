#!/usr/bin/env python3
# keycraft/commands/command_types.py
from __future__ import annotations

"""
Command data structures.

This module defines:
- CommandCallback: the callable protocol for any command implementation.
- CompletionProvider: callable returning value suggestions for one argument.
- CommandResult: result container returned by key commands.
- Command: a registered command with metadata and a callable.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Protocol


class CommandCallback(Protocol):
    def __call__(self, *args: Any, **kwargs: Any) -> Any:  # pragma: no cover - signature only
        ...


CompletionProvider = Callable[..., Iterable[str]]


@dataclass(slots=True)
class CommandResult:
    """
    Result of a command run.

    Attributes:
        ok: True if the command completed successfully.
        message: Text shown to the user.
        data: Machine-readable payload (e.g. ApiKey.to_dict() output).
    """
    ok: bool = True
    message: str = ""
    data: Any = None

    def __str__(self) -> str:
        return self.message if self.message else ("ok" if self.ok else "error")


@dataclass(slots=True)
class Command:
    """
    A registered command.

    Important fields:
        name: Primary unique command name (kebab-case).
        callback: Function implementing the command.
        category: Group shown by `help`.
        completers: 'param' or 'posN' -> value suggestion provider.
        aliases: Extra names resolving to the same command.
        param_names: Parameter names taken from the callback signature.
    """

    name: str
    description: str
    example: str
    callback: CommandCallback
    module: str = field(default="", repr=False)
    category: str = "general"
    completers: Mapping[str, CompletionProvider] = field(default_factory=dict)
    aliases: list[str] = field(default_factory=list)
    param_names: list[str] = field(default_factory=list)

    def invoke(self, *args: Any, **kwargs: Any) -> Any:
        return self.callback(*args, **kwargs)
