#!/usr/bin/env python3
# keycraft/interface/cli.py
from __future__ import annotations

"""
Interactive input frontends.

Selection order:
    1) prompt_toolkit (rich completion + history)
    2) readline (basic completion + history)
    3) plain input (last resort)
"""

import logging
from pathlib import Path
from typing import Optional

from keycraft.db.config import AppConfig
from .completion import _split_current_token, suggest

logger = logging.getLogger(__name__)

DEFAULT_PROMPT = "keycraft> "


class BaseCLI:
    """
    Plain `input()` frontend; base class for the richer ones.

    Subclasses override:
        - setup()
        - get_line()
        - teardown()

    Usable as a context manager to guarantee teardown.
    """

    def __init__(self, prompt: str | None = None,
                 history_path: Path | None = None,
                 enable_completion: bool = True) -> None:
        self.prompt_text = prompt or DEFAULT_PROMPT
        self.history_path = history_path
        self.enable_completion = enable_completion

    def setup(self) -> None:
        if self.history_path is not None:
            try:
                self.history_path.parent.mkdir(parents=True, exist_ok=True)
                self.history_path.touch(exist_ok=True)
            except OSError as exc:
                logger.warning("History disabled (%s): %s", self.history_path, exc)
                self.history_path = None

    def get_line(self) -> str:
        return input(self.prompt_text)

    def teardown(self) -> None:
        pass

    def __enter__(self) -> "BaseCLI":
        self.setup()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.teardown()


# ===== Preferred: prompt_toolkit =====
class PromptToolkitCLI(BaseCLI):
    """Rich line editor with history and live completion."""

    def __init__(self, prompt: str | None = None,
                 history_path: Path | None = None,
                 enable_completion: bool = True) -> None:
        super().__init__(prompt, history_path, enable_completion)
        from prompt_toolkit import PromptSession
        from prompt_toolkit.completion import Completer, Completion
        from prompt_toolkit.key_binding import KeyBindings

        self._session_cls = PromptSession
        self._session = None

        class _Completer(Completer):
            def get_completions(self, document, complete_event):
                text_before_cursor = document.text_before_cursor
                _, current_prefix = _split_current_token(text_before_cursor)
                # replace exactly the current token
                for word in suggest(text_before_cursor):
                    yield Completion(word, start_position=-len(current_prefix))

        self._completer = _Completer() if enable_completion else None

        kb = KeyBindings()

        @kb.add("backspace")
        def _(event):
            b = event.app.current_buffer
            if b.read_only():
                return
            if b.selection_state:
                b.delete_selection()
            else:
                b.delete_before_cursor(1)
            if self._completer is not None:
                b.start_completion(select_first=False)

        self._key_bindings = kb

    def setup(self) -> None:
        from prompt_toolkit.history import FileHistory, InMemoryHistory

        super().setup()
        history = (FileHistory(str(self.history_path))
                   if self.history_path is not None else InMemoryHistory())
        self._session = self._session_cls(
            history=history,
            completer=self._completer,
            complete_while_typing=self._completer is not None,
            key_bindings=self._key_bindings,
        )

    def get_line(self) -> str:
        if self._session is None:
            self.setup()
        return self._session.prompt(self.prompt_text)


# ===== Fallback: readline =====
class ReadlineCLI(BaseCLI):
    """Fallback editor with basic completion and history."""

    def __init__(self, prompt: str | None = None,
                 history_path: Path | None = None,
                 enable_completion: bool = True) -> None:
        super().__init__(prompt, history_path, enable_completion)
        import readline

        self.readline = readline

    def setup(self) -> None:
        super().setup()
        if self.history_path is not None:
            try:
                self.readline.read_history_file(str(self.history_path))
            except OSError:
                pass

        if not self.enable_completion:
            return

        # '=' stays inside tokens for key=value completion
        self.readline.set_completer_delims(" \t\n")

        def _complete(text_fragment: str, state_index: int) -> Optional[str]:
            candidates = suggest(self.readline.get_line_buffer())
            matches = [word for word in candidates if word.startswith(text_fragment)]
            return matches[state_index] if state_index < len(matches) else None

        self.readline.set_completer(_complete)
        self.readline.parse_and_bind("tab: complete")

    def teardown(self) -> None:
        if self.history_path is None:
            return
        try:
            self.readline.write_history_file(str(self.history_path))
        except OSError as exc:
            logger.debug("Could not write history: %s", exc)


def make_cli(config: AppConfig | None = None) -> BaseCLI:
    """Select the best available CLI frontend at runtime."""
    options = {}
    if config is not None:
        options = {
            "prompt": config.prompt,
            "history_path": config.history_path,
            "enable_completion": config.enable_completion,
        }
    try:
        return PromptToolkitCLI(**options)
    except ImportError:
        logger.debug("prompt_toolkit unavailable; trying readline")
    try:
        return ReadlineCLI(**options)
    except ImportError:
        return BaseCLI(**options)
