#!/usr/bin/env python3
# switchboard/interface/cli.py
from __future__ import annotations

"""
Interactive input frontends.

Selection order:
    1) prompt_toolkit (live completion + history)
    2) readline (tab completion + history)
    3) plain input (last resort)

Both completing frontends ask the same completion engine the dispatcher
agrees with, so whatever completes also dispatches.
"""

from pathlib import Path
from typing import Optional

from switchboard.interface.completion import candidates, complete
from switchboard.interface.parser import split_current_word

DEFAULT_PROMPT = "*CLI> "
DEFAULT_HISTORY_FILE_PATH = Path.home() / ".switchboard_history"


class BaseCLI:
    """
    Base interface for CLI frontends; on its own it is the plain-input fallback.

    Subclasses may override:
        - setup()
        - get_line()
        - teardown()

    This base also provides context manager support to guarantee teardown.
    """

    def __init__(self, prompt: str = DEFAULT_PROMPT, history_file: Optional[Path] = None) -> None:
        self.prompt = prompt
        self.history_file = history_file or DEFAULT_HISTORY_FILE_PATH

    def setup(self) -> None:
        pass

    def get_line(self) -> str:
        return input(self.prompt)

    def teardown(self) -> None:
        pass

    # Context manager helpers
    def __enter__(self) -> "BaseCLI":
        self.setup()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.teardown()
        except OSError:
            pass


# ===== Preferred: prompt_toolkit =====
class PromptToolkitCLI(BaseCLI):
    """Line editor with history and live completion."""

    def __init__(self, prompt: str = DEFAULT_PROMPT, history_file: Optional[Path] = None) -> None:
        super().__init__(prompt, history_file)
        from prompt_toolkit import PromptSession
        from prompt_toolkit.completion import Completer, Completion
        from prompt_toolkit.history import FileHistory

        class _Completer(Completer):
            def get_completions(self, document, complete_event):
                text_before_cursor = document.text_before_cursor
                _, current_word = split_current_word(text_before_cursor)
                for word in candidates(text_before_cursor, current_word):
                    # replace exactly the word under the cursor
                    yield Completion(word, start_position=-len(current_word))

        self._completer = _Completer()
        self._history_cls = FileHistory
        self._session_cls = PromptSession
        self._session = None

    def setup(self) -> None:
        self.history_file.touch(exist_ok=True)
        self._session = self._session_cls(
            history=self._history_cls(str(self.history_file)),
            completer=self._completer,
            complete_while_typing=False,
        )

    def get_line(self) -> str:
        if self._session is None:
            self.setup()
        return self._session.prompt(self.prompt)  # type: ignore[union-attr]


def readline_completion(buffer_text: str, text_fragment: str, state: int) -> Optional[str]:
    """
    Readline completer body.

    Readline hands over the text after the last space, which inside a quoted
    argument is only part of the word the tokenizer sees (`Ph` of `"My Ph`).
    Completion runs on the tokenizer's word; each candidate is cut back to
    the part that replaces `text_fragment`.
    """
    _, current_word = split_current_word(buffer_text)
    candidate = complete(buffer_text, current_word, state)
    if candidate is None:
        return None
    typed = text_fragment.replace('"', "")
    head = len(current_word) - len(typed)
    if head > 0:
        return candidate[head:]
    if text_fragment.startswith('"'):
        return '"' + candidate
    return candidate


# ===== Fallback: readline =====
class ReadlineCLI(BaseCLI):
    """Fallback editor with tab completion and history."""

    def __init__(self, prompt: str = DEFAULT_PROMPT, history_file: Optional[Path] = None) -> None:
        super().__init__(prompt, history_file)
        import readline  # type: ignore[attr-defined]

        self.readline = readline

    def setup(self) -> None:
        self.history_file.touch(exist_ok=True)
        try:
            self.readline.read_history_file(str(self.history_file))
        except OSError:
            pass

        # Words split on whitespace only, matching the tokenizer
        self.readline.set_completer_delims(" \t\n")

        def _complete(text_fragment: str, state_index: int) -> Optional[str]:
            buffer_text = self.readline.get_line_buffer()[:self.readline.get_endidx()]
            return readline_completion(buffer_text, text_fragment, state_index)

        self.readline.set_completer(_complete)
        self.readline.parse_and_bind("tab: complete")

    def teardown(self) -> None:
        try:
            self.readline.write_history_file(str(self.history_file))
        except OSError:
            pass


def make_cli(prompt: str = DEFAULT_PROMPT, history_file: Optional[Path] = None,
             *, enable_completion: bool = True) -> BaseCLI:
    """
    Factory to select the best available CLI frontend at runtime.
    """
    if not enable_completion:
        return BaseCLI(prompt, history_file)
    # Try prompt_toolkit first
    try:
        return PromptToolkitCLI(prompt, history_file)
    except ImportError:
        # Try readline
        try:
            return ReadlineCLI(prompt, history_file)
        except ImportError:
            # Last resort: plain input with no completion or history
            return BaseCLI(prompt, history_file)
