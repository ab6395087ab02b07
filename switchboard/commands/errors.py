#!/usr/bin/env python3
# switchboard/commands/errors.py
from __future__ import annotations

"""Exception taxonomy for the command console."""

from typing import Sequence


class SwitchboardError(Exception):
    """Base class for console errors."""


class DuplicateCommandError(SwitchboardError, ValueError):
    """A command path equals, or overlaps word-for-word with, a registered one."""

    def __init__(self, joined: str, existing: str) -> None:
        self.joined = joined
        self.existing = existing
        super().__init__(
            f"Command '{joined}' already registered (or something close enough: '{existing}').")


class NoSuchCommandError(SwitchboardError):
    """A typed line resolved to no command. Returned by the dispatcher, not raised."""

    def __init__(self, words: Sequence[str], suggestion: str = "") -> None:
        self.words = tuple(words)
        self.suggestion = suggestion
        super().__init__(f"No such command '{' '.join(self.words)}'")


class TokenizeError(SwitchboardError, MemoryError):
    """The tokenizer could not allocate its working buffer."""


class ModuleLoadError(SwitchboardError):
    """A loadable module could not be imported or registered."""


class ModuleUnloadError(SwitchboardError):
    """A loaded module refused or failed to unload."""
