#!/usr/bin/env python3
# switchboard/commands/command_types.py
from __future__ import annotations

"""
Command data structures and protocols.

This module defines:
- CommandHandler / CompletionGenerator: the callable protocols a subsystem implements.
- CommandResult: what a handler reports back to the dispatcher.
- MatchMode: how typed words are compared against a command's word-path.
- CommandEntry: a registrable command (word-path, handler, help texts, generator).
"""

import enum
from dataclasses import dataclass, field
from typing import Optional, Protocol, Sequence, TextIO

# Upper bound on the number of literal words in one command path.
MAX_CMD_WORDS = 16


class CommandResult(enum.IntEnum):
    """Handler outcome. SHOWUSAGE asks the dispatcher to print the usage text."""
    SUCCESS = 0
    FAILURE = 1
    SHOWUSAGE = 2


class MatchMode(enum.IntEnum):
    """
    Word-path comparison modes used by CommandRegistry.find_command.

    PREFIX:  typed words are a leading part of the command (command may be longer).
    COMMAND: the command's full path leads the typed words; extra words are arguments.
    EXACT:   typed words and the command's words are the same, one for one.
    """
    PREFIX = -1
    COMMAND = 0
    EXACT = 1


class CommandHandler(Protocol):
    """Protocol for command bodies: write to `sink`, return a CommandResult."""

    def __call__(self, sink: TextIO, argv: Sequence[str]) -> Optional[CommandResult]:  # pragma: no cover - signature only
        ...


class CompletionGenerator(Protocol):
    """Protocol for free-form argument completion; return None when exhausted."""

    def __call__(self, line: str, word: str, pos: int, state: int) -> Optional[str]:  # pragma: no cover - signature only
        ...


@dataclass(slots=True, eq=False)
class CommandEntry:
    """
    A command the console can dispatch.

    Entries compare by identity: the registry stores references, and the
    subsystem that built an entry unregisters exactly that object.

    Important fields:
        words: Literal word-path, e.g. ("show", "channels").
        handler: Callable invoked with (sink, argv); argv includes the words.
        summary: One-line description used in listings.
        usage: Multi-line help shown on SHOWUSAGE or `help <command>`.
        generator: Optional completer for arguments after the fixed words.
        module: Name of the loadable module that owns the entry ("" for built-ins).
    """

    words: tuple[str, ...]
    handler: CommandHandler
    summary: str = ""
    usage: str = ""
    generator: Optional[CompletionGenerator] = None
    module: str = field(default="", repr=False)

    def __post_init__(self) -> None:
        self.words = tuple(self.words)
        if not self.words or len(self.words) > MAX_CMD_WORDS:
            raise ValueError(
                f"A command needs 1..{MAX_CMD_WORDS} words, got {len(self.words)}.")
        for word in self.words:
            if not word or any(ch.isspace() for ch in word):
                raise ValueError(f"Invalid command word: {word!r}")
        if not self.usage:
            self.usage = f"Usage: {self.joined}"

    @property
    def joined(self) -> str:
        """Word-path rendered with single spaces, for display and comparison."""
        return " ".join(self.words)

    @property
    def sort_key(self) -> str:
        return self.joined.lower()

    def matches(self, typed: Sequence[str], mode: MatchMode) -> bool:
        """Compare typed words against this entry's word-path (case-insensitive)."""
        if mode is MatchMode.PREFIX and len(typed) > len(self.words):
            return False
        if mode is MatchMode.COMMAND and len(typed) < len(self.words):
            return False
        if mode is MatchMode.EXACT and len(typed) != len(self.words):
            return False
        return all(a.lower() == b.lower() for a, b in zip(self.words, typed))

    def invoke(self, sink: TextIO, argv: Sequence[str]) -> CommandResult:
        """Execute the handler; a bare None return counts as success."""
        result = self.handler(sink, argv)
        return CommandResult.SUCCESS if result is None else CommandResult(result)
