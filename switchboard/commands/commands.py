#!/usr/bin/env python3
# switchboard/commands/commands.py
from __future__ import annotations

"""
Command registry and decorator utilities.

This module provides:
- CommandRegistry: built-in plus dynamically registered commands, kept in one
  merged, case-insensitively sorted view, with word-path lookup.
- command: decorator turning a function into a CommandEntry.
- register_command / unregister_command: explicit API against the global REGISTRY.

Every read and write of a registry goes through its single lock. The lock is
re-entrant so a handler running under dispatch (e.g. `load`) can register.
"""

import bisect
import heapq
import logging
import threading
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Callable, Iterator, Optional, Sequence

from switchboard.commands.command_types import (
    CommandEntry,
    CommandHandler,
    CompletionGenerator,
    MatchMode,
)
from switchboard.commands.errors import DuplicateCommandError

log = logging.getLogger(__name__)

# Width of the command column in help listings.
LISTING_WIDTH = 20


def _sort_key(entry: CommandEntry) -> str:
    return entry.sort_key


class CommandRegistry:
    """Holds built-in and dynamic command entries and provides lookup utilities."""

    def __init__(self, builtins: Sequence[CommandEntry] = ()) -> None:
        self._builtins: tuple[CommandEntry, ...] = tuple(builtins)
        # Sorted by sort_key; holds references to caller-owned entries.
        self._dynamic: list[CommandEntry] = []
        self.lock = threading.RLock()
        self._validate_builtins()

    def _validate_builtins(self) -> None:
        keys = [e.sort_key for e in self._builtins]
        if keys != sorted(keys):
            raise ValueError("Built-in commands must be sorted by word-path.")
        for index, entry in enumerate(self._builtins):
            for other in self._builtins[index + 1:]:
                if other.matches(entry.words, MatchMode.PREFIX) or other.matches(entry.words, MatchMode.COMMAND):
                    raise ValueError(
                        f"Built-in '{entry.joined}' overlaps '{other.joined}'.")

    # ---------------- Merged view ----------------

    def _merged(self) -> Iterator[CommandEntry]:
        """Walk built-ins and dynamic entries in lock-step, smallest path first."""
        return heapq.merge(self._builtins, self._dynamic, key=_sort_key)

    def iter_entries(self) -> list[CommandEntry]:
        """Snapshot of every entry in merged sorted order."""
        with self.lock:
            return list(self._merged())

    def builtin_entries(self) -> tuple[CommandEntry, ...]:
        return self._builtins

    def dynamic_entries(self) -> tuple[CommandEntry, ...]:
        with self.lock:
            return tuple(self._dynamic)

    def __len__(self) -> int:
        with self.lock:
            return len(self._builtins) + len(self._dynamic)

    def __contains__(self, entry: object) -> bool:
        with self.lock:
            return any(e is entry for e in self._merged())

    # ---------------- Lookup ----------------

    def find_command(self, words: Sequence[str], mode: MatchMode = MatchMode.COMMAND) -> Optional[CommandEntry]:
        """Return the first entry (in merged order) whose word-path matches `words`, or None."""
        with self.lock:
            for entry in self._merged():
                if entry.matches(words, mode):
                    return entry
        return None

    def find_best_prefix(self, words: Sequence[str]) -> str:
        """
        Extend a trial word list one word at a time while something still
        matches it as a prefix; return the longest such list joined by spaces.
        """
        best: list[str] = []
        with self.lock:
            for word in words:
                if self.find_command([*best, word], MatchMode.PREFIX) is None:
                    break
                best.append(word)
        return " ".join(best)

    def list_matching(self, prefix_words: Optional[Sequence[str]] = None) -> Iterator[tuple[str, str]]:
        """
        Yield (joined path, summary) in merged order, optionally narrowed to
        paths starting with the joined prefix (case-insensitive).

        Each call works on a fresh snapshot, so the sequence can be restarted.
        """
        match = " ".join(prefix_words).lower() if prefix_words else ""
        for entry in self.iter_entries():
            if entry.sort_key.startswith(match):
                yield entry.joined, entry.summary

    def format_listing(self, prefix_words: Optional[Sequence[str]] = None) -> list[str]:
        """Render list_matching as two fixed-width columns."""
        return [f"{joined:<{LISTING_WIDTH}}   {summary}"
                for joined, summary in self.list_matching(prefix_words)]

    # ---------------- Registration ----------------

    def register(self, entry: CommandEntry) -> None:
        """Insert a dynamic entry in sorted position, refusing duplicates and ambiguous paths."""
        with self.lock:
            clash = (self.find_command(entry.words, MatchMode.PREFIX)
                     or self.find_command(entry.words, MatchMode.COMMAND))
            if clash is not None:
                log.warning(
                    "Command '%s' already registered (or something close enough: '%s')",
                    entry.joined, clash.joined)
                raise DuplicateCommandError(entry.joined, clash.joined)
            bisect.insort(self._dynamic, entry, key=_sort_key)
        log.debug("Registered command '%s'", entry.joined)

    def unregister(self, entry: CommandEntry) -> None:
        """Detach `entry` (by identity) from the dynamic list; unknown entries are ignored."""
        with self.lock:
            for index, current in enumerate(self._dynamic):
                if current is entry:
                    del self._dynamic[index]
                    log.debug("Unregistered command '%s'", entry.joined)
                    break


def command(
    *words: str,
    summary: str | None = None,
    usage: str | None = None,
    generator: CompletionGenerator | None = None,
) -> Callable[[CommandHandler], CommandEntry]:
    """
    Decorator building a CommandEntry from a handler function.

    - `summary` defaults to the first line of the function docstring.
    - The entry is not registered; the module loader registers COMMANDS.
    """

    def wrapper(func: CommandHandler) -> CommandEntry:
        doc_line = ((getattr(func, "__doc__", None) or "").strip().splitlines() or [""])[0]
        return CommandEntry(
            words=tuple(words),
            handler=func,
            summary=(summary or doc_line).strip(),
            usage=usage or "",
            generator=generator,
            module=getattr(func, "__module__", ""),
        )

    return wrapper


from switchboard.commands.builtins import BUILTINS  # noqa: E402

# Global registry used across the app
REGISTRY = CommandRegistry(BUILTINS)

# Registry the current thread or task is dispatching against
_active: ContextVar[Optional[CommandRegistry]] = ContextVar("active_registry", default=None)


@contextmanager
def dispatching(registry: CommandRegistry) -> Iterator[CommandRegistry]:
    """Mark `registry` as the one handlers run against (read by `help`)."""
    token = _active.set(registry)
    try:
        yield registry
    finally:
        _active.reset(token)


def active_registry() -> CommandRegistry:
    """Registry being dispatched against, or the global REGISTRY outside dispatch."""
    registry = _active.get()
    return REGISTRY if registry is None else registry


def register_command(entry: CommandEntry) -> None:
    """Explicit API for subsystems that construct CommandEntry objects directly."""
    REGISTRY.register(entry)


def unregister_command(entry: CommandEntry) -> None:
    REGISTRY.unregister(entry)
