#!/usr/bin/env python3
# switchboard/interface/completion.py
from __future__ import annotations

"""
Command line completion.

Completion agrees with dispatch: candidates come from the same merged,
sorted command view the dispatcher resolves against.

- While the fixed words of a command are being typed, the candidates are the
  next literal words of every command whose path starts with the typed text.
- Once a command's full word-path has been typed and the cursor is past it,
  completion is delegated to that command's generator (channel names,
  module names, ...).

`candidates()` computes the whole list for one request; `complete()` serves
it one item per call for readline-style (text, state) protocols.
"""

import threading
from typing import Optional

from switchboard.commands import REGISTRY, CommandEntry, CommandRegistry
from switchboard.interface.parser import join_words, tokenize

# Upper bound on the items pulled from one generator for one request.
MAX_COMPLETIONS = 1000

_cache = threading.local()


def _generator_owner(entries: list[CommandEntry], argv: list[str], pos: int) -> Optional[CommandEntry]:
    """First entry with a generator whose full path leads argv and lies before `pos`."""
    for entry in entries:
        if entry.generator is None or len(entry.words) > pos:
            continue
        if all(a.lower() == b.lower() for a, b in zip(entry.words, argv)):
            return entry
    return None


def _drain_generator(entry: CommandEntry, line: str, word: str, pos: int) -> list[str]:
    results: list[str] = []
    for state in range(MAX_COMPLETIONS):
        candidate = entry.generator(line, word, pos, state)  # type: ignore[misc]
        if candidate is None:
            break
        results.append(candidate)
    return results


def candidates(line: str, word: str, *, registry: CommandRegistry | None = None) -> list[str]:
    """
    Return every completion for `word`, the in-progress word at the end of `line`.

    `word` is "" when the cursor starts a new word.
    """
    registry = REGISTRY if registry is None else registry
    argv = tokenize(line)
    pos = len(argv) - 1 if word else len(argv)
    typed = join_words(argv).lower()

    with registry.lock:
        entries = registry.iter_entries()
        owner = _generator_owner(entries, argv, pos)
        if owner is not None:
            return _drain_generator(owner, line, word, pos)

        results: list[str] = []
        for entry in entries:
            if not entry.sort_key.startswith(typed) or pos >= len(entry.words):
                continue
            next_word = entry.words[pos]
            # One candidate per distinct word, not one per matching command:
            # "show channels" and "show modules" both offer "show" once.
            if next_word not in results:
                results.append(next_word)
        return results


def complete(line: str, word: str, state: int, *, registry: CommandRegistry | None = None) -> Optional[str]:
    """
    Readline-style completion: return the `state`-th candidate, or None when exhausted.

    The candidate list is computed once per request (state 0) and reused for
    the following states of the same (line, word) on this thread.
    """
    key = (line, word, id(REGISTRY if registry is None else registry))
    if state == 0 or getattr(_cache, "key", None) != key:
        _cache.key = key
        _cache.items = candidates(line, word, registry=registry)
    items: list[str] = _cache.items
    return items[state] if 0 <= state < len(items) else None
