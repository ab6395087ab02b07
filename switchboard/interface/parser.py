#!/usr/bin/env python3
# switchboard/interface/parser.py
from __future__ import annotations

"""
Command line tokenizer.

Responsibilities:
- Split a raw console line into an argument vector, honouring double quotes
  and backslash escapes.
- Join word lists back into the single-spaced form used for comparison.
- Locate the in-progress word under the cursor for completion front-ends.

Rules, applied left to right:
- `"` toggles quoting unless escaped (then it is a literal quote).
- Space/tab outside quotes and escapes ends the current word.
- `\\` escapes the next character; `\\\\` is a literal backslash.
- Anything else starts a new word when at a word boundary and is appended.

Quotes never start a word by themselves, so `""` yields no argument, and an
unterminated quote simply runs to the end of the line.
"""

import logging
from typing import Sequence

from switchboard.commands.errors import TokenizeError

log = logging.getLogger(__name__)

# Maximum number of arguments kept from one line; extra words are dropped.
MAX_ARGS = 64

_WHITESPACE = (" ", "\t")


def _scan(line: str) -> tuple[list[str], bool]:
    """Return (argv, at_word_start); the flag is False while a word is still open."""
    argv: list[str] = []
    current: list[str] = []
    quoted = False
    escaped = False
    at_word_start = True
    truncated = False

    for char in line:
        if char == '"' and not escaped:
            quoted = not quoted
            continue
        if char in _WHITESPACE and not quoted and not escaped:
            if current:
                argv.append("".join(current))
                current = []
            at_word_start = True
            continue
        if char == "\\" and not escaped:
            escaped = True
            continue

        escaped = False
        if at_word_start:
            if len(argv) >= MAX_ARGS:
                truncated = True
                continue
            at_word_start = False
        current.append(char)

    if current:
        argv.append("".join(current))
    if truncated:
        log.warning("Too many arguments, truncating to %d", MAX_ARGS)
    return argv, at_word_start


def tokenize(line: str) -> list[str]:
    """Split a raw command line into arguments."""
    try:
        argv, _ = _scan(line)
    except MemoryError as exc:
        log.warning("Out of memory while parsing command line")
        raise TokenizeError("Out of memory while parsing command line") from exc
    return argv


def join_words(words: Sequence[str]) -> str:
    """Join words into a single-spaced string."""
    return " ".join(words)


def split_current_word(text_before_cursor: str) -> tuple[list[str], str]:
    """
    Return (argv, current_word) for a partially typed line.

    `current_word` is "" when the cursor sits on a word boundary (a new word
    is about to start); otherwise it is the last argument being typed.
    """
    try:
        argv, at_boundary = _scan(text_before_cursor)
    except MemoryError as exc:
        raise TokenizeError("Out of memory while parsing command line") from exc
    if not argv or at_boundary:
        return argv, ""
    return argv, argv[-1]
