#!/usr/bin/env python3
# switchboard/ui/utils/console.py
from __future__ import annotations

import sys
import threading
from typing import TextIO

# Single shared print mutex for all console output (command output and logging).
PRINT_MUTEX = threading.Lock()


def print_line(text: str = "", *, file: TextIO | None = None, flush: bool = False) -> None:
    """Thread-safe single-line print; concurrent sessions never interleave a line."""
    target = sys.stdout if file is None else file
    with PRINT_MUTEX:
        target.write(f"{text}\n")
        if flush:
            target.flush()


def write_text(text: str, *, file: TextIO | None = None) -> None:
    """Write pre-formatted text verbatim (usage blocks keep their own newlines)."""
    target = sys.stdout if file is None else file
    if text and not text.endswith("\n"):
        text += "\n"
    with PRINT_MUTEX:
        target.write(text)


def set_terminal_title(title_text: str) -> None:
    """Set the terminal window title (xterm OSC 2); ignored when stdout is not a TTY."""
    if not sys.stdout.isatty():
        return
    sys.stdout.write(f"\x1b]2;{title_text}\x07")
    sys.stdout.flush()
