#!/usr/bin/env python3
# switchboard/__init__.py
from __future__ import annotations
"""
Operator console for a long-running server process.

Subsystems register multi-word commands (e.g. "show channels"); the console
tokenizes typed lines, dispatches them to the most specific command and
offers tab-completion that agrees with dispatch.

Notes:
- `switchboard.commands` must be importable on its own (built-ins and the
  registry live there); keep interface imports after it.
"""


from switchboard.commands import (  # noqa: F401
    REGISTRY,
    CommandEntry,
    CommandResult,
    MatchMode,
    command,
    register_command,
    unregister_command,
)
from switchboard.interface import candidates, complete, execute, tokenize  # noqa: F401

__version__ = "0.1.0"
