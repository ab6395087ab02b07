#!/usr/bin/env python3
# switchboard/commands/__init__.py
from __future__ import annotations

"""
Package for command management and registration.

Provides:
- Data structures and protocols (`CommandEntry`, `CommandResult`, `MatchMode`).
- Error taxonomy (`DuplicateCommandError`, `NoSuchCommandError`, ...).
- The process-wide registry and decorator (`REGISTRY`, `command`, `register_command`).

This package re-exports public APIs from:
- command_types.py
- errors.py
- commands.py
"""


from .command_types import (
    MAX_CMD_WORDS,
    CommandEntry,
    CommandHandler,
    CommandResult,
    CompletionGenerator,
    MatchMode,
)
from .errors import (
    SwitchboardError,
    DuplicateCommandError,
    NoSuchCommandError,
    TokenizeError,
    ModuleLoadError,
    ModuleUnloadError,
)
from .commands import (
    LISTING_WIDTH,
    CommandRegistry,
    REGISTRY,
    active_registry,
    command,
    dispatching,
    register_command,
    unregister_command,
)

__all__ = [
    "MAX_CMD_WORDS",
    "CommandEntry",
    "CommandHandler",
    "CommandResult",
    "CompletionGenerator",
    "MatchMode",
    "SwitchboardError",
    "DuplicateCommandError",
    "NoSuchCommandError",
    "TokenizeError",
    "ModuleLoadError",
    "ModuleUnloadError",
    "LISTING_WIDTH",
    "CommandRegistry",
    "REGISTRY",
    "active_registry",
    "dispatching",
    "command",
    "register_command",
    "unregister_command",
]
