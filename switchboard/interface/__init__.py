#!/usr/bin/env python3
# switchboard/interface/__init__.py
from __future__ import annotations

"""
Package for the interactive console interface and command dispatch.

Provides:
- Tokenizer for raw console lines.
- Completion engine agreeing with dispatch.
- Command dispatcher.
- Loader for dynamically loadable modules in the plugins package.
- CLI frontends with history and completion (prompt_toolkit / readline / plain).
"""


# Parser FIRST (everything else tokenizes through it)
from .parser import MAX_ARGS, tokenize, join_words, split_current_word

# Completion
from .completion import MAX_COMPLETIONS, candidates, complete

# Command dispatcher
from .handler import HELP_TEXT, ExecuteResult, execute

# Loader
from .loader import MODULES, LoadedModule, ModuleLoader, UnloadForce

# CLI frontends (after completion is available)
from .cli import (
    BaseCLI,
    PromptToolkitCLI,
    ReadlineCLI,
    make_cli,
    DEFAULT_PROMPT,
    DEFAULT_HISTORY_FILE_PATH,
)

__all__ = [
    # parser
    "MAX_ARGS",
    "tokenize",
    "join_words",
    "split_current_word",
    # completion
    "MAX_COMPLETIONS",
    "candidates",
    "complete",
    # handler
    "HELP_TEXT",
    "ExecuteResult",
    "execute",
    # loader
    "MODULES",
    "LoadedModule",
    "ModuleLoader",
    "UnloadForce",
    # cli
    "BaseCLI",
    "PromptToolkitCLI",
    "ReadlineCLI",
    "make_cli",
    "DEFAULT_PROMPT",
    "DEFAULT_HISTORY_FILE_PATH",
]
