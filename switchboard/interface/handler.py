#!/usr/bin/env python3
# switchboard/interface/handler.py
from __future__ import annotations

"""
Command dispatch.

A raw console line is tokenized, resolved against the registry (the
command's full word-path must lead the typed words; the rest are its
arguments) and handed to the command's handler together with the output
sink. Lookup and invocation run under the registry lock, so handlers must
be quick.
"""

import logging
from dataclasses import dataclass
from typing import Optional, TextIO

from switchboard.commands import (
    REGISTRY,
    CommandRegistry,
    CommandResult,
    MatchMode,
    NoSuchCommandError,
    SwitchboardError,
    TokenizeError,
    dispatching,
)
from switchboard.interface.parser import join_words, tokenize
from switchboard.ui import print_line, write_text

log = logging.getLogger(__name__)

# Short hint appended to unknown command errors
HELP_TEXT = "type 'help' for help"


@dataclass(slots=True)
class ExecuteResult:
    """
    Outcome of one dispatched line.

    Attributes:
        ok: False when nothing ran, or the handler reported FAILURE.
        result: The handler's CommandResult (None when no handler ran).
        command: Joined word-path of the command that ran.
        suggestion: Closest known command prefix for unknown commands.
        error: The error that prevented execution, if any.
    """
    ok: bool = True
    result: Optional[CommandResult] = None
    command: str = ""
    suggestion: Optional[str] = None
    error: Optional[SwitchboardError] = None


def _no_such_command(sink: TextIO, registry: CommandRegistry, argv: list[str]) -> ExecuteResult:
    suggestion = registry.find_best_prefix(argv)
    hint = f"type 'help {suggestion}' for help" if suggestion else HELP_TEXT
    print_line(f"No such command '{join_words(argv)}' ({hint})", file=sink)
    return ExecuteResult(
        ok=False,
        suggestion=suggestion,
        error=NoSuchCommandError(argv, suggestion),
    )


def execute(sink: TextIO, line: str, *, registry: CommandRegistry | None = None) -> ExecuteResult:
    """
    Parse and execute one console line, writing all output to `sink`.

    Never raises for malformed input; exceptions escaping a handler are the
    handler's own and propagate to the caller. Handlers run with `registry`
    as the active registry, so `help` lists what this call can dispatch.
    """
    registry = REGISTRY if registry is None else registry
    try:
        argv = tokenize(line)
    except TokenizeError as exc:
        return ExecuteResult(ok=False, error=exc)

    if not argv:
        return ExecuteResult()

    with registry.lock, dispatching(registry):
        entry = registry.find_command(argv, MatchMode.COMMAND)
        if entry is None:
            return _no_such_command(sink, registry, argv)

        log.debug("Executing '%s' with %d argument(s)", entry.joined, len(argv))
        result = entry.invoke(sink, argv)
        if result is CommandResult.SHOWUSAGE:
            write_text(entry.usage, file=sink)

    return ExecuteResult(
        ok=result is not CommandResult.FAILURE,
        result=result,
        command=entry.joined,
    )
