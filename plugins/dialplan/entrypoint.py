# plugins/dialplan/entrypoint.py
from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Optional, Sequence, TextIO

from switchboard.commands import CommandResult, command
from switchboard.ui import print_line


@dataclass(slots=True)
class Extension:
    exten: str
    priority: int
    app: str
    data: str = ""


_CONTEXTS: dict[str, list[Extension]] = {}
_LOCK = threading.Lock()


def add_extension(context: str, extension: Extension) -> None:
    """Add (or replace) one priority of an extension in a context."""
    with _LOCK:
        steps = _CONTEXTS.setdefault(context, [])
        steps[:] = [e for e in steps
                    if (e.exten, e.priority) != (extension.exten, extension.priority)]
        steps.append(extension)
        steps.sort(key=lambda e: (e.exten, e.priority))


def remove_context(context: str) -> bool:
    with _LOCK:
        return _CONTEXTS.pop(context, None) is not None


def context_names() -> list[str]:
    with _LOCK:
        return sorted(_CONTEXTS)


def _complete_context_at(wanted_pos: int):
    def _complete(line: str, word: str, pos: int, state: int) -> Optional[str]:
        if pos != wanted_pos:
            return None
        matches = [name for name in context_names() if name.lower().startswith(word.lower())]
        return matches[state] if state < len(matches) else None
    return _complete


def _print_context(sink: TextIO, context: str, steps: list[Extension]) -> None:
    print_line(f"[ Context '{context}' ]", file=sink)
    for step in steps:
        print_line(f"  '{step.exten}' => {step.priority}. {step.app}({step.data})", file=sink)
    print_line(file=sink)


@command(
    "show", "dialplan",
    usage="Usage: show dialplan [context]\n"
          "       Displays the whole dialplan, or only the given context.\n",
    generator=_complete_context_at(2),
)
def show_dialplan(sink: TextIO, argv: Sequence[str]) -> CommandResult:
    """Show dialplan"""
    if len(argv) > 3:
        return CommandResult.SHOWUSAGE
    with _LOCK:
        snapshot = {name: list(steps) for name, steps in _CONTEXTS.items()}
    if len(argv) == 3:
        if argv[2] not in snapshot:
            print_line(f"No such context '{argv[2]}'", file=sink)
            return CommandResult.FAILURE
        snapshot = {argv[2]: snapshot[argv[2]]}
    for name in sorted(snapshot):
        _print_context(sink, name, snapshot[name])
    print_line(f"-= {len(snapshot)} context(s) =-", file=sink)
    return CommandResult.SUCCESS


@command(
    "dialplan", "add", "extension",
    usage="Usage: dialplan add extension <context> <exten> <priority> <app> [data]\n"
          "       Adds one priority of an extension to a context, creating\n"
          "       the context when needed.\n",
    generator=_complete_context_at(3),
)
def dialplan_add_extension(sink: TextIO, argv: Sequence[str]) -> CommandResult:
    """Add an extension to a dialplan context"""
    if len(argv) not in (7, 8):
        return CommandResult.SHOWUSAGE
    try:
        priority = int(argv[5])
    except ValueError:
        return CommandResult.SHOWUSAGE
    if priority < 1:
        return CommandResult.SHOWUSAGE
    context, exten, app = argv[3], argv[4], argv[6]
    add_extension(context, Extension(exten, priority, app, argv[7] if len(argv) == 8 else ""))
    print_line(f"Extension '{exten}@{context}' priority {priority} added", file=sink)
    return CommandResult.SUCCESS


@command(
    "dialplan", "remove", "context",
    usage="Usage: dialplan remove context <context>\n"
          "       Removes a context and all of its extensions.\n",
    generator=_complete_context_at(3),
)
def dialplan_remove_context(sink: TextIO, argv: Sequence[str]) -> CommandResult:
    """Remove a dialplan context"""
    if len(argv) != 4:
        return CommandResult.SHOWUSAGE
    if not remove_context(argv[3]):
        print_line(f"No such context '{argv[3]}'", file=sink)
        return CommandResult.FAILURE
    print_line(f"Context '{argv[3]}' removed", file=sink)
    return CommandResult.SUCCESS


COMMANDS = [dialplan_add_extension, dialplan_remove_context, show_dialplan]
