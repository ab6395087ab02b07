#!/usr/bin/env python3
# switchboard/commands/builtins.py
from __future__ import annotations

"""
Commands compiled into the console.

Keep BUILTINS alphabetized by word-path: the registry merges it with the
dynamically registered commands and refuses an unsorted table.

The registry and module loader are imported inside the handlers; both are
built on top of this table.
"""

import logging
from typing import Optional, Sequence, TextIO

from switchboard.channels import CHANNELS
from switchboard.commands.command_types import CommandEntry, CommandResult, MatchMode
from switchboard.commands.errors import ModuleLoadError, ModuleUnloadError
from switchboard.ui import print_line, write_text

log = logging.getLogger(__name__)

HELP_USAGE = (
    "Usage: help [topic]\n"
    "       When called with a topic as an argument, displays usage\n"
    "       information on the given command.  If called without a\n"
    "       topic, it provides a list of commands.\n"
)

LOAD_USAGE = (
    "Usage: load <module name>\n"
    "       Loads the specified module into the server.\n"
)

UNLOAD_USAGE = (
    "Usage: unload [-f|-h] <module name>\n"
    "       Unloads the specified module from the server.  The -f\n"
    "       option unloads the module even if it is in use, and the\n"
    "       -h option also ignores the module's own refusal to unload.\n"
)

CHANLIST_USAGE = (
    "Usage: show channels\n"
    "       Lists currently defined channels and some information about\n"
    "       them.\n"
)

SHOWCHAN_USAGE = (
    "Usage: show channel <channel>\n"
    "       Shows lots of information about the specified channel.\n"
)

MODLIST_USAGE = (
    "Usage: show modules\n"
    "       Shows the modules currently loaded, and usage statistics.\n"
)


def _pick(names: Sequence[str], word: str, state: int) -> Optional[str]:
    """Return the state-th name starting (case-insensitively) with `word`."""
    matches = [name for name in names if name.lower().startswith(word.lower())]
    return matches[state] if state < len(matches) else None


# ---------- help ----------

def handle_help(sink: TextIO, argv: Sequence[str]) -> CommandResult:
    from switchboard.commands.commands import active_registry

    registry = active_registry()
    topic = list(argv[1:])
    if not topic:
        for line in registry.format_listing():
            print_line(line, file=sink)
        return CommandResult.SUCCESS

    entry = registry.find_command(topic, MatchMode.EXACT)
    if entry is not None:
        write_text(entry.usage, file=sink)
    elif registry.find_command(topic, MatchMode.PREFIX) is not None:
        for line in registry.format_listing(topic):
            print_line(line, file=sink)
    else:
        print_line(f"No such command '{' '.join(topic)}'.", file=sink)
    return CommandResult.SUCCESS


# ---------- load / unload ----------

def handle_load(sink: TextIO, argv: Sequence[str]) -> CommandResult:
    from switchboard.interface.loader import MODULES

    if len(argv) != 2:
        return CommandResult.SHOWUSAGE
    try:
        MODULES.load(argv[1])
    except ModuleLoadError as exc:
        log.warning("%s", exc)
        print_line(f"Unable to load module {argv[1]}", file=sink)
        return CommandResult.FAILURE
    return CommandResult.SUCCESS


def handle_unload(sink: TextIO, argv: Sequence[str]) -> CommandResult:
    from switchboard.interface.loader import MODULES, UnloadForce

    if len(argv) < 2:
        return CommandResult.SHOWUSAGE
    force = UnloadForce.SOFT
    for index, arg in enumerate(argv[1:], start=1):
        if arg.startswith("-"):
            if arg[1:2] == "f":
                force = UnloadForce.FIRM
            elif arg[1:2] == "h":
                force = UnloadForce.HARD
            else:
                return CommandResult.SHOWUSAGE
        elif index != len(argv) - 1:
            return CommandResult.SHOWUSAGE
        else:
            try:
                MODULES.unload(arg, force)
            except ModuleUnloadError as exc:
                log.warning("%s", exc)
                print_line(f"Unable to unload resource {arg}", file=sink)
                return CommandResult.FAILURE
    return CommandResult.SUCCESS


def complete_loadable(line: str, word: str, pos: int, state: int) -> Optional[str]:
    from switchboard.interface.loader import MODULES

    if pos != 1:
        return None
    names = [name for name in MODULES.available() if not MODULES.is_loaded(name)]
    return _pick(names, word, state)


def complete_loaded(line: str, word: str, pos: int, state: int) -> Optional[str]:
    from switchboard.interface.loader import MODULES

    if pos < 1:
        return None
    return _pick([record.name for record in MODULES.loaded()], word, state)


# ---------- show channels / channel ----------

def _channel_row(name: str, context: str, exten: str, priority: str, appl: str, data: str) -> str:
    return f"{name:>15}  ({context:<10} {exten:<12} {priority:<4})  {appl:<12}  {data:<15}"


def handle_chanlist(sink: TextIO, argv: Sequence[str]) -> CommandResult:
    if len(argv) != 2:
        return CommandResult.SHOWUSAGE
    print_line(_channel_row("Channel", "Context", "Extension", "Pri", "Appl.", "Data"), file=sink)
    for channel in CHANNELS.walk():
        data = "(None)" if channel.data is None else (channel.data or "(Empty)")
        print_line(_channel_row(channel.name, channel.context, channel.exten,
                                str(channel.priority), channel.appl or "(None)", data), file=sink)
    return CommandResult.SUCCESS


def handle_showchan(sink: TextIO, argv: Sequence[str]) -> CommandResult:
    if len(argv) != 3:
        return CommandResult.SHOWUSAGE
    channel = CHANNELS.find(argv[2])
    if channel is None:
        print_line(f"{argv[2]} is not a known channel", file=sink)
        return CommandResult.SUCCESS

    data = "(None)" if channel.data is None else (channel.data or "(Empty)")
    lines = [
        " -- General --",
        f"           Name: {channel.name}",
        f"           Type: {channel.type}",
        f"         Master: {channel.master or '(N/A)'}",
        f"      Caller ID: {channel.callerid or '(N/A)'}",
        f"    DNID Digits: {channel.dnid or '(N/A)'}",
        f"          State: {channel.state}",
        f"          Rings: {channel.rings}",
        f"         Format: {channel.format}",
        " --   PBX   --",
        f"        Context: {channel.context}",
        f"      Extension: {channel.exten}",
        f"       Priority: {channel.priority}",
        f"    Application: {channel.appl or '(N/A)'}",
        f"           Data: {data}",
        f"    Blocking in: {channel.blocking_in or '(Not Blocking)'}",
    ]
    write_text("\n".join(lines), file=sink)
    return CommandResult.SUCCESS


def complete_channel(line: str, word: str, pos: int, state: int) -> Optional[str]:
    if pos != 2:
        return None
    return _pick(CHANNELS.names(), word, state)


# ---------- show modules ----------

def _module_row(name: str, description: str, usecount: str) -> str:
    return f"{name:<20} {description:<40.40} {usecount:<10}"


def handle_modlist(sink: TextIO, argv: Sequence[str]) -> CommandResult:
    from switchboard.interface.loader import MODULES

    if len(argv) != 2:
        return CommandResult.SHOWUSAGE
    print_line(_module_row("Module", "Description", "Use Count"), file=sink)
    for record in MODULES.loaded():
        print_line(_module_row(record.name, record.description, str(record.usecount)), file=sink)
    return CommandResult.SUCCESS


BUILTINS: tuple[CommandEntry, ...] = (
    # Keep alphabetized
    CommandEntry(("help",), handle_help,
                 "Display help list, or specific help on a command", HELP_USAGE),
    CommandEntry(("load",), handle_load,
                 "Load a dynamic module by name", LOAD_USAGE, complete_loadable),
    CommandEntry(("show", "channel"), handle_showchan,
                 "Display information on a specific channel", SHOWCHAN_USAGE, complete_channel),
    CommandEntry(("show", "channels"), handle_chanlist,
                 "Display information on channels", CHANLIST_USAGE),
    CommandEntry(("show", "modules"), handle_modlist,
                 "List modules and info", MODLIST_USAGE),
    CommandEntry(("unload",), handle_unload,
                 "Unload a dynamic module by name", UNLOAD_USAGE, complete_loaded),
)
