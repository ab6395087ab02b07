#!/usr/bin/env python3
# switchboard/__main__.py
from __future__ import annotations

"""Run the operator console on stdin/stdout: `python -m switchboard`."""

import sys

from switchboard.boot import boot_sequence
from switchboard.interface import DEFAULT_PROMPT, MODULES, execute, make_cli
from switchboard.ui import colorize, print_line

_EXIT_WORDS = {"exit", "quit"}


def main() -> int:
    try:
        state = boot_sequence()
    except Exception:
        return 1

    config = state.config
    if config.show_banner:
        print_line(colorize(
            f"Operator console ready: {state.command_count} commands. Type 'help' for help.", "bold"))

    cli = make_cli(config.prompt or DEFAULT_PROMPT, config.history_file_path,
                   enable_completion=config.enable_completion)
    with cli:
        while True:
            try:
                line = cli.get_line()
            except KeyboardInterrupt:
                continue
            except EOFError:
                break
            if line.strip().lower() in _EXIT_WORDS:
                break
            try:
                execute(sys.stdout, line)
            except Exception:
                state.logger.exception("Command '%s' raised", line.strip())

    MODULES.unload_all()
    return 0


if __name__ == "__main__":
    sys.exit(main())
