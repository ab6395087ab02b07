from __future__ import annotations

import io
import logging
from typing import Callable

import pytest

from switchboard.channels import CHANNELS
from switchboard.commands import REGISTRY, CommandEntry, CommandRegistry, CommandResult
from switchboard.interface import MODULES


class Recorder:
    """Handler double remembering every argv it was called with."""

    def __init__(self, result: CommandResult | None = CommandResult.SUCCESS, output: str = "") -> None:
        self.result = result
        self.output = output
        self.calls: list[list[str]] = []

    def __call__(self, sink, argv):
        self.calls.append(list(argv))
        if self.output:
            sink.write(self.output + "\n")
        return self.result


@pytest.fixture
def sink() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def make_entry() -> Callable[..., CommandEntry]:
    def _make(*words: str, handler=None, summary: str = "", usage: str = "", generator=None) -> CommandEntry:
        return CommandEntry(
            words=words,
            handler=handler or Recorder(),
            summary=summary or f"{' '.join(words)} summary",
            usage=usage,
            generator=generator,
        )
    return _make


@pytest.fixture
def registry() -> CommandRegistry:
    """An empty registry, isolated from the process-wide one."""
    return CommandRegistry()


@pytest.fixture(autouse=True)
def clean_globals():
    """Leave the process-wide registry, loader and channel table as found."""
    package = MODULES.package
    before = set(REGISTRY.dynamic_entries())
    yield
    MODULES.unload_all()
    MODULES.package = package
    for entry in REGISTRY.dynamic_entries():
        if entry not in before:
            REGISTRY.unregister(entry)
    CHANNELS.clear()


@pytest.fixture
def restore_logger():
    logger = logging.getLogger("switchboard")
    handlers = list(logger.handlers)
    level, propagate = logger.level, logger.propagate
    yield logger
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
