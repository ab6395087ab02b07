from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from switchboard.boot import boot_sequence
from switchboard.commands import REGISTRY
from switchboard.config import AppConfig
from switchboard.interface import MODULES, BaseCLI, make_cli
from switchboard.ui import ColorizingStreamHandler, colorize, init_logger, strip_ansi


def _config(tmp_path, **overrides) -> AppConfig:
    values = dict(
        plugin_package="plugins",
        autoload=("sip", "nosuchmodule"),
        log_file_path=tmp_path / "console.log",
        log_level="DEBUG",
        prompt=None,
        enable_completion=False,
        history_file_path=tmp_path / "history",
        show_banner=False,
    )
    values.update(overrides)
    return AppConfig(**values)


def test_boot_sequence_autoloads(tmp_path, capsys, restore_logger):
    state = boot_sequence(_config(tmp_path))

    assert state.loaded_modules == ["sip"]
    assert MODULES.is_loaded("sip")
    assert state.command_count == len(REGISTRY)
    assert state.logger is restore_logger

    out = strip_ansi(capsys.readouterr().out)
    assert "[  OK  ] Autoload modules" in out
    assert "[ WARN ]" in out
    assert "[  OK  ] Boot complete" in out


def test_init_logger_file_is_plain(tmp_path, restore_logger):
    logfile = tmp_path / "console.log"
    logger = init_logger("switchboard", level=logging.DEBUG, logfile=str(logfile))
    assert not logger.propagate
    assert sum(isinstance(h, ColorizingStreamHandler) for h in logger.handlers) == 1
    assert sum(isinstance(h, RotatingFileHandler) for h in logger.handlers) == 1

    init_logger("switchboard", level=logging.DEBUG, logfile=str(logfile))
    assert len(logger.handlers) == 2

    logging.getLogger("switchboard.interface.loader").info(colorize("loaded", "green"))
    for handler in logger.handlers:
        handler.flush()
    text = logfile.read_text(encoding="utf-8")
    assert "switchboard.interface.loader: loaded" in text
    assert "\x1b[" not in text


def test_make_cli_without_completion(tmp_path):
    cli = make_cli("> ", tmp_path / "history", enable_completion=False)
    assert type(cli) is BaseCLI
    assert cli.prompt == "> "
