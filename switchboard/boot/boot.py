#!/usr/bin/env python3
# switchboard/boot/boot.py
from __future__ import annotations
"""
Boot sequence for the operator console.

Goals:
- Bring up configuration and logging before anything can log.
- Point the module loader at the configured plugin package and autoload modules.
- Maintain clear status output for each boot step.
"""

import logging
import platform
from dataclasses import dataclass
from typing import Any, Callable

from switchboard.commands import REGISTRY, ModuleLoadError
from switchboard.config import AppConfig, load_config
from switchboard.interface.loader import MODULES
from switchboard.ui import (
    colorize,
    enable_windows_vt,
    init_logger,
    print_line,
    set_terminal_title,
)


@dataclass(slots=True)
class BootState:
    config: AppConfig
    logger: logging.Logger
    loaded_modules: list[str]
    command_count: int


def _step(label: str, fn: Callable[[], Any]) -> Any:
    """Run a boot step with status output."""
    try:
        out = fn()
    except Exception as exc:
        print_line(
            colorize(f"[FAILED] {label} ({type(exc).__name__}: {exc})", "red")
        )
        raise
    print_line(colorize(f"[  OK  ] {label}", "green"))
    return out


def _autoload(config: AppConfig, logger: logging.Logger) -> list[str]:
    """Load configured modules; a module that fails is reported and skipped."""
    loaded: list[str] = []
    for name in config.autoload:
        try:
            MODULES.load(name)
        except ModuleLoadError as exc:
            print_line(colorize(f"[ WARN ] {exc}", "yellow"))
            logger.warning("Autoload of '%s' failed: %s", name, exc)
            continue
        loaded.append(name)
    return loaded


def boot_sequence(config: AppConfig | None = None) -> BootState:
    # ---------- console + env ----------
    _step("Enable ANSI sequences", enable_windows_vt)
    _step(
        f"Detect environment: {platform.system()} {platform.release()} / Python {platform.python_version()}",
        lambda: None,
    )

    # ---------- config ----------
    if config is None:
        config = _step("Load configuration", load_config)

    # ---------- logging ----------
    level = getattr(logging, config.log_level or "INFO")
    logfile = str(config.log_file_path) if config.log_file_path else None
    logger = _step(
        "Initialize logger",
        lambda: init_logger("switchboard", level=level, logfile=logfile),
    )

    # ---------- modules ----------
    def _select_package() -> None:
        MODULES.package = config.plugin_package

    _step(f"Use module package '{config.plugin_package}'", _select_package)
    available = _step("Scan loadable modules", MODULES.available)
    logger.debug("Loadable modules: %s", ", ".join(available) or "(none)")
    loaded_modules = _step("Autoload modules", lambda: _autoload(config, logger))

    command_count = _step("Count registered commands", lambda: len(REGISTRY))
    set_terminal_title(f"switchboard: {command_count} cmds")
    _step("Boot complete", lambda: None)

    return BootState(
        config=config,
        logger=logger,
        loaded_modules=loaded_modules,
        command_count=command_count,
    )
