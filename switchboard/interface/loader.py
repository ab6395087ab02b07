#!/usr/bin/env python3
# switchboard/interface/loader.py
from __future__ import annotations

"""
Dynamic module loader.

Features:
- Lists the loadable modules found in the plugin package (default: 'plugins').
- Loads one module by name: imports '<package>.<name>.entrypoint' when the
  subpackage has one (else '<package>.<name>') and registers the
  CommandEntry objects it exports as COMMAND/COMMANDS.
- Unloads a module: honours its use count and `unload_module()` veto unless
  forced, unregisters its commands and forgets the imported code so a later
  load starts fresh.

Optional hooks a module may define:
    DESCRIPTION        one-line text for `show modules`
    load_module()      return False to refuse loading
    unload_module()    return False to refuse unloading
    usecount()         number of active users (channels, sessions, ...)
"""

import enum
import importlib
import importlib.util
import logging
import pkgutil
import sys
from dataclasses import dataclass, field
from types import ModuleType
from typing import Iterable

from switchboard.commands import (
    REGISTRY,
    CommandEntry,
    CommandRegistry,
    DuplicateCommandError,
    ModuleLoadError,
    ModuleUnloadError,
)

log = logging.getLogger(__name__)


class UnloadForce(enum.IntEnum):
    """How hard `unload` pushes: SOFT respects use counts, HARD ignores vetoes too."""
    SOFT = 0
    FIRM = 1
    HARD = 2


@dataclass(slots=True)
class LoadedModule:
    name: str
    description: str
    module: ModuleType = field(repr=False)
    entries: list[CommandEntry] = field(default_factory=list)

    @property
    def usecount(self) -> int:
        counter = getattr(self.module, "usecount", None)
        return int(counter()) if callable(counter) else 0


def _exported_entries(module: ModuleType) -> list[CommandEntry]:
    """Collect COMMAND/COMMANDS exported by an entry module."""
    entries: list[CommandEntry] = []
    obj = getattr(module, "COMMAND", None)
    if isinstance(obj, CommandEntry):
        entries.append(obj)
    objs = getattr(module, "COMMANDS", None)
    if isinstance(objs, Iterable):
        entries.extend(item for item in objs if isinstance(item, CommandEntry))
    return entries


def _describe(module: ModuleType, package_module: ModuleType) -> str:
    """
    Description is taken from:
      1) DESCRIPTION on the entry module,
      2) CATEGORY_DESCRIPTION on the module's package,
      3) the first docstring line of either, else "".
    """
    for value in (getattr(module, "DESCRIPTION", None),
                  getattr(package_module, "CATEGORY_DESCRIPTION", None)):
        if isinstance(value, str) and value.strip():
            return value.strip()
    for candidate in (module, package_module):
        doc = (candidate.__doc__ or "").strip()
        if doc:
            return doc.splitlines()[0]
    return ""


class ModuleLoader:
    """Loads and unloads plugin modules, keeping their commands registered meanwhile."""

    def __init__(self, registry: CommandRegistry, package: str = "plugins") -> None:
        self.registry = registry
        self.package = package
        self._loaded: dict[str, LoadedModule] = {}
        # Shared with the registry: dispatch holds it while built-ins query the loader.
        self._lock = registry.lock

    # ---------------- Discovery ----------------

    def available(self) -> list[str]:
        """Names of the modules in the plugin package (private names skipped)."""
        try:
            package = importlib.import_module(self.package)
        except ImportError:
            log.warning("Plugin package '%s' cannot be imported", self.package)
            return []
        paths = [str(p) for p in getattr(package, "__path__", [])]
        return sorted({info.name for info in pkgutil.iter_modules(paths)
                       if not info.name.startswith("_")})

    def loaded(self) -> list[LoadedModule]:
        with self._lock:
            return sorted(self._loaded.values(), key=lambda m: m.name)

    def is_loaded(self, name: str) -> bool:
        with self._lock:
            return name in self._loaded

    # ---------------- Load / unload ----------------

    def _import(self, name: str) -> tuple[ModuleType, ModuleType]:
        base = f"{self.package}.{name}"
        try:
            package_module = importlib.import_module(base)
            module = package_module
            if hasattr(package_module, "__path__") and importlib.util.find_spec(f"{base}.entrypoint"):
                module = importlib.import_module(f"{base}.entrypoint")
        except Exception as exc:
            self._forget(name)
            raise ModuleLoadError(f"Cannot import module '{name}': {exc}") from exc
        return module, package_module

    def _forget(self, name: str) -> None:
        """Drop the module's code from sys.modules so the next load re-imports it."""
        base = f"{self.package}.{name}"
        for key in [k for k in sys.modules if k == base or k.startswith(base + ".")]:
            del sys.modules[key]

    def load(self, name: str) -> LoadedModule:
        """Import a module and register its commands; all or nothing."""
        if not name.isidentifier():
            raise ModuleLoadError(f"Invalid module name '{name}'")
        with self._lock:
            if name in self._loaded:
                raise ModuleLoadError(f"Module '{name}' is already loaded")

            module, package_module = self._import(name)
            hook = getattr(module, "load_module", None)
            if callable(hook) and hook() is False:
                self._forget(name)
                raise ModuleLoadError(f"Module '{name}' declined to load")

            registered: list[CommandEntry] = []
            try:
                for entry in _exported_entries(module):
                    self.registry.register(entry)
                    registered.append(entry)
            except DuplicateCommandError as exc:
                for entry in registered:
                    self.registry.unregister(entry)
                self._forget(name)
                raise ModuleLoadError(
                    f"Module '{name}' conflicts with a registered command: {exc}") from exc

            record = LoadedModule(
                name=name,
                description=_describe(module, package_module),
                module=module,
                entries=registered,
            )
            self._loaded[name] = record
        log.info("Loaded module '%s' (%d command(s))", name, len(registered))
        return record

    def unload(self, name: str, force: UnloadForce = UnloadForce.SOFT) -> None:
        """Unregister a module's commands and forget it."""
        with self._lock:
            record = self._loaded.get(name)
            if record is None:
                raise ModuleUnloadError(f"Module '{name}' is not loaded")

            if force < UnloadForce.FIRM and record.usecount > 0:
                raise ModuleUnloadError(
                    f"Module '{name}' is in use ({record.usecount})")

            hook = getattr(record.module, "unload_module", None)
            if callable(hook) and hook() is False and force < UnloadForce.HARD:
                raise ModuleUnloadError(f"Module '{name}' refused to unload")

            for entry in record.entries:
                self.registry.unregister(entry)
            del self._loaded[name]
            self._forget(name)
        log.info("Unloaded module '%s'", name)

    def unload_all(self) -> None:
        """Hard-unload everything (shutdown path)."""
        for record in self.loaded():
            self.unload(record.name, UnloadForce.HARD)


# Global module loader bound to the global registry
MODULES = ModuleLoader(REGISTRY)
