from __future__ import annotations

import importlib
import io
import itertools
import sys
import textwrap
import threading

import pytest

from switchboard.channels import CHANNELS, Channel
from switchboard.commands import REGISTRY, CommandRegistry, CommandResult, MatchMode, ModuleLoadError, ModuleUnloadError
from switchboard.commands.builtins import BUILTINS
from switchboard.interface import MODULES, ModuleLoader, UnloadForce, candidates, execute

_counter = itertools.count()


@pytest.fixture
def plugin_package(tmp_path, monkeypatch):
    """Write a throwaway plugin package; returns (package_name, add_module)."""
    name = f"extplugins_{next(_counter)}"
    root = tmp_path / name
    root.mkdir()
    (root / "__init__.py").write_text('"""Scratch plugins."""\n')
    monkeypatch.syspath_prepend(str(tmp_path))

    def add_module(module_name: str, source: str) -> None:
        (root / f"{module_name}.py").write_text(textwrap.dedent(source))
        importlib.invalidate_caches()

    yield name, add_module
    for key in [k for k in sys.modules if k == name or k.startswith(name + ".")]:
        del sys.modules[key]


def _registered(*words: str) -> bool:
    return REGISTRY.find_command(words, MatchMode.EXACT) is not None


# =============================================================================
# Sample plugins through the console
# =============================================================================

def test_available_lists_sample_plugins():
    assert MODULES.available() == ["dialplan", "sip"]


def test_load_and_unload_sip(sink):
    result = execute(sink, "load sip")
    assert result.ok
    assert MODULES.is_loaded("sip")
    assert _registered("sip", "show", "peers")
    assert _registered("sip", "no", "debug")

    execute(sink, "unload sip")
    assert not MODULES.is_loaded("sip")
    assert not _registered("sip", "show", "peers")
    assert "plugins.sip.entrypoint" not in sys.modules


def test_show_modules_lists_loaded(sink):
    MODULES.load("sip")
    MODULES.load("dialplan")
    execute(sink, "show modules")
    lines = sink.getvalue().splitlines()
    assert lines[1] == f"{'dialplan':<20} {'Dialplan contexts and extensions':<40} {'0':<10}"
    assert lines[2] == f"{'sip':<20} {'Session Initiation Protocol (SIP)':<40} {'0':<10}"


def test_load_twice_fails(sink):
    MODULES.load("sip")
    result = execute(sink, "load sip")
    assert result.result is CommandResult.FAILURE
    assert sink.getvalue() == "Unable to load module sip\n"


@pytest.mark.parametrize("name", ["nosuchmodule", "not-a-name", "_private"])
def test_load_missing_module_fails(sink, name):
    assert execute(sink, f"load {name}").result is CommandResult.FAILURE
    assert sink.getvalue() == f"Unable to load module {name}\n"


def test_unload_not_loaded_fails(sink):
    assert execute(sink, "unload sip").result is CommandResult.FAILURE
    assert sink.getvalue() == "Unable to unload resource sip\n"


def test_in_use_module_needs_force(sink):
    MODULES.load("sip")
    CHANNELS.add(Channel("SIP/100-0001", "SIP"))
    assert MODULES.loaded()[0].usecount == 1

    assert execute(sink, "unload sip").result is CommandResult.FAILURE
    assert MODULES.is_loaded("sip")

    assert execute(sink, "unload -f sip").ok
    assert not MODULES.is_loaded("sip")


def test_reload_starts_fresh(sink):
    MODULES.load("dialplan")
    execute(sink, "dialplan add extension default 100 1 Dial SIP/100")
    MODULES.unload("dialplan")
    MODULES.load("dialplan")

    sink.truncate(0)
    sink.seek(0)
    execute(sink, "show dialplan")
    assert sink.getvalue() == "-= 0 context(s) =-\n"


# =============================================================================
# sip commands
# =============================================================================

def test_sip_peers(sink):
    MODULES.load("sip")
    sip = sys.modules["plugins.sip.entrypoint"]
    sip.add_peer(sip.Peer("alice", "10.0.0.5"))
    sip.add_peer(sip.Peer("bob", "10.0.0.6", dynamic=True))

    execute(sink, "sip show peers")
    lines = sink.getvalue().splitlines()
    assert lines[0].split() == ["Name", "Host", "Dyn", "Port", "Status"]
    assert lines[1].split() == ["alice", "10.0.0.5", "5060", "Unmonitored"]
    assert lines[2].split() == ["bob", "10.0.0.6", "D", "5060", "Unmonitored"]

    assert candidates("sip show peer ", "") == ["alice", "bob"]
    assert candidates("sip show peer B", "B") == ["bob"]


def test_sip_show_peer(sink):
    MODULES.load("sip")
    sip = sys.modules["plugins.sip.entrypoint"]
    sip.add_peer(sip.Peer("alice", "10.0.0.5"))

    execute(sink, "sip show peer ALICE")
    assert "  * Name       : alice" in sink.getvalue()
    assert execute(sink, "sip show peer carol").ok
    assert sink.getvalue().endswith("Peer carol not found.\n")


def test_sip_debug_toggle(sink):
    MODULES.load("sip")
    sip = sys.modules["plugins.sip.entrypoint"]
    execute(sink, "sip debug")
    assert sip.debug_enabled()
    execute(sink, "sip no debug")
    assert not sip.debug_enabled()
    assert sink.getvalue() == "SIP Debugging Enabled\nSIP Debugging Disabled\n"


# =============================================================================
# dialplan commands
# =============================================================================

def test_dialplan_round_trip(sink):
    MODULES.load("dialplan")
    assert execute(sink, "dialplan add extension default 100 1 Dial SIP/100").ok
    assert execute(sink, "dialplan add extension default 100 2 Hangup").ok
    assert execute(sink, 'dialplan add extension park 700 1 Playback "please hold"').ok

    sink.truncate(0)
    sink.seek(0)
    execute(sink, "show dialplan default")
    assert sink.getvalue() == (
        "[ Context 'default' ]\n"
        "  '100' => 1. Dial(SIP/100)\n"
        "  '100' => 2. Hangup()\n"
        "\n"
        "-= 1 context(s) =-\n"
    )
    assert candidates("show dialplan ", "") == ["default", "park"]
    assert candidates("dialplan remove context p", "p") == ["park"]

    assert execute(sink, "dialplan remove context park").ok
    assert candidates("show dialplan ", "") == ["default"]


@pytest.mark.parametrize(
    "line",
    [
        "dialplan add extension default 100",
        "dialplan add extension default 100 one Dial",
        "dialplan add extension default 100 0 Dial",
        "show dialplan default extra",
        "dialplan remove context",
    ],
)
def test_dialplan_usage(sink, line):
    MODULES.load("dialplan")
    assert execute(sink, line).result is CommandResult.SHOWUSAGE


def test_dialplan_unknown_context(sink):
    MODULES.load("dialplan")
    assert execute(sink, "show dialplan nowhere").result is CommandResult.FAILURE
    assert execute(sink, "dialplan remove context nowhere").result is CommandResult.FAILURE


# =============================================================================
# Loader rules on scratch plugins
# =============================================================================

def test_conflicting_module_is_rolled_back(plugin_package):
    package, add_module = plugin_package
    add_module("clash", """
        from switchboard.commands import command

        @command("zz", "fine")
        def fine(sink, argv):
            "Fine"

        @command("show", "channels", "detail")
        def clash(sink, argv):
            "Clashes with a built-in"

        COMMANDS = [fine, clash]
    """)
    registry = CommandRegistry(BUILTINS)
    loader = ModuleLoader(registry, package=package)

    with pytest.raises(ModuleLoadError):
        loader.load("clash")
    assert len(registry) == len(BUILTINS)
    assert not loader.is_loaded("clash")
    assert f"{package}.clash" not in sys.modules


def test_unload_veto_needs_hard(plugin_package):
    package, add_module = plugin_package
    add_module("stubborn", '''
        """Refuses to leave"""
        from switchboard.commands import command

        @command("stubborn", "status")
        def status(sink, argv):
            "Status"

        COMMAND = status

        def unload_module():
            return False
    ''')
    registry = CommandRegistry()
    loader = ModuleLoader(registry, package=package)

    record = loader.load("stubborn")
    assert record.description == "Refuses to leave"
    assert [e.joined for e in registry.iter_entries()] == ["stubborn status"]

    with pytest.raises(ModuleUnloadError):
        loader.unload("stubborn")
    with pytest.raises(ModuleUnloadError):
        loader.unload("stubborn", UnloadForce.FIRM)
    loader.unload("stubborn", UnloadForce.HARD)
    assert len(registry) == 0


def test_load_hook_can_decline(plugin_package):
    package, add_module = plugin_package
    add_module("shy", """
        def load_module():
            return False
    """)
    loader = ModuleLoader(CommandRegistry(), package=package)
    with pytest.raises(ModuleLoadError):
        loader.load("shy")
    assert loader.loaded() == []


def test_import_error_becomes_load_error(plugin_package):
    package, add_module = plugin_package
    add_module("broken", "import does_not_exist_anywhere\n")
    loader = ModuleLoader(CommandRegistry(), package=package)
    with pytest.raises(ModuleLoadError):
        loader.load("broken")


def test_unload_all(plugin_package):
    package, add_module = plugin_package
    add_module("one", "")
    add_module("two", "")
    loader = ModuleLoader(CommandRegistry(), package=package)
    loader.load("one")
    loader.load("two")
    assert [m.name for m in loader.loaded()] == ["one", "two"]
    loader.unload_all()
    assert loader.loaded() == []


def test_missing_package_has_nothing_available():
    assert ModuleLoader(CommandRegistry(), package="no_such_plugin_pkg").available() == []


# =============================================================================
# Loader calls racing console sessions
# =============================================================================

def test_loader_and_console_sessions_do_not_deadlock():
    stop = threading.Event()

    def cycle_modules():
        while not stop.is_set():
            MODULES.load("sip")
            MODULES.unload("sip", UnloadForce.HARD)

    def console_session():
        while not stop.is_set():
            execute(io.StringIO(), "show modules")
            candidates("unload ", "")
            candidates("load ", "")

    threads = [threading.Thread(target=fn, daemon=True) for fn in (cycle_modules, console_session)]
    for t in threads:
        t.start()
    stop.wait(1.0)
    stop.set()
    for t in threads:
        t.join(timeout=5)
    assert [t.is_alive() for t in threads] == [False, False]


def test_loader_shares_registry_lock():
    registry = CommandRegistry()
    assert ModuleLoader(registry)._lock is registry.lock
