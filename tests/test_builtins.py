from __future__ import annotations

from io import StringIO

import pytest

from switchboard.channels import CHANNELS, Channel
from switchboard.commands import REGISTRY, CommandRegistry, CommandResult, active_registry
from switchboard.commands.builtins import (
    BUILTINS,
    CHANLIST_USAGE,
    HELP_USAGE,
    LOAD_USAGE,
    MODLIST_USAGE,
    SHOWCHAN_USAGE,
    UNLOAD_USAGE,
)
from switchboard.interface import MODULES, candidates, complete, execute


def _row(*cols):
    name, context, exten, priority, appl, data = cols
    return f"{name:>15}  ({context:<10} {exten:<12} {priority:<4})  {appl:<12}  {data:<15}"


@pytest.fixture
def channels():
    CHANNELS.add(Channel("SIP/100-0001", "SIP", context="internal", exten="200", priority=2,
                         appl="Dial", data="SIP/200", callerid="Alice <100>"))
    CHANNELS.add(Channel("IAX2/trunk-0002", "IAX2", appl="Wait", data=""))
    CHANNELS.add(Channel("Local/s@park-0003", "Local"))
    return CHANNELS


# =============================================================================
# help
# =============================================================================

def test_help_lists_everything(sink):
    result = execute(sink, "help")
    assert result.result is CommandResult.SUCCESS
    lines = sink.getvalue().splitlines()
    assert lines == REGISTRY.format_listing()
    assert [line.split("   ")[0].rstrip() for line in lines] == [
        "help", "load", "show channel", "show channels", "show modules", "unload",
    ]


def test_help_with_prefix_topic(sink):
    execute(sink, "help show")
    assert sink.getvalue().splitlines() == REGISTRY.format_listing(["show"])
    assert len(sink.getvalue().splitlines()) == 3


def test_help_with_exact_topic_prints_usage(sink):
    execute(sink, "help show channels")
    assert sink.getvalue() == CHANLIST_USAGE


def test_help_topic_is_case_insensitive(sink):
    execute(sink, "help UNLOAD")
    assert sink.getvalue() == UNLOAD_USAGE


def test_help_on_help(sink):
    execute(sink, "help help")
    assert sink.getvalue() == HELP_USAGE


def test_help_unknown_topic(sink):
    result = execute(sink, "help bogus topic")
    assert result.ok
    assert sink.getvalue() == "No such command 'bogus topic'.\n"


# =============================================================================
# show channels / show channel
# =============================================================================

def test_show_channels_empty(sink):
    execute(sink, "show channels")
    assert sink.getvalue().splitlines() == [
        _row("Channel", "Context", "Extension", "Pri", "Appl.", "Data"),
    ]


def test_show_channels_rows(sink, channels):
    execute(sink, "show channels")
    assert sink.getvalue().splitlines()[1:] == [
        _row("SIP/100-0001", "internal", "200", "2", "Dial", "SIP/200"),
        _row("IAX2/trunk-0002", "default", "s", "1", "Wait", "(Empty)"),
        _row("Local/s@park-0003", "default", "s", "1", "(None)", "(None)"),
    ]


def test_show_channels_rejects_arguments(sink):
    result = execute(sink, "show channels now")
    assert result.result is CommandResult.SHOWUSAGE
    assert sink.getvalue() == CHANLIST_USAGE


def test_show_channel_details(sink, channels):
    execute(sink, "show channel sip/100-0001")
    out = sink.getvalue()
    assert "           Name: SIP/100-0001" in out
    assert "      Caller ID: Alice <100>" in out
    assert "        Context: internal" in out
    assert "    Application: Dial" in out
    assert "    Blocking in: (Not Blocking)" in out


def test_show_channel_unknown(sink, channels):
    result = execute(sink, "show channel Zap/1")
    assert result.ok
    assert sink.getvalue() == "Zap/1 is not a known channel\n"


def test_show_channel_needs_one_name(sink):
    assert execute(sink, "show channel").result is CommandResult.SHOWUSAGE
    assert sink.getvalue() == SHOWCHAN_USAGE


def test_show_channel_completion(channels):
    assert candidates("show channel ", "") == channels.names()
    assert candidates("show channel s", "s") == ["SIP/100-0001"]
    assert complete("show channel I", "I", 0) == "IAX2/trunk-0002"
    assert complete("show channel I", "I", 1) is None


# =============================================================================
# show modules / load / unload argument checks
# =============================================================================

def test_show_modules_header(sink):
    execute(sink, "show modules")
    assert sink.getvalue() == f"{'Module':<20} {'Description':<40} {'Use Count':<10}\n"


def test_show_modules_usage(sink):
    assert execute(sink, "show modules all").result is CommandResult.SHOWUSAGE
    assert sink.getvalue() == MODLIST_USAGE


@pytest.mark.parametrize("line", ["load", "load sip dialplan"])
def test_load_usage(sink, line):
    assert execute(sink, line).result is CommandResult.SHOWUSAGE
    assert sink.getvalue() == LOAD_USAGE


@pytest.mark.parametrize("line", ["unload", "unload -x sip", "unload sip -f", "unload sip dialplan"])
def test_unload_usage(sink, line):
    assert execute(sink, line).result is CommandResult.SHOWUSAGE
    assert sink.getvalue() == UNLOAD_USAGE


def test_load_completion_offers_unloaded_modules():
    assert candidates("load ", "") == ["dialplan", "sip"]
    assert candidates("load s", "s") == ["sip"]
    MODULES.load("sip")
    assert candidates("load ", "") == ["dialplan"]
    assert candidates("unload ", "") == ["sip"]
    assert candidates("unload -f ", "") == ["sip"]


def test_help_lists_the_dispatching_registry(make_entry):
    custom = CommandRegistry(BUILTINS)
    custom.register(make_entry("queue", "show"))

    out = StringIO()
    execute(out, "help", registry=custom)
    assert out.getvalue().splitlines() == custom.format_listing()
    assert any(line.startswith("queue show") for line in out.getvalue().splitlines())

    out = StringIO()
    execute(out, "help queue show", registry=custom)
    assert out.getvalue() == "Usage: queue show\n"

    out = StringIO()
    execute(out, "help")
    assert not any(line.startswith("queue show") for line in out.getvalue().splitlines())
    assert active_registry() is REGISTRY
