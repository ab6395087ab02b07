# plugins/sip/entrypoint.py
from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Optional, Sequence, TextIO

from switchboard.channels import CHANNELS
from switchboard.commands import CommandResult, command
from switchboard.ui import print_line, write_text

DESCRIPTION = "Session Initiation Protocol (SIP)"


@dataclass(slots=True)
class Peer:
    name: str
    host: str
    port: int = 5060
    dynamic: bool = False
    status: str = "Unmonitored"


_PEERS: dict[str, Peer] = {}
_PEERS_LOCK = threading.Lock()
_debug = False


def add_peer(peer: Peer) -> Peer:
    with _PEERS_LOCK:
        _PEERS[peer.name.lower()] = peer
    return peer


def find_peer(name: str) -> Optional[Peer]:
    with _PEERS_LOCK:
        return _PEERS.get(name.lower())


def peer_names() -> list[str]:
    with _PEERS_LOCK:
        return sorted(peer.name for peer in _PEERS.values())


def debug_enabled() -> bool:
    return _debug


def complete_peer(line: str, word: str, pos: int, state: int) -> Optional[str]:
    if pos != 3:
        return None
    matches = [name for name in peer_names() if name.lower().startswith(word.lower())]
    return matches[state] if state < len(matches) else None


@command(
    "sip", "show", "peers",
    usage="Usage: sip show peers\n"
          "       Lists all known SIP peers.\n",
)
def sip_show_peers(sink: TextIO, argv: Sequence[str]) -> CommandResult:
    """List SIP peers"""
    if len(argv) != 3:
        return CommandResult.SHOWUSAGE
    print_line(f"{'Name':<20} {'Host':<16} {'Dyn':<4} {'Port':<6} {'Status'}", file=sink)
    with _PEERS_LOCK:
        peers = sorted(_PEERS.values(), key=lambda p: p.name.lower())
    for peer in peers:
        print_line(
            f"{peer.name:<20} {peer.host:<16} {'D' if peer.dynamic else ' ':<4} {peer.port:<6} {peer.status}",
            file=sink)
    return CommandResult.SUCCESS


@command(
    "sip", "show", "peer",
    usage="Usage: sip show peer <name>\n"
          "       Shows all details on one SIP peer.\n",
    generator=complete_peer,
)
def sip_show_peer(sink: TextIO, argv: Sequence[str]) -> CommandResult:
    """Show details on a specific SIP peer"""
    if len(argv) != 4:
        return CommandResult.SHOWUSAGE
    peer = find_peer(argv[3])
    if peer is None:
        print_line(f"Peer {argv[3]} not found.", file=sink)
        return CommandResult.SUCCESS
    write_text(
        f"  * Name       : {peer.name}\n"
        f"  Addr->IP     : {peer.host} Port {peer.port}\n"
        f"  Dynamic      : {'Yes' if peer.dynamic else 'No'}\n"
        f"  Status       : {peer.status}\n",
        file=sink)
    return CommandResult.SUCCESS


@command(
    "sip", "debug",
    usage="Usage: sip debug\n"
          "       Enables dumping of SIP packets for debugging purposes.\n",
)
def sip_debug(sink: TextIO, argv: Sequence[str]) -> CommandResult:
    """Enable SIP debugging"""
    global _debug
    if len(argv) != 2:
        return CommandResult.SHOWUSAGE
    _debug = True
    print_line("SIP Debugging Enabled", file=sink)
    return CommandResult.SUCCESS


@command(
    "sip", "no", "debug",
    usage="Usage: sip no debug\n"
          "       Disables dumping of SIP packets for debugging purposes.\n",
)
def sip_no_debug(sink: TextIO, argv: Sequence[str]) -> CommandResult:
    """Disable SIP debugging"""
    global _debug
    if len(argv) != 3:
        return CommandResult.SHOWUSAGE
    _debug = False
    print_line("SIP Debugging Disabled", file=sink)
    return CommandResult.SUCCESS


COMMANDS = [sip_debug, sip_no_debug, sip_show_peer, sip_show_peers]


def usecount() -> int:
    """Active SIP channels keep the driver loaded."""
    return sum(1 for channel in CHANNELS.walk() if channel.type.upper() == "SIP")


def unload_module() -> bool:
    global _debug
    _debug = False
    with _PEERS_LOCK:
        _PEERS.clear()
    return True
