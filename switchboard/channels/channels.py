#!/usr/bin/env python3
# switchboard/channels/channels.py
from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Iterator, Optional


@dataclass(slots=True)
class Channel:
    """
    A single channel (call leg) known to the server.

    Only the fields the console displays are modelled; the media and
    signalling state live with the channel driver that owns the leg.
    """
    name: str
    type: str
    context: str = "default"
    exten: str = "s"
    priority: int = 1
    appl: Optional[str] = None
    data: Optional[str] = None
    callerid: Optional[str] = None
    dnid: Optional[str] = None
    state: int = 0
    rings: int = 0
    format: int = 0
    master: Optional[str] = None
    blocking_in: Optional[str] = None


class ChannelDirectory:
    """Thread-safe, insertion-ordered table of active channels."""

    def __init__(self) -> None:
        self._channels: list[Channel] = []
        self._lock = threading.Lock()

    def add(self, channel: Channel) -> Channel:
        with self._lock:
            if any(c.name.lower() == channel.name.lower() for c in self._channels):
                raise ValueError(f"Channel '{channel.name}' already exists.")
            self._channels.append(channel)
        return channel

    def remove(self, name: str) -> bool:
        """Hang up (forget) a channel by name; returns False when unknown."""
        with self._lock:
            for index, channel in enumerate(self._channels):
                if channel.name.lower() == name.lower():
                    del self._channels[index]
                    return True
        return False

    def find(self, name: str) -> Optional[Channel]:
        """Case-insensitive lookup by channel name."""
        with self._lock:
            for channel in self._channels:
                if channel.name.lower() == name.lower():
                    return channel
        return None

    def walk(self) -> Iterator[Channel]:
        """Iterate over a snapshot of the channels."""
        with self._lock:
            snapshot = list(self._channels)
        return iter(snapshot)

    def names(self) -> list[str]:
        return [channel.name for channel in self.walk()]

    def clear(self) -> None:
        with self._lock:
            self._channels.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._channels)


# Global channel table used across the app
CHANNELS = ChannelDirectory()
