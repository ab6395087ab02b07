#!/usr/bin/env python3
# switchboard/channels/__init__.py
from __future__ import annotations

"""
Live channel table of the server process, as seen by the console.

Provides:
- `Channel`: one active call leg.
- `ChannelDirectory` and the process-wide `CHANNELS` instance.
"""

from .channels import Channel, ChannelDirectory, CHANNELS

__all__ = ["Channel", "ChannelDirectory", "CHANNELS"]
