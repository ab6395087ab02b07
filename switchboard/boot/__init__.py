#!/usr/bin/env python3
# switchboard/boot/__init__.py
from __future__ import annotations
"""
Boot sequence package.

Exports:
- boot_sequence: Orchestrated startup pipeline with [  OK  ] / [FAILED] lines.
- BootState: Dataclass containing config, logger, autoloaded modules and command count.
"""


from .boot import BootState, boot_sequence

__all__ = ["boot_sequence", "BootState"]
