#!/usr/bin/env python3
# switchboard/config/__init__.py
from __future__ import annotations

"""
Package for console configuration.

Provides:
- Layered configuration loader with environment variable overrides (`config`).
"""


from .config import AppConfig, DEFAULTS, ENV_PREFIX, load_config

__all__ = [
    "AppConfig",
    "DEFAULTS",
    "ENV_PREFIX",
    "load_config",
]
