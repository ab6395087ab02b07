# plugins/dialplan/__init__.py
from __future__ import annotations

"""
Dialplan console commands: inspect and edit contexts and their extensions.
"""

CATEGORY_DESCRIPTION = "Dialplan contexts and extensions"
