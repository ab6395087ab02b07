# plugins/sip/__init__.py
from __future__ import annotations

"""
SIP channel driver console commands:
- peer listing and details
- protocol debug toggle
"""

CATEGORY_DESCRIPTION = "Session Initiation Protocol (SIP) peers"
