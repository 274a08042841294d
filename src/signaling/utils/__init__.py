"""
Utilities for the Signaling Relay

This module contains utility functions for delivering frames and
validating client input.
"""

from .broadcast import deliver, send_json
from .validation import validate_room_id

__all__ = [
    "deliver",
    "send_json",
    "validate_room_id",
]
