"""
Validation Utilities

Contains utility functions for validating client input.
"""

from typing import Any, Optional, Tuple


def validate_room_id(room_id: Any) -> Tuple[bool, Optional[str]]:
    """
    Validate a room id supplied with join-room.

    Args:
        room_id: The value the client sent

    Returns:
        tuple: (is_valid, error_message)
            - is_valid: True if room_id is a non-empty string
            - error_message: Error message if invalid, None if valid
    """
    if not isinstance(room_id, str):
        return False, "Invalid room ID"

    if not room_id:
        return False, "Invalid room ID"

    return True, None
