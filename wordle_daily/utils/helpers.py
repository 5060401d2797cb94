"""
Helper Functions

Contains utility functions used throughout the application.
"""

import uuid
from typing import Optional


def resolve_player_id(player_id: Optional[str] = None) -> str:
    """Return a cleaned player id, generating a new one when none is given."""
    if player_id is not None:
        cleaned = str(player_id).strip()
        if cleaned:
            return cleaned
    return str(uuid.uuid4())


def storage_key(prefix: str, player_id: str) -> str:
    """Key under which a player's game blob lives in the key-value store."""
    return f"{prefix}:{player_id}"
