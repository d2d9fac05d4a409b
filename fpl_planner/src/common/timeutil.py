"""
Gameweek utilities for FPL Planner.
"""

from typing import Dict, Optional
from .config import get_logger

logger = get_logger(__name__)


def get_current_gw(api_data: Optional[Dict] = None) -> int:
    """
    Get current gameweek from bootstrap events.

    Uses the event flagged ``is_current``; before the first deadline of a
    round has passed, falls back to the event before ``is_next``.

    Args:
        api_data: FPL bootstrap data

    Returns:
        Current gameweek number (1 when it cannot be determined)
    """
    events = (api_data or {}).get('events') or []

    for event in events:
        if event.get('is_current'):
            return int(event['id'])

    for event in events:
        if event.get('is_next'):
            return max(1, int(event['id']) - 1)

    logger.warning("Could not detect current gameweek from bootstrap data, using 1")
    return 1
