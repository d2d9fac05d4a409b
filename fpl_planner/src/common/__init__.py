"""
Common utilities for FPL Planner.

This module provides core functionality used across the entire system:
- Configuration management
- Disk and in-memory caching
- Logging setup
- Gameweek detection
"""

from .config import get_config, get_logger
from .cache import CacheManager, TTLCache
from .timeutil import get_current_gw

__all__ = [
    "get_config",
    "get_logger",
    "CacheManager",
    "TTLCache",
    "get_current_gw",
]
