"""
FPL Planner - transfer planning and squad analysis for Fantasy Premier League.

Provides:
- Per-player risk assessment (injury, suspension, rotation, form, value)
- Budget-constrained replacement suggestions
- A transfer sandbox with before/after squad metrics
- Percentile comparison against classic league peers

Version: 0.1.0
Author: FPL Planner Team
"""

__version__ = "0.1.0"
__author__ = "FPL Planner Team"

# Core modules
from .common.config import get_config, get_logger
from .common.cache import CacheManager, TTLCache
from .common.timeutil import get_current_gw

__all__ = [
    "get_config",
    "get_logger",
    "CacheManager",
    "TTLCache",
    "get_current_gw",
]
