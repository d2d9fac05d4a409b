"""
Transfer planning for FPL Planner.

This module holds the transfer sandbox and everything computed from it:
- Squad plan state (baseline squad plus planned swaps)
- Team metrics and polarity-aware deltas
- Transfer cost summary
- League percentile comparison
"""

from .state import SquadPlanState, Change
from .metrics import MetricsAggregator, TeamMetrics
from .costs import calculate_transfer_costs
from .league import LeagueComparison

__all__ = [
    "SquadPlanState",
    "Change",
    "MetricsAggregator",
    "TeamMetrics",
    "calculate_transfer_costs",
    "LeagueComparison",
]
