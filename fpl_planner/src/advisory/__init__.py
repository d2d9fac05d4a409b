"""
Player-level advice for FPL Planner.

This module flags players worth replacing and ranks their substitutes:
- Risk assessment with configurable severity thresholds
- Composite scoring of affordable same-position replacements
"""

from .risk import RiskAssessor, RiskFactor, RiskType, Severity, find_problem_players
from .replacements import ReplacementScorer, Candidate

__all__ = [
    "RiskAssessor",
    "RiskFactor",
    "RiskType",
    "Severity",
    "find_problem_players",
    "ReplacementScorer",
    "Candidate",
]
