"""
Data providers for FPL Planner.

This module contains the data access layer:
- FPL API client (bootstrap, fixtures, entries, picks, league standings)
- Typed records parsed from FPL documents
- Player catalog with fixture difficulty lookups
"""

from .fpl_api import FPLAPIClient
from .catalog import PlayerCatalog
from .schemas import Player, Pick, SquadSnapshot, TeamLoad, LeagueStandings

__all__ = [
    "FPLAPIClient",
    "PlayerCatalog",
    "Player",
    "Pick",
    "SquadSnapshot",
    "TeamLoad",
    "LeagueStandings",
]
