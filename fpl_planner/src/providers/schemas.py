"""
Typed records for the FPL documents the planner consumes.

The FPL API (and the backend proxy that wraps it) returns loosely shaped
JSON: decimals arrive as strings, some fields are missing early in the
season, and rank fields can be null. These dataclasses parse that JSON once
at the boundary and make the optional parts explicit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional, Tuple

SQUAD_SIZE = 15
STARTING_XI_SIZE = 11


class Position(IntEnum):
    """FPL ``element_type`` codes."""

    GOALKEEPER = 1
    DEFENDER = 2
    MIDFIELDER = 3
    FORWARD = 4
    MANAGER = 5

    @property
    def short_name(self) -> str:
        return {1: "GK", 2: "DEF", 3: "MID", 4: "FWD", 5: "AM"}[self.value]


def _to_float(value: Any, default: float = 0.0) -> float:
    """Parse FPL decimal strings ("4.5") and tolerate None/garbage."""
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _to_int(value: Any, default: int = 0) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _to_optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class Player:
    """A bootstrap ``elements`` entry."""

    id: int
    web_name: str
    element_type: int
    team: int
    now_cost: int
    form: float = 0.0
    selected_by_percent: float = 0.0
    total_points: int = 0
    minutes: int = 0
    yellow_cards: int = 0
    status: str = "a"
    chance_of_playing_next_round: Optional[int] = None
    cost_change_event: int = 0
    ep_next: float = 0.0
    transfers_in_event: int = 0
    transfers_out_event: int = 0
    expected_goal_involvements_per_90: float = 0.0

    @property
    def position(self) -> Optional[Position]:
        """Position enum, None for element types FPL has not used before."""
        try:
            return Position(self.element_type)
        except ValueError:
            return None

    @property
    def price(self) -> float:
        """Price in currency units (now_cost is stored in tenths)."""
        return self.now_cost / 10

    @property
    def net_transfers_event(self) -> int:
        return self.transfers_in_event - self.transfers_out_event

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Player":
        if "id" not in data:
            raise ValueError("Player record is missing 'id'")
        return cls(
            id=int(data["id"]),
            web_name=str(data.get("web_name") or f"Player {data['id']}"),
            element_type=_to_int(data.get("element_type"), 3),
            team=_to_int(data.get("team")),
            now_cost=_to_int(data.get("now_cost")),
            form=_to_float(data.get("form")),
            selected_by_percent=_to_float(data.get("selected_by_percent")),
            total_points=_to_int(data.get("total_points")),
            minutes=_to_int(data.get("minutes")),
            yellow_cards=_to_int(data.get("yellow_cards")),
            status=str(data.get("status") or "a"),
            chance_of_playing_next_round=_to_optional_int(data.get("chance_of_playing_next_round")),
            cost_change_event=_to_int(data.get("cost_change_event")),
            ep_next=_to_float(data.get("ep_next")),
            transfers_in_event=_to_int(data.get("transfers_in_event")),
            transfers_out_event=_to_int(data.get("transfers_out_event")),
            expected_goal_involvements_per_90=_to_float(data.get("expected_goal_involvements_per_90")),
        )


@dataclass(frozen=True)
class Pick:
    """One squad slot."""

    element: int
    position: int
    multiplier: int = 1
    is_captain: bool = False
    is_vice_captain: bool = False

    @property
    def is_starter(self) -> bool:
        return self.position <= STARTING_XI_SIZE

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Pick":
        try:
            element = int(data["element"])
            position = int(data["position"])
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Invalid pick record {data!r}: {e}")
        if not 1 <= position <= SQUAD_SIZE:
            raise ValueError(f"Pick slot {position} outside 1..{SQUAD_SIZE}")
        return cls(
            element=element,
            position=position,
            multiplier=_to_int(data.get("multiplier"), 1),
            is_captain=bool(data.get("is_captain", False)),
            is_vice_captain=bool(data.get("is_vice_captain", False)),
        )


def validate_picks(picks: Tuple[Pick, ...]) -> None:
    """
    Check squad-level pick invariants.

    Raises:
        ValueError: wrong squad size, duplicate slots, or not exactly one
            captain among the starters
    """
    if len(picks) != SQUAD_SIZE:
        raise ValueError(f"Squad must have exactly {SQUAD_SIZE} picks (got {len(picks)})")

    slots = [p.position for p in picks]
    if len(set(slots)) != len(slots):
        raise ValueError(f"Duplicate slot indices in squad: {sorted(slots)}")

    captains = [p for p in picks if p.is_captain and p.is_starter]
    if len(captains) != 1:
        raise ValueError(f"Squad must have exactly one starting captain (got {len(captains)})")


@dataclass(frozen=True)
class SquadSnapshot:
    """Immutable capture of a squad: bank, value and 15 picks."""

    bank: int
    value: int
    picks: Tuple[Pick, ...]

    def __post_init__(self):
        object.__setattr__(self, "picks", tuple(self.picks))
        validate_picks(self.picks)

    @property
    def player_ids(self) -> List[int]:
        return [p.element for p in self.picks]


@dataclass(frozen=True)
class EntrySummary:
    """Manager/team header from ``entry/{id}/``."""

    id: int
    name: str
    player_first_name: str = ""
    player_last_name: str = ""
    overall_rank: Optional[int] = None
    summary_overall_points: Optional[int] = None

    @property
    def manager_name(self) -> str:
        return f"{self.player_first_name} {self.player_last_name}".strip()

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "EntrySummary":
        if "id" not in data:
            raise ValueError("Entry record is missing 'id'")
        return cls(
            id=int(data["id"]),
            name=str(data.get("name") or f"Team {data['id']}"),
            player_first_name=str(data.get("player_first_name") or ""),
            player_last_name=str(data.get("player_last_name") or ""),
            overall_rank=_to_optional_int(data.get("summary_overall_rank")),
            summary_overall_points=_to_optional_int(data.get("summary_overall_points")),
        )


@dataclass(frozen=True)
class EntryHistory:
    """``entry_history`` block of a picks document."""

    bank: int = 0
    value: int = 0
    points: Optional[int] = None
    total_points: Optional[int] = None
    event_transfers: Optional[int] = None
    event_transfers_cost: Optional[int] = None

    @classmethod
    def from_api(cls, data: Optional[Dict[str, Any]]) -> "EntryHistory":
        data = data or {}
        return cls(
            bank=_to_int(data.get("bank")),
            value=_to_int(data.get("value")),
            points=_to_optional_int(data.get("points")),
            total_points=_to_optional_int(data.get("total_points")),
            event_transfers=_to_optional_int(data.get("event_transfers")),
            event_transfers_cost=_to_optional_int(data.get("event_transfers_cost")),
        )


@dataclass(frozen=True)
class TeamLoad:
    """A loaded squad: ``{team, picks{picks, entry_history}, gameweek}``."""

    team: Optional[EntrySummary]
    picks: Tuple[Pick, ...]
    entry_history: EntryHistory
    gameweek: int

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "TeamLoad":
        picks_doc = data.get("picks") or {}
        raw_picks = picks_doc.get("picks") or []
        team_doc = data.get("team")
        return cls(
            team=EntrySummary.from_api(team_doc) if team_doc else None,
            picks=tuple(Pick.from_api(p) for p in raw_picks),
            entry_history=EntryHistory.from_api(picks_doc.get("entry_history")),
            gameweek=_to_int(data.get("gameweek"), 1),
        )

    def to_snapshot(self) -> SquadSnapshot:
        return SquadSnapshot(
            bank=self.entry_history.bank,
            value=self.entry_history.value,
            picks=self.picks,
        )


@dataclass(frozen=True)
class StandingEntry:
    """One row of classic league standings."""

    entry: int
    entry_name: str = ""
    player_name: str = ""
    entry_rank: Optional[int] = None
    entry_last_rank: Optional[int] = None
    total: Optional[int] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "StandingEntry":
        if "entry" not in data:
            raise ValueError("Standings row is missing 'entry'")
        return cls(
            entry=int(data["entry"]),
            entry_name=str(data.get("entry_name") or ""),
            player_name=str(data.get("player_name") or ""),
            entry_rank=_to_optional_int(data.get("rank", data.get("entry_rank"))),
            entry_last_rank=_to_optional_int(data.get("last_rank", data.get("entry_last_rank"))),
            total=_to_optional_int(data.get("total")),
        )


@dataclass(frozen=True)
class LeagueStandings:
    """Classic league standings page(s)."""

    league_id: int
    name: str
    results: Tuple[StandingEntry, ...] = field(default_factory=tuple)
    has_next: bool = False

    @classmethod
    def from_api(cls, league_id: int, data: Dict[str, Any]) -> "LeagueStandings":
        league = data.get("league") or {}
        standings = data.get("standings") or {}
        return cls(
            league_id=league_id,
            name=str(league.get("name") or f"League {league_id}"),
            results=tuple(StandingEntry.from_api(r) for r in standings.get("results") or []),
            has_next=bool(standings.get("has_next", False)),
        )


@dataclass(frozen=True)
class Fixture:
    """A fixture from one team's point of view."""

    event: int
    opponent_id: Optional[int]
    opponent: str
    difficulty: int
    is_home: bool
