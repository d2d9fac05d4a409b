"""
Player risk assessment.

Flags the reasons a squad player may need replacing: injury doubts,
suspension exposure, rotation, poor form, poor value, zero minutes and
falling price. Assessment is a pure function of the Player record and the
current gameweek; nothing is cached.

Severity boundaries for each risk type live in ``DEFAULT_RISK_THRESHOLDS``
and can be overridden from the ``risk:`` block of settings.yaml.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple
from ..common.config import get_config, get_logger
from ..providers.catalog import minutes_percentage, points_per_million
from ..providers.schemas import Player

logger = get_logger(__name__)


class RiskType(str, Enum):
    INJURY = "injury"
    SUSPENSION = "suspension"
    ROTATION = "rotation"
    FORM = "form"
    VALUE = "value"
    DEADWOOD = "deadwood"
    PRICE = "price"


class Severity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


SEVERITY_ORDER = {Severity.HIGH: 0, Severity.MEDIUM: 1, Severity.LOW: 2}


DEFAULT_RISK_THRESHOLDS: Dict[str, Dict[str, Any]] = {
    "injury": {
        "flag_below": 75,
        "high_below": 50,
    },
    "suspension": {
        "medium_yellows": 4,
        "high_yellows": 9,
        "suspended_status": "s",
    },
    "rotation": {
        "min_gameweek": 5,
        "flag_below_pct": 50,
        "medium_below_pct": 30,
    },
    "form": {
        "min_gameweek": 3,
        "min_minutes": 180,
        "flag_below": 3.0,
    },
    "value": {
        "min_gameweek": 5,
        "baseline_ppm": 2.0,
        "ratio": 0.6,
        "min_price": 60,
    },
    "deadwood": {
        "min_gameweek": 3,
    },
}


def load_risk_thresholds(overrides: Optional[Dict[str, Dict[str, Any]]] = None) -> Dict[str, Dict[str, Any]]:
    """
    Merge per-type overrides onto the default threshold table.

    Unknown risk types or keys are rejected so a typo in settings.yaml
    cannot silently disable a check.
    """
    thresholds = copy.deepcopy(DEFAULT_RISK_THRESHOLDS)
    for risk_type, values in (overrides or {}).items():
        if risk_type not in thresholds:
            raise ValueError(f"Unknown risk type in thresholds: {risk_type}")
        for key, value in (values or {}).items():
            if key not in thresholds[risk_type]:
                raise ValueError(f"Unknown threshold '{key}' for risk type '{risk_type}'")
            thresholds[risk_type][key] = value
    return thresholds


@dataclass(frozen=True)
class RiskFactor:
    type: RiskType
    severity: Severity
    message: str
    details: str


class RiskAssessor:
    """
    Evaluates every risk rule for a player, in priority order.
    """

    def __init__(self, thresholds: Optional[Dict[str, Dict[str, Any]]] = None):
        """
        Args:
            thresholds: Per-type overrides (settings.yaml ``risk:`` block if None)
        """
        if thresholds is None:
            thresholds = get_config().get_risk_thresholds()
        self.thresholds = load_risk_thresholds(thresholds)

    def assess(self, player: Player, gameweek: int) -> List[RiskFactor]:
        """
        Assess a player's risk factors.

        Args:
            player: Player record
            gameweek: Current gameweek (sample-size guards depend on it)

        Returns:
            Risk factors in rule order: injury, suspension, rotation, form,
            value, deadwood, price
        """
        gw = gameweek or 1
        minutes_pct = minutes_percentage(player, gw)

        risks: List[RiskFactor] = []
        risks.extend(self._injury(player))
        risks.extend(self._suspension(player))
        risks.extend(self._rotation(player, gw, minutes_pct))
        risks.extend(self._form(player, gw))
        risks.extend(self._value(player, gw))
        risks.extend(self._deadwood(gw, minutes_pct))
        risks.extend(self._price_drop(player))
        return risks

    def _injury(self, player: Player) -> List[RiskFactor]:
        chance = player.chance_of_playing_next_round
        rules = self.thresholds["injury"]
        if chance is None or chance >= rules["flag_below"]:
            return []

        return [RiskFactor(
            type=RiskType.INJURY,
            severity=Severity.HIGH if chance < rules["high_below"] else Severity.MEDIUM,
            message=f"{chance}% fit",
            details=f"Injury concern - only {chance}% chance of playing next round",
        )]

    def _suspension(self, player: Player) -> List[RiskFactor]:
        rules = self.thresholds["suspension"]
        risks = []

        yellows = player.yellow_cards
        if yellows >= rules["medium_yellows"]:
            risks.append(RiskFactor(
                type=RiskType.SUSPENSION,
                severity=Severity.HIGH if yellows >= rules["high_yellows"] else Severity.MEDIUM,
                message=f"{yellows} yellows",
                details=f"{yellows} yellow cards - suspension risk",
            ))

        # Card count and an active ban are reported separately
        if player.status == rules["suspended_status"]:
            risks.append(RiskFactor(
                type=RiskType.SUSPENSION,
                severity=Severity.HIGH,
                message="Suspended",
                details="Player is currently suspended",
            ))

        return risks

    def _rotation(self, player: Player, gw: int, minutes_pct: float) -> List[RiskFactor]:
        rules = self.thresholds["rotation"]
        if gw < rules["min_gameweek"]:
            return []
        if minutes_pct >= rules["flag_below_pct"] or player.minutes <= 0:
            return []

        return [RiskFactor(
            type=RiskType.ROTATION,
            severity=Severity.MEDIUM if minutes_pct < rules["medium_below_pct"] else Severity.LOW,
            message=f"{minutes_pct:.0f}% minutes",
            details=f"Low playing time - rotation risk ({minutes_pct:.0f}% of available minutes)",
        )]

    def _form(self, player: Player, gw: int) -> List[RiskFactor]:
        rules = self.thresholds["form"]
        if gw < rules["min_gameweek"] or player.minutes <= rules["min_minutes"]:
            return []
        if player.form >= rules["flag_below"]:
            return []

        return [RiskFactor(
            type=RiskType.FORM,
            severity=Severity.LOW,
            message=f"Form: {player.form:.1f}",
            details=f"Poor recent form ({player.form:.1f})",
        )]

    def _value(self, player: Player, gw: int) -> List[RiskFactor]:
        rules = self.thresholds["value"]
        if gw < rules["min_gameweek"] or player.now_cost < rules["min_price"]:
            return []

        ppm = points_per_million(player)
        if ppm >= rules["baseline_ppm"] * rules["ratio"]:
            return []

        return [RiskFactor(
            type=RiskType.VALUE,
            severity=Severity.LOW,
            message=f"PPM: {ppm:.1f}",
            details=f"Poor value ({ppm:.1f} points per million)",
        )]

    def _deadwood(self, gw: int, minutes_pct: float) -> List[RiskFactor]:
        if gw < self.thresholds["deadwood"]["min_gameweek"] or minutes_pct != 0:
            return []

        return [RiskFactor(
            type=RiskType.DEADWOOD,
            severity=Severity.HIGH,
            message="No minutes",
            details="Player has not played any minutes",
        )]

    def _price_drop(self, player: Player) -> List[RiskFactor]:
        change = player.cost_change_event
        if change >= 0:
            return []

        return [RiskFactor(
            type=RiskType.PRICE,
            severity=Severity.LOW,
            message=f"{change / 10}m drop",
            details=f"Price dropped by £{abs(change) / 10}m this gameweek",
        )]


def has_high_risk(risks: Iterable[RiskFactor]) -> bool:
    return any(r.severity == Severity.HIGH for r in risks)


def has_medium_risk(risks: Iterable[RiskFactor]) -> bool:
    return any(r.severity == Severity.MEDIUM for r in risks)


def highest_severity(risks: Iterable[RiskFactor]) -> Optional[Severity]:
    """Most severe level present, or None for an empty list."""
    severities = [r.severity for r in risks]
    if not severities:
        return None
    return min(severities, key=SEVERITY_ORDER.__getitem__)


@dataclass
class RiskSummary:
    total: int
    high: int
    medium: int
    low: int
    risks: List[RiskFactor] = field(default_factory=list)

    @property
    def has_any(self) -> bool:
        return self.total > 0

    @property
    def has_high(self) -> bool:
        return self.high > 0

    @property
    def has_medium(self) -> bool:
        return self.medium > 0


def get_risk_summary(player: Player, gameweek: int, assessor: Optional[RiskAssessor] = None) -> RiskSummary:
    """Counts per severity plus the full factor list for one player."""
    risks = (assessor or RiskAssessor()).assess(player, gameweek)
    return RiskSummary(
        total=len(risks),
        high=sum(1 for r in risks if r.severity == Severity.HIGH),
        medium=sum(1 for r in risks if r.severity == Severity.MEDIUM),
        low=sum(1 for r in risks if r.severity == Severity.LOW),
        risks=risks,
    )


def find_problem_players(
    players: Iterable[Player],
    gameweek: int,
    assessor: Optional[RiskAssessor] = None
) -> List[Tuple[Player, List[RiskFactor]]]:
    """
    Players carrying at least one high or medium risk.

    Returns:
        ``(player, risks)`` pairs, high-risk players first; input order is
        kept within each group
    """
    assessor = assessor or RiskAssessor()
    flagged = []
    for player in players:
        risks = assessor.assess(player, gameweek)
        if has_high_risk(risks) or has_medium_risk(risks):
            flagged.append((player, risks))

    flagged.sort(key=lambda item: SEVERITY_ORDER[highest_severity(item[1])])
    logger.debug(f"Flagged {len(flagged)} problem players for GW{gameweek}")
    return flagged
