"""
Squad-level metrics and before/after deltas.

Metrics are recomputed from the catalog on every call; a squad is a list of
picks, so the same functions serve the loaded squad, the planned squad and
any peer squad pulled from a league.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Optional, Sequence
import numpy as np
from ..advisory.risk import RiskAssessor, Severity, highest_severity
from ..common.config import get_config, get_logger
from ..providers.catalog import PlayerCatalog, minutes_percentage, points_per_million
from ..providers.schemas import Pick
from .state import Change, apply_changes

logger = get_logger(__name__)

# True: higher is better, False: lower is better, None: informational only
METRIC_POLARITY: Dict[str, Optional[bool]] = {
    "avg_ppm": True,
    "avg_fdr": False,
    "avg_form": True,
    "expected_points": True,
    "avg_ownership": None,
    "avg_xgi": True,
}

RISK_POLARITY = False


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class RiskCount:
    high: int = 0
    medium: int = 0
    low: int = 0


@dataclass(frozen=True)
class TeamMetrics:
    avg_ppm: float = 0.0
    avg_fdr: float = 0.0
    avg_form: float = 0.0
    expected_points: float = 0.0
    risk_count: RiskCount = field(default_factory=RiskCount)
    avg_ownership: float = 0.0
    avg_minutes_percent: float = 0.0
    avg_xgi: float = 0.0
    player_count: int = 0

    @classmethod
    def empty(cls) -> "TeamMetrics":
        """The no-data record: all zeros with ``player_count == 0``."""
        return cls()

    @property
    def has_data(self) -> bool:
        return self.player_count > 0


@dataclass(frozen=True)
class MetricDelta:
    value: float
    delta: float
    direction: Direction


@dataclass(frozen=True)
class RiskCountDelta:
    high: MetricDelta
    medium: MetricDelta
    low: MetricDelta


@dataclass(frozen=True)
class MetricsDelta:
    avg_ppm: MetricDelta
    avg_fdr: MetricDelta
    avg_form: MetricDelta
    expected_points: MetricDelta
    risk_count: RiskCountDelta


def _direction(current: float, original: float, higher_is_better: bool) -> Direction:
    if current == original:
        return Direction.NEUTRAL
    improved = current > original if higher_is_better else current < original
    return Direction.UP if improved else Direction.DOWN


def _metric_delta(current: float, original: float, higher_is_better: bool) -> MetricDelta:
    return MetricDelta(
        value=current,
        delta=current - original,
        direction=_direction(current, original, higher_is_better),
    )


class MetricsAggregator:
    """
    Computes squad metrics against a player catalog.
    """

    def __init__(
        self,
        catalog: PlayerCatalog,
        assessor: Optional[RiskAssessor] = None,
        fixture_window: Optional[int] = None,
        expected_points_horizon: Optional[int] = None
    ):
        config = get_config()
        self.catalog = catalog
        self.assessor = assessor or RiskAssessor()
        self.fixture_window = fixture_window or config.get("metrics.fixture_window", 5)
        self.expected_points_horizon = expected_points_horizon or config.get("metrics.expected_points_horizon", 5)

    def calculate_team_metrics(self, picks: Optional[Sequence[Pick]], gameweek: int) -> TeamMetrics:
        """
        Aggregate metrics for a squad.

        Picks whose player is not in the catalog are ignored.

        Args:
            picks: Squad picks
            gameweek: Current gameweek

        Returns:
            TeamMetrics; ``TeamMetrics.empty()`` when no pick resolves to a player
        """
        if not picks:
            return TeamMetrics.empty()

        players = [self.catalog.get_player_by_id(p.element) for p in picks]
        players = [p for p in players if p is not None]
        if not players:
            logger.debug("No catalog players matched the squad picks")
            return TeamMetrics.empty()

        ppm = np.array([points_per_million(p) for p in players], dtype=float)
        fdr = np.array(
            [self.catalog.calculate_fixture_difficulty(p.team, self.fixture_window) for p in players],
            dtype=float
        )
        form = np.array([p.form for p in players], dtype=float)
        ownership = np.array([p.selected_by_percent for p in players], dtype=float)
        minutes_pct = np.array([minutes_percentage(p, gameweek) for p in players], dtype=float)
        xgi = np.array([p.expected_goal_involvements_per_90 for p in players], dtype=float)
        ep_next = np.array([p.ep_next for p in players], dtype=float)

        high = medium = low = 0
        for player in players:
            worst = highest_severity(self.assessor.assess(player, gameweek))
            if worst == Severity.HIGH:
                high += 1
            elif worst == Severity.MEDIUM:
                medium += 1
            elif worst == Severity.LOW:
                low += 1

        return TeamMetrics(
            avg_ppm=float(ppm.mean()),
            avg_fdr=float(fdr.mean()),
            avg_form=float(form.mean()),
            expected_points=float(ep_next.sum() * self.expected_points_horizon),
            risk_count=RiskCount(high=high, medium=medium, low=low),
            avg_ownership=float(ownership.mean()),
            avg_minutes_percent=float(minutes_pct.mean()),
            avg_xgi=float(xgi.mean()),
            player_count=len(players),
        )

    def calculate_projected_metrics(
        self,
        original_picks: Sequence[Pick],
        changes: Iterable[Change],
        gameweek: int
    ) -> TeamMetrics:
        """Metrics of ``original_picks`` with ``changes`` applied."""
        return self.calculate_team_metrics(apply_changes(original_picks, changes), gameweek)

    @staticmethod
    def calculate_metrics_delta(current: TeamMetrics, original: TeamMetrics) -> MetricsDelta:
        """
        Per-metric change from ``original`` to ``current``.

        ``direction`` is UP when the change is an improvement: higher PPM,
        form and expected points, lower fixture difficulty and fewer risks.
        """
        return MetricsDelta(
            avg_ppm=_metric_delta(current.avg_ppm, original.avg_ppm, METRIC_POLARITY["avg_ppm"]),
            avg_fdr=_metric_delta(current.avg_fdr, original.avg_fdr, METRIC_POLARITY["avg_fdr"]),
            avg_form=_metric_delta(current.avg_form, original.avg_form, METRIC_POLARITY["avg_form"]),
            expected_points=_metric_delta(
                current.expected_points, original.expected_points, METRIC_POLARITY["expected_points"]
            ),
            risk_count=RiskCountDelta(
                high=_metric_delta(current.risk_count.high, original.risk_count.high, RISK_POLARITY),
                medium=_metric_delta(current.risk_count.medium, original.risk_count.medium, RISK_POLARITY),
                low=_metric_delta(current.risk_count.low, original.risk_count.low, RISK_POLARITY),
            ),
        )
