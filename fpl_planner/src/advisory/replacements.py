"""
Replacement candidate scoring.

For a player the manager wants to move on, ranks every affordable player in
the same position by a 0-100 composite of form, upcoming fixtures, value,
minutes and transfer momentum.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Union
from ..common.config import get_config, get_logger
from ..providers.catalog import PlayerCatalog, minutes_percentage, points_per_million
from ..providers.schemas import Pick, Player

logger = get_logger(__name__)

# Per-component caps of the composite score
FORM_CAP = 30.0
FIXTURE_CAP = 25.0
VALUE_CAP = 20.0
MINUTES_CAP = 15.0
MOMENTUM_CAP = 10.0

FORM_WEIGHT = 5.0
FIXTURE_WEIGHT = 5.0
VALUE_WEIGHT = 10.0
MINUTES_DIVISOR = 6.67
MOMENTUM_DIVISOR = 10_000.0
MAX_FIXTURE_DIFFICULTY = 5.0


@dataclass(frozen=True)
class ScoreBreakdown:
    form: float
    fixtures: float
    value: float
    minutes: float
    momentum: float

    @property
    def total(self) -> float:
        return self.form + self.fixtures + self.value + self.minutes + self.momentum


@dataclass(frozen=True)
class Candidate:
    player: Player
    score: float
    price_diff: int
    breakdown: ScoreBreakdown


class ReplacementScorer:
    """
    Ranks substitutes for an outgoing player under a budget.
    """

    def __init__(
        self,
        catalog: PlayerCatalog,
        max_results: Optional[int] = None,
        fixture_window: Optional[int] = None
    ):
        """
        Args:
            catalog: Player catalog supplying the candidate pool and fixtures
            max_results: Number of candidates returned (settings default: 5)
            fixture_window: Upcoming fixtures averaged for difficulty (settings default: 5)
        """
        config = get_config()
        self.catalog = catalog
        self.max_results = max_results or config.get("replacements.max_results", 5)
        self.fixture_window = fixture_window or config.get("replacements.fixture_window", 5)

    def score_candidate(self, player: Player, gameweek: int) -> ScoreBreakdown:
        """
        Composite score components for one player.

        Args:
            player: Candidate player
            gameweek: Current gameweek (for minutes percentage)

        Returns:
            Capped per-component scores
        """
        avg_fdr = self.catalog.calculate_fixture_difficulty(player.team, self.fixture_window)
        fixture_score = max(0.0, (MAX_FIXTURE_DIFFICULTY - avg_fdr) * FIXTURE_WEIGHT)
        momentum = player.net_transfers_event / MOMENTUM_DIVISOR

        return ScoreBreakdown(
            form=min(FORM_CAP, player.form * FORM_WEIGHT),
            fixtures=min(FIXTURE_CAP, fixture_score),
            value=min(VALUE_CAP, points_per_million(player) * VALUE_WEIGHT),
            minutes=min(MINUTES_CAP, minutes_percentage(player, gameweek) / MINUTES_DIVISOR),
            momentum=min(MOMENTUM_CAP, max(0.0, momentum)),
        )

    def find_replacements(
        self,
        outgoing: Player,
        squad: Iterable[Union[Pick, int]],
        bank: int,
        gameweek: int
    ) -> List[Candidate]:
        """
        Find the best affordable substitutes for ``outgoing``.

        Args:
            outgoing: Player being replaced
            squad: Current squad as picks or player ids
            bank: Money in the bank (tenths)
            gameweek: Current gameweek

        Returns:
            Up to ``max_results`` candidates, highest score first; empty when
            nobody qualifies
        """
        squad_ids = {p.element if isinstance(p, Pick) else int(p) for p in squad}
        max_budget = outgoing.now_cost + bank

        pool = [
            p for p in self.catalog.get_all_players()
            if p.element_type == outgoing.element_type
            and p.id != outgoing.id
            and p.id not in squad_ids
            and p.now_cost <= max_budget
        ]
        logger.debug(
            f"Found {len(pool)} candidates for {outgoing.web_name} "
            f"(type {outgoing.element_type}, budget {max_budget / 10:.1f}m)"
        )

        if not pool:
            return []

        candidates = []
        for player in pool:
            breakdown = self.score_candidate(player, gameweek)
            candidates.append(Candidate(
                player=player,
                score=breakdown.total,
                price_diff=player.now_cost - outgoing.now_cost,
                breakdown=breakdown,
            ))

        # sorted() is stable: equal scores keep catalog order
        candidates = sorted(candidates, key=lambda c: c.score, reverse=True)
        top = candidates[:self.max_results]

        logger.debug(
            "Top replacements for %s: %s",
            outgoing.web_name,
            ", ".join(f"{c.player.web_name} ({c.score:.0f})" for c in top)
        )
        return top
