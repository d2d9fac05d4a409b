"""
Transfer cost summary for a planned set of swaps.
"""

from dataclasses import dataclass
from typing import Iterable
from ..common.config import get_logger
from ..providers.catalog import PlayerCatalog
from .state import Change

logger = get_logger(__name__)

POINTS_HIT_PER_TRANSFER = -4


@dataclass(frozen=True)
class TransferCostSummary:
    transfer_count: int
    free_transfers_used: int
    free_transfers_remaining: int
    points_hit: int
    budget_impact: int
    new_bank: int

    @property
    def requires_hit(self) -> bool:
        return self.points_hit < 0

    @property
    def is_affordable(self) -> bool:
        return self.new_bank >= 0


def calculate_transfer_costs(
    changes: Iterable[Change],
    initial_bank: int,
    catalog: PlayerCatalog,
    free_transfers: int = 1
) -> TransferCostSummary:
    """
    Summarise the points and money cost of a change set.

    Prices are current prices (tenths); selling-price rules are not applied.

    Args:
        changes: Planned swaps
        initial_bank: Bank before any swap (tenths)
        catalog: Catalog used to price the players
        free_transfers: Free transfers available this gameweek

    Returns:
        Cost summary; ``points_hit`` and ``budget_impact`` are negative
            when points or money are spent
    """
    changes = list(changes)
    transfer_count = len(changes)

    budget_impact = 0
    for change in changes:
        out_player = catalog.get_player_by_id(change.out)
        in_player = catalog.get_player_by_id(change.incoming)
        if out_player is None or in_player is None:
            logger.warning(f"Skipping unpriced swap {change.out} -> {change.incoming}")
            continue
        budget_impact += out_player.now_cost - in_player.now_cost

    free_used = min(transfer_count, max(0, free_transfers))
    extra = transfer_count - free_used

    return TransferCostSummary(
        transfer_count=transfer_count,
        free_transfers_used=free_used,
        free_transfers_remaining=max(0, free_transfers - free_used),
        points_hit=extra * POINTS_HIT_PER_TRANSFER,
        budget_impact=budget_impact,
        new_bank=initial_bank + budget_impact,
    )
