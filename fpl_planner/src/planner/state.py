"""
Planner state for a transfer-sandbox session.

Holds the squad as it was loaded (never edited) plus a set of hypothetical
swaps, and derives the "current" squad from the two on demand. One swap is
kept per outgoing player; committing another swap for the same player
replaces the first.
"""

from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Optional, Sequence
from ..common.config import get_logger
from ..providers.schemas import Pick, Player, SquadSnapshot

logger = get_logger(__name__)


@dataclass(frozen=True)
class Change:
    out: int
    incoming: int


def apply_changes(picks: Sequence[Pick], changes: Iterable[Change]) -> List[Pick]:
    """
    Rewrite each original pick whose player is swapped out to the incoming one.

    Every change is matched against the original picks only, so mutual and
    chained swaps never feed into each other. The slot keeps its multiplier
    and captaincy flags.
    """
    swaps = {change.out: change.incoming for change in changes}
    return [
        replace(pick, element=swaps[pick.element]) if pick.element in swaps else pick
        for pick in picks
    ]


class SquadPlanState:
    """
    Session-scoped sandbox of transfers against an immutable baseline.

    Before ``initialize()`` every accessor returns an empty default
    (``[]``, ``None`` or 0); check ``is_initialized`` to tell "not loaded
    yet" from "loaded and empty".
    """

    def __init__(self):
        self._initial_squad: Optional[tuple] = None
        self._snapshot: Optional[SquadSnapshot] = None
        self._changes: Dict[int, Change] = {}

    @property
    def is_initialized(self) -> bool:
        return self._snapshot is not None

    def initialize(self, players: Sequence[Player], picks: Sequence[Pick], bank: int, value: int) -> bool:
        """
        Capture the baseline squad.

        Args:
            players: Player records of the loaded squad
            picks: The 15 picks as loaded
            bank: Bank balance (tenths)
            value: Squad value (tenths)

        Returns:
            True when the baseline was captured; False when the state was
            already initialized (call ``clear()`` first to load another team)
        """
        if self.is_initialized:
            logger.debug("Planner state already initialized, ignoring initialize()")
            return False

        self._snapshot = SquadSnapshot(bank=bank, value=value, picks=tuple(picks))
        self._initial_squad = tuple(players)
        self._changes = {}
        logger.info(f"Planner initialized with {len(self._snapshot.picks)} picks, bank {bank / 10:.1f}m")
        return True

    def add_change(self, out_id: int, in_id: int):
        """Swap ``out_id`` for ``in_id``, replacing any earlier swap of ``out_id``."""
        self._changes.pop(out_id, None)
        self._changes[out_id] = Change(out=out_id, incoming=in_id)
        logger.debug(f"Planned swap {out_id} -> {in_id} ({len(self._changes)} active)")

    def remove_change(self, out_id: int):
        """Undo the swap for ``out_id``; no-op when there is none."""
        if self._changes.pop(out_id, None) is not None:
            logger.debug(f"Removed planned swap for {out_id}")

    def reset_all(self):
        """Undo every swap. The baseline is kept."""
        self._changes.clear()

    def clear(self):
        """Forget the baseline and all swaps (used when switching team)."""
        self._initial_squad = None
        self._snapshot = None
        self._changes.clear()

    def get_changes(self) -> List[Change]:
        return list(self._changes.values())

    def get_change_for_player(self, out_id: int) -> Optional[Change]:
        return self._changes.get(out_id)

    def is_player_modified(self, player_id: int) -> bool:
        """True when the player is on either side of an active swap."""
        return any(player_id in (c.out, c.incoming) for c in self._changes.values())

    def get_current_squad(self) -> List[Pick]:
        """Baseline picks with every active swap applied."""
        if not self.is_initialized:
            return []
        return apply_changes(self._snapshot.picks, self._changes.values())

    def get_initial_snapshot(self) -> Optional[SquadSnapshot]:
        return self._snapshot

    def get_initial_squad(self) -> Optional[List[Player]]:
        if self._initial_squad is None:
            return None
        return list(self._initial_squad)

    def get_initial_picks(self) -> Optional[List[Pick]]:
        if self._snapshot is None:
            return None
        return list(self._snapshot.picks)

    @property
    def initial_bank(self) -> int:
        return self._snapshot.bank if self._snapshot else 0

    @property
    def initial_value(self) -> int:
        return self._snapshot.value if self._snapshot else 0
