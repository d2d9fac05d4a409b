"""
Player catalog built from bootstrap and fixtures data.

The catalog is the read-only source of Player records and fixture
difficulty lookups for every planner component. It indexes players by id
once and memoises fixture difficulty per team.
"""

from typing import Dict, List, Optional, Tuple
import pandas as pd
from ..common.config import get_logger
from ..common.timeutil import get_current_gw
from .schemas import Fixture, Player

logger = get_logger(__name__)

DEFAULT_FIXTURE_DIFFICULTY = 3
MINUTES_PER_MATCH = 90


def points_per_million(player: Player) -> float:
    """Season points per million of price (0 for a zero price)."""
    if not player.now_cost:
        return 0.0
    return player.total_points / (player.now_cost / 10)


def minutes_percentage(player: Player, gameweek: int) -> float:
    """
    Minutes played as a percentage of the minutes available so far.

    Can exceed 100 when stoppage time is counted.
    """
    if not gameweek:
        return 0.0
    return (player.minutes / (gameweek * MINUTES_PER_MATCH)) * 100


class PlayerCatalog:
    """
    Read-only lookup of players, teams and fixtures.
    """

    FIXTURE_COLUMNS = ['event', 'team_h', 'team_a', 'team_h_difficulty', 'team_a_difficulty']

    def __init__(
        self,
        bootstrap: Dict,
        fixtures: Optional[List[Dict]] = None,
        current_gameweek: Optional[int] = None
    ):
        """
        Initialize the catalog.

        Args:
            bootstrap: FPL bootstrap-static document (``elements``, ``teams``, ``events``)
            fixtures: FPL fixtures list
            current_gameweek: Override for the current gameweek (detected from events if None)
        """
        bootstrap = bootstrap or {}

        players = []
        for element in bootstrap.get('elements') or []:
            try:
                players.append(Player.from_api(element))
            except ValueError as e:
                logger.warning(f"Skipping malformed player record: {e}")

        self._players: List[Player] = players
        self._by_id: Dict[int, Player] = {p.id: p for p in players}
        self._team_names: Dict[int, str] = {
            int(t['id']): str(t.get('short_name') or t.get('name') or t['id'])
            for t in bootstrap.get('teams') or []
            if 'id' in t
        }
        self.current_gameweek = current_gameweek or get_current_gw(bootstrap)
        self._fixtures = self._build_fixtures_frame(fixtures or [])
        self._fdr_cache: Dict[Tuple[int, int], float] = {}

        logger.info(
            f"Player catalog initialized: {len(self._players)} players, "
            f"{len(self._fixtures)} fixtures, GW{self.current_gameweek}"
        )

    @classmethod
    def from_api(cls, client, current_gameweek: Optional[int] = None) -> Optional["PlayerCatalog"]:
        """
        Build a catalog from an ``FPLAPIClient``.

        Returns:
            Catalog, or None when bootstrap data is unavailable
        """
        bootstrap = client.get_bootstrap_data()
        if not bootstrap:
            logger.error("Bootstrap data unavailable, cannot build player catalog")
            return None

        fixtures = client.get_fixtures()
        if fixtures is None:
            logger.warning("Fixtures unavailable, difficulty lookups will use placeholders")

        return cls(bootstrap, fixtures, current_gameweek)

    def _build_fixtures_frame(self, fixtures: List[Dict]) -> pd.DataFrame:
        if not fixtures:
            return pd.DataFrame(columns=self.FIXTURE_COLUMNS)

        df = pd.DataFrame(fixtures)
        for col in self.FIXTURE_COLUMNS:
            if col not in df.columns:
                df[col] = None

        # Unscheduled fixtures have no event yet
        df = df.dropna(subset=['event']).copy()
        df['event'] = df['event'].astype(int)
        return df[self.FIXTURE_COLUMNS].sort_values('event').reset_index(drop=True)

    def get_all_players(self) -> List[Player]:
        return list(self._players)

    def get_player_by_id(self, player_id: int) -> Optional[Player]:
        return self._by_id.get(player_id)

    def get_team_name(self, team_id: int) -> str:
        return self._team_names.get(team_id, 'TBD')

    def get_fixtures(self, team_id: int, count: int = 3, is_past: bool = False) -> List[Fixture]:
        """
        Get a team's fixtures relative to the current gameweek.

        Args:
            team_id: Team ID
            count: Number of fixtures to return
            is_past: Most recent past fixtures instead of upcoming ones

        Returns:
            Fixtures ordered by gameweek; placeholders when no fixture data is loaded
        """
        if self._fixtures.empty:
            return self._placeholder_fixtures(count)

        df = self._fixtures
        team_fixtures = df[(df['team_h'] == team_id) | (df['team_a'] == team_id)]

        if is_past:
            relevant = team_fixtures[team_fixtures['event'] < self.current_gameweek].tail(count)
        else:
            relevant = team_fixtures[team_fixtures['event'] > self.current_gameweek].head(count)

        fixtures = []
        for row in relevant.itertuples(index=False):
            is_home = row.team_h == team_id
            opponent_id = row.team_a if is_home else row.team_h
            difficulty = row.team_h_difficulty if is_home else row.team_a_difficulty
            if pd.isna(difficulty) or not difficulty:
                difficulty = DEFAULT_FIXTURE_DIFFICULTY

            opponent_id = None if pd.isna(opponent_id) else int(opponent_id)
            opponent_name = self.get_team_name(opponent_id) if opponent_id is not None else 'TBD'
            fixtures.append(Fixture(
                event=int(row.event),
                opponent_id=opponent_id,
                opponent=f"{opponent_name} ({'H' if is_home else 'A'})",
                difficulty=int(difficulty),
                is_home=bool(is_home),
            ))

        return fixtures

    def _placeholder_fixtures(self, count: int) -> List[Fixture]:
        return [
            Fixture(
                event=self.current_gameweek + i + 1,
                opponent_id=None,
                opponent='TBD',
                difficulty=DEFAULT_FIXTURE_DIFFICULTY,
                is_home=False,
            )
            for i in range(count)
        ]

    def calculate_fixture_difficulty(self, team_id: int, window: int = 5) -> float:
        """
        Average difficulty of the team's next ``window`` fixtures.

        Returns:
            Mean difficulty (1-5), or 3.0 when the team has no upcoming fixtures
        """
        key = (team_id, window)
        if key in self._fdr_cache:
            return self._fdr_cache[key]

        fixtures = self.get_fixtures(team_id, window, is_past=False)
        if not fixtures:
            avg = float(DEFAULT_FIXTURE_DIFFICULTY)
        else:
            avg = sum(f.difficulty for f in fixtures) / len(fixtures)

        self._fdr_cache[key] = avg
        return avg

    def reset(self):
        """Drop memoised difficulty lookups."""
        self._fdr_cache.clear()

    def __len__(self) -> int:
        return len(self._players)
