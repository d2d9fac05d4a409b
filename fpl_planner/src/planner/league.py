"""
League percentile comparison.

Samples the top of a classic league, computes the same squad metrics for
every peer, and ranks the user's metrics against that sample. Standings,
peer squads and the per-league metric distributions are each held in a
TTL cache owned by the comparison object.
"""

import asyncio
import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional
import numpy as np
from ..common.cache import TTLCache
from ..common.config import get_config, get_logger
from ..common.logging_setup import TimedLogger
from ..providers.schemas import LeagueStandings, TeamLoad
from .metrics import METRIC_POLARITY, MetricsAggregator, TeamMetrics

logger = get_logger(__name__)

METRIC_KEYS = ("avg_ppm", "avg_fdr", "avg_form", "expected_points", "avg_ownership", "avg_xgi")


@dataclass
class LeagueMetrics:
    """Peer distributions for one (league, gameweek)."""

    league_id: int
    league_name: str
    sample_size: int
    averages: Dict[str, Optional[float]]
    distributions: Dict[str, List[float]] = field(default_factory=dict)


@dataclass(frozen=True)
class LeagueComparisonResult:
    league_id: int
    league_name: str
    sample_size: int
    averages: Dict[str, Optional[float]]
    percentiles: Dict[str, Optional[int]]


def compute_percentiles(user_metrics: TeamMetrics, distributions: Dict[str, List[float]]) -> Dict[str, Optional[int]]:
    """
    Percentage of peers the user is at least as good as, per metric.

    Lower-is-better metrics count peers at or above the user's value.
    Informational metrics and empty distributions yield None.
    """
    percentiles: Dict[str, Optional[int]] = {}
    for key in METRIC_KEYS:
        values = np.asarray(distributions.get(key) or [], dtype=float)
        higher_is_better = METRIC_POLARITY[key]
        user_value = getattr(user_metrics, key, None)

        if values.size == 0 or user_value is None or higher_is_better is None:
            percentiles[key] = None
            continue

        if higher_is_better:
            at_least_as_good = np.count_nonzero(values <= user_value)
        else:
            at_least_as_good = np.count_nonzero(values >= user_value)

        # Half up, not banker's rounding
        percentiles[key] = int(math.floor(100 * at_least_as_good / values.size + 0.5))
    return percentiles


class LeagueComparison:
    """
    Ranks a squad's metrics against a sample of league peers.
    """

    def __init__(
        self,
        api,
        aggregator: MetricsAggregator,
        max_entries: Optional[int] = None,
        ttl_seconds: Optional[float] = None
    ):
        """
        Args:
            api: ``FPLAPIClient`` (or anything with ``get_league_standings``
                and ``get_team``)
            aggregator: Metrics aggregator applied to every peer squad
            max_entries: Standings rows sampled (settings default: 50)
            ttl_seconds: Lifetime of every cache entry (settings default: 4h)
        """
        config = get_config()
        self.api = api
        self.aggregator = aggregator
        self.max_entries = max_entries or config.get("league.max_entries", 50)
        ttl = ttl_seconds or config.get("league.cache_ttl_hours", 4) * 3600

        self.standings_cache = TTLCache(ttl, name="league_standings")
        self.peer_cache = TTLCache(ttl, name="peer_squads")
        self.metrics_cache = TTLCache(ttl, name="league_metrics")

    def reset(self):
        """Drop standings, peer squads and league metrics."""
        self.standings_cache.reset()
        self.peer_cache.reset()
        self.metrics_cache.reset()

    async def compare(
        self,
        league_id: int,
        user_metrics: TeamMetrics,
        gameweek: int
    ) -> Optional[LeagueComparisonResult]:
        """
        Compare ``user_metrics`` with the league sample.

        Args:
            league_id: Classic league ID
            user_metrics: Metrics of the squad being ranked
            gameweek: Gameweek used for peer picks and metrics

        Returns:
            Averages and percentiles, or None when no peer could be sampled
        """
        key = (league_id, gameweek)
        league_metrics = self.metrics_cache.get(key)

        if league_metrics is None:
            league_metrics = await self._fetch_league_metrics(league_id, gameweek)
            if league_metrics is None:
                return None
            self.metrics_cache.set(key, league_metrics)

        return LeagueComparisonResult(
            league_id=league_id,
            league_name=league_metrics.league_name,
            sample_size=league_metrics.sample_size,
            averages=dict(league_metrics.averages),
            percentiles=compute_percentiles(user_metrics, league_metrics.distributions),
        )

    async def _load_standings(self, league_id: int) -> Optional[LeagueStandings]:
        standings = self.standings_cache.get(league_id)
        if standings is not None:
            return standings

        try:
            data = await asyncio.to_thread(self.api.get_league_standings, league_id, self.max_entries)
        except Exception as e:
            logger.warning(f"Failed to fetch standings for league {league_id}: {e}")
            return None
        if not data:
            logger.warning(f"No standings available for league {league_id}")
            return None

        try:
            standings = LeagueStandings.from_api(league_id, data)
        except ValueError as e:
            logger.error(f"Invalid standings document for league {league_id}: {e}")
            return None

        self.standings_cache.set(league_id, standings)
        return standings

    async def _load_peer(self, entry_id: int, gameweek: int) -> Optional[TeamLoad]:
        key = (entry_id, gameweek)
        team = self.peer_cache.get(key)
        if team is not None:
            return team

        data = await asyncio.to_thread(self.api.get_team, entry_id, gameweek)
        if not data:
            return None

        team = TeamLoad.from_api(data)
        self.peer_cache.set(key, team)
        return team

    async def _fetch_league_metrics(self, league_id: int, gameweek: int) -> Optional[LeagueMetrics]:
        standings = await self._load_standings(league_id)
        if standings is None:
            return None

        sample = standings.results[:self.max_entries]
        if not sample:
            logger.info(f"League {league_id} has no standings results")
            return None

        distributions: Dict[str, List[float]] = {k: [] for k in METRIC_KEYS}

        with TimedLogger(logger, f"Sampling {len(sample)} peers in league {league_id}", logging.DEBUG):
            # One peer at a time
            for row in sample:
                try:
                    team = await self._load_peer(row.entry, gameweek)
                except Exception as e:
                    logger.warning(f"Failed to load peer {row.entry} for league {league_id}: {e}")
                    continue

                if team is None or not team.picks:
                    logger.warning(f"No picks for peer {row.entry} in GW{gameweek}, skipping")
                    continue

                metrics = self.aggregator.calculate_team_metrics(team.picks, gameweek)
                if not metrics.has_data:
                    logger.debug(f"Peer {row.entry} has no catalog players, skipping")
                    continue

                for k in METRIC_KEYS:
                    value = getattr(metrics, k)
                    if isinstance(value, (int, float)) and math.isfinite(value):
                        distributions[k].append(float(value))

        averages = {
            k: (float(np.mean(values)) if values else None)
            for k, values in distributions.items()
        }
        sample_size = len(distributions["avg_ppm"]) or len(distributions["avg_fdr"])

        if sample_size == 0:
            logger.warning(f"No qualifying peers in league {league_id} for GW{gameweek}")
            return None

        logger.info(f"League {league_id}: {sample_size}/{len(sample)} peers sampled for GW{gameweek}")
        return LeagueMetrics(
            league_id=league_id,
            league_name=standings.name,
            sample_size=sample_size,
            averages=averages,
            distributions=distributions,
        )
