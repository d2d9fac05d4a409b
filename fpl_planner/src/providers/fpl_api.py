"""
FPL API client for fetching official Fantasy Premier League data.

Provides access to the public endpoints the planner needs (bootstrap,
fixtures, entries, picks and classic league standings) with rate limiting,
disk caching and fail-soft error handling.
"""

import time
from typing import Any, Dict, List, Optional
import requests
from ..common.config import get_config, get_logger
from ..common.cache import CacheManager, get_cache

logger = get_logger(__name__)


class FPLAPIClient:
    """
    Client for the public FPL API with caching.

    Every getter returns ``None`` when the request fails; failures are
    logged here and never raised to the caller.
    """

    def __init__(
        self,
        cache: Optional[CacheManager] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize FPL API client.

        Args:
            cache: Disk cache for raw responses (global cache if None)
            session: HTTP session to use (a new one if None)
        """
        self.config = get_config()
        self.cache = cache or get_cache()

        self.base_url = self.config.get("api.fpl.base_url", "https://fantasy.premierleague.com/api").rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": "fpl-planner/0.1",
            "Accept": "application/json",
        })

        # Rate limiting
        self.rate_limit = self.config.get("api.fpl.rate_limit", 1.0)
        self.timeout = self.config.get("api.fpl.timeout", 30)
        self.cache_ttl = self.config.get("api.fpl.cache_ttl_seconds", 1800)
        self.last_request_time = 0.0

        logger.info("FPL API client initialized")

    def _rate_limit_wait(self):
        """Implement rate limiting between requests."""
        elapsed = time.time() - self.last_request_time
        if elapsed < self.rate_limit:
            time.sleep(self.rate_limit - elapsed)
        self.last_request_time = time.time()

    def _make_request(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        cache_ttl: Optional[int] = None
    ) -> Optional[Any]:
        """
        Make API request with caching and error handling.

        Args:
            endpoint: API endpoint (relative to base_url)
            params: Query parameters
            cache_ttl: Cache time-to-live in seconds

        Returns:
            API response data or None if failed
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        cache_key = f"fpl_api_{endpoint.replace('/', '_')}"
        if params:
            cache_key += "_" + "_".join(f"{k}={v}" for k, v in sorted(params.items()))
        ttl = cache_ttl or self.cache_ttl

        cached_data = self.cache.get(cache_key, "api", ttl)
        if cached_data is not None:
            logger.debug(f"Cache hit for {endpoint}")
            return cached_data

        self._rate_limit_wait()

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()

            data = response.json()

            self.cache.set(cache_key, data, "api")

            logger.debug(f"API call successful: {endpoint}")
            return data

        except requests.exceptions.RequestException as e:
            logger.error(f"API request failed for {endpoint}: {e}")
            return None
        except ValueError as e:
            logger.error(f"Invalid JSON response from {endpoint}: {e}")
            return None

    def get_bootstrap_data(self) -> Optional[Dict]:
        """
        Get bootstrap-static data (players, teams, events).

        Returns:
            Bootstrap data dictionary
        """
        return self._make_request("bootstrap-static/")

    def get_fixtures(self) -> Optional[List[Dict]]:
        """
        Get all fixtures for the season.

        Returns:
            List of fixture data
        """
        return self._make_request("fixtures/")

    def get_entry(self, entry_id: int) -> Optional[Dict]:
        """
        Get the public summary of an entry (team name, manager, ranks).

        Args:
            entry_id: FPL entry ID

        Returns:
            Entry data
        """
        return self._make_request(f"entry/{entry_id}/")

    def get_entry_picks(self, entry_id: int, gameweek: int) -> Optional[Dict]:
        """
        Get picks for a specific entry and gameweek.

        Args:
            entry_id: FPL entry ID
            gameweek: Gameweek number

        Returns:
            Entry picks data (``picks`` and ``entry_history``)
        """
        result = self._make_request(f"entry/{entry_id}/event/{gameweek}/picks/")
        if result is None:
            logger.error(f"Failed to get entry picks for {entry_id} (GW{gameweek})")
        return result

    def get_team(self, entry_id: int, gameweek: int) -> Optional[Dict]:
        """
        Load a squad in the shape the planner consumes.

        Args:
            entry_id: FPL entry ID
            gameweek: Gameweek number

        Returns:
            ``{"team": ..., "picks": {"picks": [...], "entry_history": {...}}, "gameweek": N}``
        """
        picks_data = self.get_entry_picks(entry_id, gameweek)
        if not picks_data:
            return None

        entry_data = self.get_entry(entry_id)
        if not entry_data:
            return None

        return {
            "team": entry_data,
            "picks": picks_data,
            "gameweek": gameweek,
        }

    def get_league_standings(self, league_id: int, max_entries: int = 50) -> Optional[Dict]:
        """
        Get classic league standings, following pagination until
        ``max_entries`` rows are collected or the league runs out.

        Args:
            league_id: Classic league ID
            max_entries: Stop paging once this many rows are collected

        Returns:
            First page document with ``standings.results`` extended by later pages
        """
        page = 1
        document = None
        results: List[Dict] = []

        while True:
            data = self._make_request(
                f"leagues-classic/{league_id}/standings/",
                params={"page_standings": page}
            )
            if data is None:
                if document is None:
                    return None
                logger.warning(f"Stopping standings pagination for league {league_id} at page {page}")
                break

            if document is None:
                document = data

            standings = data.get("standings") or {}
            results.extend(standings.get("results") or [])

            if len(results) >= max_entries or not standings.get("has_next"):
                break
            page += 1

        document = dict(document)
        document["standings"] = dict(document.get("standings") or {})
        document["standings"]["results"] = results[:max_entries]
        logger.info(f"Loaded {len(document['standings']['results'])} standings rows for league {league_id}")
        return document
