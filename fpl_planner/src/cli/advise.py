"""
Transfer advice tool.

Loads an entry's squad, flags problem players, suggests replacements and
reports how a set of planned swaps moves the squad metrics. Output is JSON
on stdout.
"""

import argparse
import asyncio
import json
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional, Tuple
from ..advisory.replacements import ReplacementScorer
from ..advisory.risk import RiskAssessor, find_problem_players
from ..common.config import get_config, get_logger
from ..common.logging_setup import setup_logging
from ..planner.costs import calculate_transfer_costs
from ..planner.league import LeagueComparison
from ..planner.metrics import MetricsAggregator
from ..planner.state import SquadPlanState
from ..providers.catalog import PlayerCatalog
from ..providers.fpl_api import FPLAPIClient
from ..providers.schemas import TeamLoad

logger = get_logger(__name__)


def parse_swap(value: str) -> Tuple[int, int]:
    """Parse an ``OUT:IN`` pair of player ids."""
    try:
        out_id, in_id = value.split(":", 1)
        return int(out_id), int(in_id)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Swap must look like OUT:IN with player ids, got '{value}'")


def build_advice(
    client: FPLAPIClient,
    entry_id: int,
    gameweek: Optional[int] = None,
    league_id: Optional[int] = None,
    swaps: Optional[List[Tuple[int, int]]] = None,
    free_transfers: int = 1
) -> Optional[Dict[str, Any]]:
    """
    Assemble the advice document for one entry.

    Returns:
        JSON-serialisable dict, or None when the catalog or squad cannot be loaded
    """
    catalog = PlayerCatalog.from_api(client, gameweek)
    if catalog is None:
        return None
    gw = catalog.current_gameweek

    team_data = client.get_team(entry_id, gw)
    if not team_data:
        logger.error(f"Could not load squad for entry {entry_id} in GW{gw}")
        return None

    team = TeamLoad.from_api(team_data)
    snapshot = team.to_snapshot()
    players = [p for p in (catalog.get_player_by_id(pid) for pid in snapshot.player_ids) if p is not None]

    state = SquadPlanState()
    state.initialize(players, snapshot.picks, snapshot.bank, snapshot.value)
    for out_id, in_id in swaps or []:
        state.add_change(out_id, in_id)

    assessor = RiskAssessor()
    scorer = ReplacementScorer(catalog)
    aggregator = MetricsAggregator(catalog, assessor)

    current_picks = state.get_current_squad()
    costs = calculate_transfer_costs(state.get_changes(), state.initial_bank, catalog, free_transfers)

    flagged = []
    for player, risks in find_problem_players(players, gw, assessor):
        candidates = scorer.find_replacements(player, current_picks, costs.new_bank, gw)
        flagged.append({
            "player": asdict(player),
            "position": player.position.short_name if player.position else None,
            "price": player.price,
            "risks": [asdict(r) for r in risks],
            "replacements": [
                {
                    "player": asdict(c.player),
                    "score": round(c.score, 2),
                    "price_diff": c.price_diff,
                    "breakdown": asdict(c.breakdown),
                }
                for c in candidates
            ],
        })

    original_metrics = aggregator.calculate_team_metrics(state.get_initial_picks(), gw)
    current_metrics = aggregator.calculate_projected_metrics(state.get_initial_picks(), state.get_changes(), gw)
    delta = aggregator.calculate_metrics_delta(current_metrics, original_metrics)

    league = None
    if league_id:
        comparison = LeagueComparison(client, aggregator)
        result = asyncio.run(comparison.compare(league_id, current_metrics, gw))
        league = asdict(result) if result else None

    return {
        "entry": entry_id,
        "team_name": team.team.name if team.team else None,
        "manager_name": team.team.manager_name if team.team else None,
        "gameweek": gw,
        "bank": state.initial_bank,
        "value": state.initial_value,
        "changes": [asdict(c) for c in state.get_changes()],
        "problem_players": flagged,
        "metrics": {
            "original": asdict(original_metrics),
            "current": asdict(current_metrics),
            "delta": asdict(delta),
        },
        "transfer_costs": asdict(costs),
        "league": league,
    }


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(description="FPL Planner transfer advice")

    parser.add_argument("--entry", type=int, help="FPL entry ID (default: FPL_ENTRY_ID)")
    parser.add_argument("--gw", type=int, help="Gameweek (default: current)")
    parser.add_argument("--league", type=int, help="Classic league ID to compare against (default: FPL_LEAGUE_ID)")
    parser.add_argument("--swap", type=parse_swap, action="append", default=[], metavar="OUT:IN",
                        help="Planned swap, repeatable")
    parser.add_argument("--free-transfers", type=int, default=1, help="Free transfers available")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")

    args = parser.parse_args()

    log_level = "DEBUG" if args.verbose else "INFO"
    setup_logging(level=log_level)

    config = get_config()
    entry_id = args.entry or config.get_entry_id()
    if entry_id is None:
        logger.error("No entry ID given, pass --entry or set FPL_ENTRY_ID")
        sys.exit(1)
    league_id = args.league or config.get_league_id()

    try:
        advice = build_advice(
            FPLAPIClient(),
            entry_id,
            gameweek=args.gw,
            league_id=league_id,
            swaps=args.swap,
            free_transfers=args.free_transfers,
        )
        if advice is None:
            sys.exit(1)

        print(json.dumps(advice, indent=2))

    except KeyboardInterrupt:
        logger.info("Advice interrupted by user")
        sys.exit(1)
    except ValueError as e:
        logger.error(f"Invalid squad data: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
