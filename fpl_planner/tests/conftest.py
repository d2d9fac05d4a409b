"""
Shared fixtures for FPL Planner tests.

Builds a small synthetic league: four teams, a player pool covering every
position, a fixture list and a valid 15-man squad.
"""

import pytest
from fpl_planner.src.providers.catalog import PlayerCatalog
from fpl_planner.src.providers.schemas import Pick, Player

CURRENT_GW = 10


def player_record(player_id, element_type=3, team=1, now_cost=60, **overrides):
    """API-shaped bootstrap element with healthy defaults."""
    record = {
        "id": player_id,
        "web_name": f"Player{player_id}",
        "element_type": element_type,
        "team": team,
        "now_cost": now_cost,
        "form": "5.0",
        "selected_by_percent": "10.0",
        "total_points": 60,
        "minutes": 800,
        "yellow_cards": 0,
        "status": "a",
        "chance_of_playing_next_round": None,
        "cost_change_event": 0,
        "ep_next": "4.0",
        "transfers_in_event": 0,
        "transfers_out_event": 0,
        "expected_goal_involvements_per_90": "0.30",
    }
    record.update(overrides)
    return record


def make_player(player_id=1, **overrides):
    return Player.from_api(player_record(player_id, **overrides))


# Squad: ids 1-15 (2 GK, 5 DEF, 5 MID, 3 FWD); pool extras from 100 up
SQUAD_LAYOUT = [1, 1, 2, 2, 2, 2, 2, 3, 3, 3, 3, 3, 4, 4, 4]


def squad_records():
    return [
        player_record(i + 1, element_type=et, team=(i % 4) + 1)
        for i, et in enumerate(SQUAD_LAYOUT)
    ]


def pool_records():
    return [
        player_record(101, element_type=3, team=2, now_cost=55, form="7.0"),
        player_record(102, element_type=3, team=3, now_cost=65, form="6.0"),
        player_record(103, element_type=3, team=4, now_cost=90, form="8.0"),
        player_record(104, element_type=3, team=1, now_cost=120, form="9.0"),
        player_record(105, element_type=2, team=2, now_cost=45, form="4.0"),
        player_record(106, element_type=4, team=3, now_cost=75, form="6.5"),
    ]


def make_picks(player_ids=None, captain_slot=6):
    ids = player_ids or list(range(1, 16))
    return [
        Pick(
            element=pid,
            position=slot,
            multiplier=0 if slot > 11 else (2 if slot == captain_slot else 1),
            is_captain=slot == captain_slot,
            is_vice_captain=slot == captain_slot + 1,
        )
        for slot, pid in enumerate(ids, start=1)
    ]


def pick_records(player_ids=None):
    return [
        {
            "element": p.element,
            "position": p.position,
            "multiplier": p.multiplier,
            "is_captain": p.is_captain,
            "is_vice_captain": p.is_vice_captain,
        }
        for p in make_picks(player_ids)
    ]


def fixture_records():
    # GW11: 1v2 and 3v4, GW12: 2v3 and 4v1
    return [
        {"id": 1, "event": 9, "team_h": 1, "team_a": 3, "team_h_difficulty": 4, "team_a_difficulty": 3},
        {"id": 2, "event": 11, "team_h": 1, "team_a": 2, "team_h_difficulty": 2, "team_a_difficulty": 4},
        {"id": 3, "event": 11, "team_h": 3, "team_a": 4, "team_h_difficulty": 3, "team_a_difficulty": 5},
        {"id": 4, "event": 12, "team_h": 2, "team_a": 3, "team_h_difficulty": 2, "team_a_difficulty": 2},
        {"id": 5, "event": 12, "team_h": 4, "team_a": 1, "team_h_difficulty": 3, "team_a_difficulty": 4},
        {"id": 6, "event": None, "team_h": 1, "team_a": 4, "team_h_difficulty": 5, "team_a_difficulty": 5},
    ]


def bootstrap_document(extra_elements=None):
    return {
        "elements": squad_records() + pool_records() + list(extra_elements or []),
        "teams": [
            {"id": 1, "name": "Arsenal", "short_name": "ARS"},
            {"id": 2, "name": "Brighton", "short_name": "BHA"},
            {"id": 3, "name": "Chelsea", "short_name": "CHE"},
            {"id": 4, "name": "Fulham", "short_name": "FUL"},
        ],
        "events": [
            {"id": 9, "is_current": False, "is_next": False},
            {"id": CURRENT_GW, "is_current": True, "is_next": False},
            {"id": 11, "is_current": False, "is_next": True},
        ],
    }


def team_document(entry_id=1234, player_ids=None, bank=15, value=1000, gameweek=CURRENT_GW):
    return {
        "team": {
            "id": entry_id,
            "name": f"Team {entry_id}",
            "player_first_name": "Sam",
            "player_last_name": "Manager",
            "summary_overall_rank": 12345,
            "summary_overall_points": 600,
        },
        "picks": {
            "picks": pick_records(player_ids),
            "entry_history": {"bank": bank, "value": value, "points": 55, "total_points": 600},
        },
        "gameweek": gameweek,
    }


@pytest.fixture
def bootstrap():
    return bootstrap_document()


@pytest.fixture
def catalog(bootstrap):
    return PlayerCatalog(bootstrap, fixture_records())


@pytest.fixture
def picks():
    return make_picks()


@pytest.fixture
def squad_players(catalog, picks):
    return [catalog.get_player_by_id(p.element) for p in picks]
