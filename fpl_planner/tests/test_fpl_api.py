"""
Tests for the FPL API client (HTTP session mocked).
"""

import pytest
import requests
from unittest.mock import Mock
from fpl_planner.src.common.cache import CacheManager
from fpl_planner.src.providers.fpl_api import FPLAPIClient


def json_response(data):
    response = Mock()
    response.json.return_value = data
    response.raise_for_status.return_value = None
    return response


def standings_page(entries, has_next):
    return {
        "league": {"id": 77, "name": "Work"},
        "standings": {"has_next": has_next, "results": [{"entry": e, "rank": e} for e in entries]},
    }


@pytest.fixture
def session():
    return Mock()


@pytest.fixture
def client(tmp_path, session):
    client = FPLAPIClient(cache=CacheManager(cache_dir=tmp_path), session=session)
    client.rate_limit = 0
    return client


class TestRequests:

    def test_bootstrap_cached(self, client, session):
        session.get.return_value = json_response({"elements": []})

        assert client.get_bootstrap_data() == {"elements": []}
        assert client.get_bootstrap_data() == {"elements": []}
        assert session.get.call_count == 1

        url = session.get.call_args[0][0]
        assert url.endswith("/bootstrap-static/")

    def test_network_error_returns_none(self, client, session):
        session.get.side_effect = requests.exceptions.ConnectionError("down")
        assert client.get_fixtures() is None

    def test_http_error_returns_none(self, client, session):
        response = Mock()
        response.raise_for_status.side_effect = requests.exceptions.HTTPError("404")
        session.get.return_value = response

        assert client.get_entry(1) is None

    def test_invalid_json_returns_none(self, client, session):
        response = Mock()
        response.json.side_effect = ValueError("not json")
        session.get.return_value = response

        assert client.get_entry(1) is None

    def test_failed_request_not_cached(self, client, session):
        session.get.side_effect = [requests.exceptions.Timeout("slow"), json_response([{"id": 1}])]

        assert client.get_fixtures() is None
        assert client.get_fixtures() == [{"id": 1}]


class TestTeam:

    def test_get_team(self, client, session):
        picks = {"picks": [{"element": 1, "position": 1}], "entry_history": {"bank": 5}}
        entry = {"id": 42, "name": "FC"}
        session.get.side_effect = [json_response(picks), json_response(entry)]

        team = client.get_team(42, 10)

        assert team == {"team": entry, "picks": picks, "gameweek": 10}
        assert session.get.call_args_list[0][0][0].endswith("/entry/42/event/10/picks/")

    def test_get_team_without_picks(self, client, session):
        session.get.side_effect = requests.exceptions.ConnectionError("down")
        assert client.get_team(42, 10) is None


class TestLeagueStandings:

    def test_follows_pages(self, client, session):
        session.get.side_effect = [
            json_response(standings_page([1, 2], has_next=True)),
            json_response(standings_page([3], has_next=False)),
        ]

        data = client.get_league_standings(77)

        assert [r["entry"] for r in data["standings"]["results"]] == [1, 2, 3]
        assert data["league"]["name"] == "Work"
        pages = [c.kwargs["params"]["page_standings"] for c in session.get.call_args_list]
        assert pages == [1, 2]

    def test_stops_at_max_entries(self, client, session):
        session.get.side_effect = [
            json_response(standings_page([1, 2, 3], has_next=True)),
        ]

        data = client.get_league_standings(77, max_entries=2)

        assert [r["entry"] for r in data["standings"]["results"]] == [1, 2]
        assert session.get.call_count == 1

    def test_later_page_failure_keeps_earlier_rows(self, client, session):
        session.get.side_effect = [
            json_response(standings_page([1, 2], has_next=True)),
            requests.exceptions.ConnectionError("down"),
        ]

        data = client.get_league_standings(77)

        assert [r["entry"] for r in data["standings"]["results"]] == [1, 2]

    def test_first_page_failure(self, client, session):
        session.get.side_effect = requests.exceptions.ConnectionError("down")
        assert client.get_league_standings(77) is None
