"""
Tests for the player catalog and its derived player statistics.
"""

import pytest
from unittest.mock import Mock
from conftest import CURRENT_GW, bootstrap_document, fixture_records, make_player
from fpl_planner.src.providers.catalog import PlayerCatalog, minutes_percentage, points_per_million


class TestPlayerStats:

    def test_points_per_million(self):
        player = make_player(total_points=60, now_cost=60)
        assert points_per_million(player) == pytest.approx(10.0)

    def test_points_per_million_zero_price(self):
        assert points_per_million(make_player(now_cost=0)) == 0.0

    def test_minutes_percentage(self):
        player = make_player(minutes=450)
        assert minutes_percentage(player, 10) == pytest.approx(50.0)

    def test_minutes_percentage_zero_gameweek(self):
        assert minutes_percentage(make_player(minutes=450), 0) == 0.0


class TestPlayerCatalog:

    def test_lookup(self, catalog):
        assert len(catalog) == 21
        assert catalog.get_player_by_id(101).web_name == "Player101"
        assert catalog.get_player_by_id(999) is None

    def test_current_gameweek_from_events(self, catalog):
        assert catalog.current_gameweek == CURRENT_GW

    def test_current_gameweek_override(self, bootstrap):
        assert PlayerCatalog(bootstrap, [], current_gameweek=4).current_gameweek == 4

    def test_malformed_player_skipped(self):
        catalog = PlayerCatalog(bootstrap_document(extra_elements=[{"web_name": "No id"}]))
        assert len(catalog) == 21

    def test_future_fixtures(self, catalog):
        fixtures = catalog.get_fixtures(1, count=3)

        assert [f.event for f in fixtures] == [11, 12]
        assert fixtures[0].opponent == "BHA (H)"
        assert fixtures[0].difficulty == 2
        assert fixtures[1].opponent == "FUL (A)"
        assert fixtures[1].difficulty == 4
        assert not fixtures[1].is_home

    def test_past_fixtures(self, catalog):
        fixtures = catalog.get_fixtures(1, count=3, is_past=True)
        assert [f.event for f in fixtures] == [9]
        assert fixtures[0].difficulty == 4

    def test_count_limits_fixtures(self, catalog):
        assert len(catalog.get_fixtures(1, count=1)) == 1

    def test_placeholder_fixtures_without_data(self, bootstrap):
        catalog = PlayerCatalog(bootstrap)
        fixtures = catalog.get_fixtures(1, count=3)

        assert [f.event for f in fixtures] == [11, 12, 13]
        assert all(f.difficulty == 3 and f.opponent == "TBD" for f in fixtures)

    def test_fixture_difficulty(self, catalog):
        assert catalog.calculate_fixture_difficulty(1) == pytest.approx(3.0)
        assert catalog.calculate_fixture_difficulty(3) == pytest.approx(2.5)
        assert catalog.calculate_fixture_difficulty(4) == pytest.approx(4.0)

    def test_missing_difficulty_defaults_to_three(self, bootstrap):
        fixtures = [
            {"id": 1, "event": 11, "team_h": 1, "team_a": 2, "team_h_difficulty": 0, "team_a_difficulty": None},
        ]
        catalog = PlayerCatalog(bootstrap, fixtures)

        assert catalog.get_fixtures(1)[0].difficulty == 3
        assert catalog.get_fixtures(2)[0].difficulty == 3
        assert catalog.calculate_fixture_difficulty(1) == pytest.approx(3.0)

    def test_fixture_difficulty_no_upcoming(self, bootstrap):
        catalog = PlayerCatalog(bootstrap, fixture_records(), current_gameweek=38)
        assert catalog.calculate_fixture_difficulty(1) == 3.0

    def test_fixture_difficulty_memoised(self, catalog):
        first = catalog.calculate_fixture_difficulty(3)
        catalog._fixtures = catalog._fixtures.iloc[0:0]

        assert catalog.calculate_fixture_difficulty(3) == first

        catalog.reset()
        assert catalog.calculate_fixture_difficulty(3) == 3.0

    def test_from_api(self, bootstrap):
        client = Mock()
        client.get_bootstrap_data.return_value = bootstrap
        client.get_fixtures.return_value = fixture_records()

        catalog = PlayerCatalog.from_api(client)

        assert catalog is not None
        assert len(catalog) == 21

    def test_from_api_without_bootstrap(self):
        client = Mock()
        client.get_bootstrap_data.return_value = None

        assert PlayerCatalog.from_api(client) is None
        client.get_fixtures.assert_not_called()
