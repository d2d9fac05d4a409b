"""
Tests for replacement candidate scoring.
"""

import pytest
from conftest import bootstrap_document, fixture_records, make_player, player_record
from fpl_planner.src.advisory.replacements import ReplacementScorer
from fpl_planner.src.providers.catalog import PlayerCatalog


@pytest.fixture
def scorer(catalog):
    return ReplacementScorer(catalog, max_results=5, fixture_window=5)


class TestScoring:

    def test_breakdown_components(self, scorer, catalog):
        breakdown = scorer.score_candidate(catalog.get_player_by_id(102), 10)

        assert breakdown.form == pytest.approx(30.0)
        assert breakdown.fixtures == pytest.approx(12.5)
        assert breakdown.value == pytest.approx(20.0)
        assert breakdown.minutes == pytest.approx((800 / 900 * 100) / 6.67)
        assert breakdown.momentum == 0.0
        assert breakdown.total == pytest.approx(
            breakdown.form + breakdown.fixtures + breakdown.value + breakdown.minutes
        )

    def test_form_uncapped_below_limit(self, scorer):
        assert scorer.score_candidate(make_player(form="3.0"), 10).form == pytest.approx(15.0)

    @pytest.mark.parametrize("transfers_in, transfers_out, expected", [
        (50_000, 0, 5.0),
        (250_000, 0, 10.0),
        (0, 40_000, 0.0),
    ])
    def test_momentum_clamped(self, scorer, transfers_in, transfers_out, expected):
        player = make_player(transfers_in_event=transfers_in, transfers_out_event=transfers_out)
        assert scorer.score_candidate(player, 10).momentum == pytest.approx(expected)


class TestFindReplacements:

    def test_affordable_same_position_only(self, scorer, catalog, picks):
        outgoing = catalog.get_player_by_id(8)

        candidates = scorer.find_replacements(outgoing, picks, bank=15, gameweek=10)

        assert [c.player.id for c in candidates] == [102, 101]
        assert candidates[0].price_diff == 5
        assert candidates[1].price_diff == -5
        assert candidates[0].score >= candidates[1].score

    def test_budget_ceiling(self, scorer, picks):
        # 10.0m outgoing with 2.0m in the bank
        outgoing = make_player(200, element_type=3, now_cost=100)

        candidates = scorer.find_replacements(outgoing, picks, bank=20, gameweek=10)

        assert candidates
        assert all(c.player.now_cost <= 120 for c in candidates)
        assert 104 in [c.player.id for c in candidates]

    def test_excludes_outgoing_and_squad(self, scorer, catalog, picks):
        outgoing = catalog.get_player_by_id(8)
        squad_ids = {p.element for p in picks}

        candidates = scorer.find_replacements(outgoing, picks, bank=1000, gameweek=10)

        assert candidates
        for c in candidates:
            assert c.player.id != outgoing.id
            assert c.player.id not in squad_ids

    def test_accepts_player_ids(self, scorer, catalog, picks):
        outgoing = catalog.get_player_by_id(8)
        ids = [p.element for p in picks]

        by_picks = scorer.find_replacements(outgoing, picks, bank=15, gameweek=10)
        by_ids = scorer.find_replacements(outgoing, ids, bank=15, gameweek=10)

        assert [c.player.id for c in by_picks] == [c.player.id for c in by_ids]

    def test_result_limit(self, catalog, picks):
        scorer = ReplacementScorer(catalog, max_results=2)
        outgoing = make_player(200, element_type=3, now_cost=130)

        assert len(scorer.find_replacements(outgoing, picks, bank=0, gameweek=10)) == 2

    def test_empty_pool(self, scorer, picks):
        outgoing = make_player(200, element_type=1, now_cost=30)
        assert scorer.find_replacements(outgoing, picks, bank=0, gameweek=10) == []

    def test_ties_keep_catalog_order(self, picks):
        twins = [
            player_record(301, element_type=4, team=2, now_cost=60),
            player_record(302, element_type=4, team=2, now_cost=60),
        ]
        catalog = PlayerCatalog(bootstrap_document(extra_elements=twins), fixture_records())
        scorer = ReplacementScorer(catalog)
        outgoing = catalog.get_player_by_id(13)

        ids = [c.player.id for c in scorer.find_replacements(outgoing, picks, bank=0, gameweek=10)]

        assert ids.index(301) < ids.index(302)
