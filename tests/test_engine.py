"""Unit tests for mysterymap.recommend.engine — admit, sort, cap."""

import pytest

from mysterymap.app.preferences import FilterState
from mysterymap.config import settings
from mysterymap.processing.normalize import Venue
from mysterymap.recommend.engine import ScoredVenue, get_recommendations, rank, score_frame
from mysterymap.recommend.filtering import filter_by_threshold


def _names(results):
    return [r.venue.name for r in results]


# ============================================================================
# rank
# ============================================================================
class TestRank:
    def test_orders_and_filters(self, sample_venues, base_state):
        results = rank(sample_venues, base_state, cap=6, threshold=0.40)
        assert _names(results) == ["Moss & Ember", "Paper Lantern", "Quiet Pages"]
        assert [r.score for r in results] == [0.88, 0.58, 0.58]

    def test_ties_keep_input_order(self, sample_venues, base_state):
        reordered = [sample_venues[3], sample_venues[2], sample_venues[0]]
        results = rank(reordered, base_state, cap=6, threshold=0.40)
        assert _names(results) == ["Moss & Ember", "Quiet Pages", "Paper Lantern"]

    def test_cap(self, sample_venues, base_state):
        results = rank(sample_venues, base_state, cap=2, threshold=0.40)
        assert _names(results) == ["Moss & Ember", "Paper Lantern"]

    def test_zero_cap(self, sample_venues, base_state):
        assert rank(sample_venues, base_state, cap=0) == []

    def test_empty_input(self, base_state):
        assert rank([], base_state, cap=6) == []

    def test_threshold_is_inclusive(self, sample_venues):
        state = FilterState(selected_types={"Bar"}, budget_ceiling=30, submitted=True)
        results = rank(sample_venues, state, cap=6, threshold=0.40)
        assert _names(results) == ["Neon Tide"]
        assert results[0].score == 0.40

    def test_no_relaxation_when_nothing_passes(self, sample_venues):
        state = FilterState(selected_vibes={"nonexistent"}, selected_types={"Gallery"},
                            budget_ceiling=5, submitted=True)
        assert rank(sample_venues, state, cap=6, threshold=0.40) == []

    def test_defaults_come_from_settings(self, sample_venues, base_state, monkeypatch):
        monkeypatch.setattr(settings, "RESULT_CAP", 1)
        monkeypatch.setattr(settings, "SCORE_THRESHOLD", 0.0)
        assert _names(rank(sample_venues, base_state)) == ["Moss & Ember"]
        monkeypatch.setattr(settings, "RESULT_CAP", 10)
        assert len(rank(sample_venues, base_state)) == 5

    def test_results_carry_breakdown(self, sample_venues, base_state):
        top = rank(sample_venues, base_state, cap=1, threshold=0.40)[0]
        assert isinstance(top, ScoredVenue)
        assert top.breakdown["vibe_matches"] == 2

    def test_stable_across_identical_calls(self, sample_venues, base_state):
        first = rank(sample_venues, base_state, cap=6, threshold=0.40)
        second = rank(sample_venues, base_state, cap=6, threshold=0.40)
        assert first == second

    def test_rerank_after_filter_change(self, sample_venues, base_state):
        rank(sample_venues, base_state, cap=6, threshold=0.40)
        narrowed = base_state.copy()
        narrowed.set_types(["Cafe"])
        results = rank(sample_venues, narrowed, cap=6, threshold=0.40)
        # Cafe bonus lifts Quiet Pages above Paper Lantern
        assert _names(results) == ["Moss & Ember", "Quiet Pages", "Paper Lantern"]
        assert [r.score for r in results] == [1.0, 0.7, 0.45]


class TestScoreFrame:
    def test_columns(self, sample_venues, base_state):
        df = score_frame(sample_venues, base_state)
        assert list(df.columns) == ["venue", "score", "score_breakdown"]
        assert len(df) == len(sample_venues)
        assert df["venue"].iloc[0] is sample_venues[0]

    def test_filter_by_threshold(self, sample_venues, base_state):
        df = score_frame(sample_venues, base_state)
        kept = filter_by_threshold(df, 0.5)
        assert len(kept) == 3
        assert filter_by_threshold(df.iloc[0:0], 0.5).empty


# ============================================================================
# get_recommendations
# ============================================================================
class TestGetRecommendations:
    def test_nothing_before_submit(self, sample_venues, base_state):
        state = base_state.copy()
        state.submitted = False
        assert get_recommendations(sample_venues, state) == []

    def test_after_submit(self, sample_venues, base_state):
        results = get_recommendations(sample_venues, base_state, top_n=6, threshold=0.40)
        assert len(results) == 3

    def test_does_not_touch_inputs(self, sample_venues, base_state):
        venues = list(sample_venues)
        before = base_state.copy()
        get_recommendations(venues, base_state, top_n=6)
        assert venues == sample_venues
        assert base_state == before

    def test_duplicate_free_output(self):
        venues = [Venue(name=f"V{i}", type="Cafe", vibes=frozenset({"cozy"})) for i in range(20)]
        state = FilterState(selected_vibes={"cozy"}, submitted=True)
        results = get_recommendations(venues, state, top_n=12, threshold=0.40)
        assert len(results) == 12
        assert len({r.venue.name for r in results}) == 12
