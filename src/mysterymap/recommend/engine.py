"""Recommendation engine: score every venue, admit, sort, cap.

Submodules:
  - scoring: calculate_score and the vibe/type/budget sub-scores
  - filtering: filter_by_threshold
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from ..app.preferences import FilterState
from ..config import settings
from ..processing.normalize import Venue
from ..utils.logging import get_logger
from .filtering import filter_by_threshold
from .scoring import calculate_score

logger = get_logger(__name__)


@dataclass(frozen=True)
class ScoredVenue:
    venue: Venue
    score: float
    breakdown: Dict[str, Any] = field(default_factory=dict, compare=False)


def score_frame(venues: Sequence[Venue], state: FilterState) -> pd.DataFrame:
    scores, breakdowns = [], []
    for venue in venues:
        score, breakdown = calculate_score(venue, state)
        scores.append(score)
        breakdowns.append(breakdown)
    return pd.DataFrame({
        "venue": pd.Series(list(venues), dtype=object),
        "score": pd.Series(scores, dtype="float64"),
        "score_breakdown": pd.Series(breakdowns, dtype=object),
    })


def rank(
    venues: Sequence[Venue],
    state: FilterState,
    cap: Optional[int] = None,
    threshold: Optional[float] = None,
) -> List[ScoredVenue]:
    """Rank venues for ``state``: at most ``cap`` results, best first.

    Equal scores keep their input order, so re-ranking after a change that
    does not move any score leaves the cards where they were.
    """
    cap = settings.RESULT_CAP if cap is None else cap
    threshold = settings.SCORE_THRESHOLD if threshold is None else threshold
    if not venues or cap <= 0:
        return []

    scored = filter_by_threshold(score_frame(venues, state), threshold)
    scored = scored.sort_values(by="score", ascending=False, kind="stable")
    top = scored.head(cap)

    return [
        ScoredVenue(venue=v, score=float(s), breakdown=b)
        for v, s, b in zip(top["venue"], top["score"], top["score_breakdown"])
    ]


def get_recommendations(
    venues: Sequence[Venue],
    state: FilterState,
    top_n: Optional[int] = None,
    threshold: Optional[float] = None,
) -> List[ScoredVenue]:
    """Results to show: nothing until the user has pressed "go"."""
    if not state.submitted:
        return []

    results = rank(venues, state, cap=top_n, threshold=threshold)
    logger.info(
        "Ranked %d/%d venues (vibes=%s, types=%s, budget=%s)",
        len(results), len(venues),
        sorted(state.selected_vibes), sorted(state.selected_types), state.budget_ceiling,
    )
    return results
