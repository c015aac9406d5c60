"""Venue fit score: weighted vibe, type and budget sub-scores."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, Optional, Tuple

from ..app.preferences import FilterState
from ..config.scoring_constants import (
    SCORE_DECIMALS,
    TYPE_NEUTRAL_SCORE,
    VIBE_SATURATION,
    WEIGHT_BUDGET,
    WEIGHT_TYPE,
    WEIGHT_VIBE,
)
from ..processing.normalize import Venue


def round_score(value: Any, decimals: int = SCORE_DECIMALS) -> float:
    """Half-up rounding on the decimal value, so 0.575 -> 0.58."""
    quantum = Decimal(1).scaleb(-decimals)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def count_vibe_matches(venue_vibes: Iterable[str], selected: Iterable[str]) -> int:
    have = {v.lower() for v in venue_vibes}
    wanted = {s.strip().lower() for s in selected if s and s.strip()}
    return len(wanted & have)


def vibe_score(matches: int) -> float:
    return min(1.0, matches / VIBE_SATURATION)


def type_score(venue_type: str, selected_types) -> float:
    # Categories are OR-ed: any selected type is a full match.
    if not selected_types:
        return TYPE_NEUTRAL_SCORE
    return 1.0 if venue_type in selected_types else 0.0


def budget_ok(price_avg: Optional[float], ceiling: float) -> float:
    if price_avg is None:
        return 1.0
    return 1.0 if price_avg <= ceiling else 0.0


def calculate_score(venue: Venue, state: FilterState) -> Tuple[float, Dict[str, Any]]:
    """Return ``(score, breakdown)`` for one venue under the current filters.

    Pure function of its arguments: no caching, no hidden state.
    """
    matches = count_vibe_matches(venue.vibes, state.selected_vibes)
    parts = {
        "vibe": vibe_score(matches),
        "type": type_score(venue.type, state.selected_types),
        "budget": budget_ok(venue.price_avg, state.budget_ceiling),
    }
    weights = {"vibe": WEIGHT_VIBE, "type": WEIGHT_TYPE, "budget": WEIGHT_BUDGET}

    raw = sum(Decimal(str(weights[k])) * Decimal(str(parts[k])) for k in parts)
    score = round_score(raw)

    breakdown = dict(parts)
    breakdown["vibe_matches"] = matches
    return score, breakdown


def score_venue(venue: Venue, state: FilterState) -> float:
    return calculate_score(venue, state)[0]
