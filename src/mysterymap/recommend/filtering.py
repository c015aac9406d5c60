"""Score-based admission for ranked venues."""

import pandas as pd

from ..utils.logging import get_logger

logger = get_logger(__name__)


def filter_by_threshold(scored: pd.DataFrame, threshold: float) -> pd.DataFrame:
    """Drop rows whose ``score`` is below ``threshold``.

    There is no relaxation step: a weak match never enters the list, even
    when that leaves it short or empty.
    """
    if scored.empty:
        return scored
    kept = scored[scored["score"] >= threshold]
    dropped = len(scored) - len(kept)
    if dropped:
        logger.debug("Threshold %.2f dropped %d/%d venues", threshold, dropped, len(scored))
    return kept
