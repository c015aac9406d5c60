"""
Scoring engine constants.

Weights, thresholds and the result cap live here so they can be tuned
and tested from one place instead of being scattered as magic numbers.
"""

# ── Score weights (sum to 1.0) ───────────────────────────────────────
WEIGHT_VIBE = 0.6
WEIGHT_TYPE = 0.25
WEIGHT_BUDGET = 0.15

# Two matching vibes already count as a perfect vibe fit.
VIBE_SATURATION = 2

# Type sub-score when the user picked no category at all.
TYPE_NEUTRAL_SCORE = 0.5

SCORE_DECIMALS = 2

# ── Admission + capping ──────────────────────────────────────────────
# Deployments have shipped with 6 and 12; 6 is the conservative default.
DEFAULT_RESULT_CAP = 6
WIDE_RESULT_CAP = 12
DEFAULT_SCORE_THRESHOLD = 0.40

# ── Filter state defaults ────────────────────────────────────────────
DEFAULT_BUDGET = 25
BUDGET_MIN = 5
BUDGET_MAX = 100

# ── URL sync ─────────────────────────────────────────────────────────
URL_WRITE_DELAY = 0.15  # seconds

# ── Waitlist snooze windows (days) ───────────────────────────────────
WAITLIST_BAR_SNOOZE_DAYS = 7
SPLASH_SNOOZE_DAYS = 14

# ── Waitlist delivery ────────────────────────────────────────────────
WAITLIST_TIMEOUT = 10  # seconds
