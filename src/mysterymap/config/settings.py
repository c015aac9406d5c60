import os
from pathlib import Path

from ..utils.logging import get_logger
from .scoring_constants import DEFAULT_RESULT_CAP, DEFAULT_SCORE_THRESHOLD

logger = get_logger(__name__)

BASE_DIR = Path(__file__).resolve().parents[3]
DATA_DIR = BASE_DIR / "data"

LOCAL_VENUES_FILE = DATA_DIR / "venues.json"
STORE_FILE = DATA_DIR / "visitor_store.json"

# Streamlit page store: a JSON file when set, otherwise kept for the browser session only.
PAGE_STORE_FILE = os.environ.get("MYSTERYMAP_PAGE_STORE", "").strip() or None

# Published Google Sheet (File > Share > Publish to web > CSV).
SHEET_CSV_URL = os.environ.get("MYSTERYMAP_SHEET_CSV", "").strip() or None

# Google Form that collects waitlist emails (form "formResponse" URL + entry id).
WAITLIST_FORM_URL = os.environ.get("MYSTERYMAP_WAITLIST_FORM", "").strip() or None
WAITLIST_ENTRY = os.environ.get("MYSTERYMAP_WAITLIST_ENTRY", "").strip() or None


def _env_number(name: str, default, cast):
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw.strip())
    except ValueError:
        logger.warning("%s=%r is not a number, using default %s", name, raw, default)
        return default
    if value < 0:
        logger.warning("%s must not be negative (%r), using default %s", name, raw, default)
        return default
    return value


RESULT_CAP = _env_number("MYSTERYMAP_RESULT_CAP", DEFAULT_RESULT_CAP, int)
SCORE_THRESHOLD = _env_number("MYSTERYMAP_SCORE_THRESHOLD", DEFAULT_SCORE_THRESHOLD, float)


def default_source() -> str:
    """Sheet CSV when configured, otherwise the bundled JSON file."""
    return SHEET_CSV_URL or str(LOCAL_VENUES_FILE)
