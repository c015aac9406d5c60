import re
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

import numpy as np

from ..config.rules import COLUMN_ALIASES, VIBE_DELIMITERS
from ..utils.logging import get_logger

logger = get_logger(__name__)

_PRICE_JUNK = re.compile(r"[^\d.]")
_VIBE_SPLIT = re.compile("[" + re.escape(VIBE_DELIMITERS) + "]")


@dataclass(frozen=True)
class Venue:
    """Canonical venue record. ``name`` and ``type`` are always non-empty."""

    name: str
    type: str
    id: Optional[str] = None
    city: Optional[str] = None
    address: Optional[str] = None
    price_avg: Optional[float] = None
    vibes: FrozenSet[str] = frozenset()
    map_url: Optional[str] = None
    image_url: Optional[str] = None

    @property
    def key(self) -> str:
        """Identity used for saved lists and UI keys."""
        return self.id or self.name


def normalize_header(name: Any) -> str:
    """'Image URL', 'image_url' and 'imageUrl' all become 'imageurl'."""
    return "".join(ch for ch in str(name).lower() if ch.isalnum())


def build_key_index(keys: Iterable[Any]) -> Dict[str, Any]:
    index: Dict[str, Any] = {}
    for key in keys:
        # First spelling wins if two headers collapse to the same key
        index.setdefault(normalize_header(key), key)
    return index


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (float, np.floating)):
        return bool(np.isnan(value))
    return False


def resolve_field(row: Mapping[str, Any], field: str, index: Optional[Dict[str, Any]] = None) -> Any:
    """Return the row's value for a canonical field, or None.

    Aliases are tried in table order; a header that exists but holds no value
    (None/NaN) does not count as a match.
    """
    if index is None:
        index = build_key_index(row.keys())
    for alias in COLUMN_ALIASES[field]:
        actual = index.get(normalize_header(alias))
        if actual is None:
            continue
        value = row.get(actual)
        if not _is_missing(value):
            return value
    return None


def clean_text(value: Any) -> Optional[str]:
    if _is_missing(value):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


def parse_price(value: Any) -> Optional[float]:
    """'$12.50' -> 12.5, '12' -> 12.0; empty or unreadable -> None (never 0)."""
    if _is_missing(value) or isinstance(value, bool):
        return None

    if isinstance(value, (int, float, np.number)):
        number = float(value)
        return number if np.isfinite(number) else None

    digits = _PRICE_JUNK.sub("", str(value))
    if not digits:
        return None
    try:
        return float(digits)
    except ValueError:
        # e.g. "1.2.3"
        return None


def parse_vibes(value: Any) -> FrozenSet[str]:
    if _is_missing(value):
        return frozenset()

    if isinstance(value, (list, tuple, set, frozenset)):
        parts = [p for item in value if not _is_missing(item) for p in _VIBE_SPLIT.split(str(item))]
    else:
        parts = _VIBE_SPLIT.split(str(value))

    return frozenset(tok for tok in (p.strip().lower() for p in parts) if tok)


def row_to_venue(row: Mapping[str, Any], index: Optional[Dict[str, Any]] = None) -> Optional[Venue]:
    """Build a Venue from one raw row; None when name or type is missing."""
    if index is None:
        index = build_key_index(row.keys())

    name = clean_text(resolve_field(row, "name", index))
    venue_type = clean_text(resolve_field(row, "type", index))
    if not name or not venue_type:
        return None

    return Venue(
        name=name,
        type=venue_type,
        id=clean_text(resolve_field(row, "id", index)),
        city=clean_text(resolve_field(row, "city", index)),
        address=clean_text(resolve_field(row, "address", index)),
        price_avg=parse_price(resolve_field(row, "price", index)),
        vibes=parse_vibes(resolve_field(row, "vibes", index)),
        map_url=clean_text(resolve_field(row, "map", index)),
        image_url=clean_text(resolve_field(row, "image", index)),
    )


def normalize_rows(rows: Iterable[Mapping[str, Any]]) -> List[Venue]:
    """Normalize raw rows into unique venues.

    Venues are unique by case-insensitive name. A later row replaces an
    earlier one completely and takes its place at the later position.
    """
    venues: Dict[str, Venue] = {}
    indexes: Dict[Tuple[Any, ...], Dict[str, Any]] = {}
    total = skipped = replaced = 0

    for row in rows:
        total += 1
        header = tuple(row.keys())
        index = indexes.get(header)
        if index is None:
            index = indexes[header] = build_key_index(header)

        venue = row_to_venue(row, index)
        if venue is None:
            skipped += 1
            continue

        key = venue.name.lower()
        if venues.pop(key, None) is not None:
            replaced += 1
        venues[key] = venue

    logger.debug(
        "Normalized %d rows -> %d venues (skipped %d, replaced %d)",
        total, len(venues), skipped, replaced,
    )
    return list(venues.values())
