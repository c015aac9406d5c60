"""Strings and links derived from ranked venues for the front-ends."""

from typing import Any, Dict, Iterable, List, Optional, Sequence
from urllib.parse import quote

from ..config.rules import DEFAULT_TYPES, DEFAULT_VIBES, MAPS_SEARCH_URL
from ..processing.images import image_candidates
from ..processing.normalize import Venue
from ..recommend.engine import ScoredVenue
from ..storage.repository import KeyValueStore, is_saved


def available_vibes(venues: Iterable[Venue]) -> List[str]:
    """Vibe chips to offer: every tag in the data, or the defaults."""
    tags = {tag for venue in venues for tag in venue.vibes}
    return sorted(tags) if tags else list(DEFAULT_VIBES)


def available_types(venues: Iterable[Venue]) -> List[str]:
    types = list(dict.fromkeys(venue.type for venue in venues))
    return types if types else list(DEFAULT_TYPES)


def map_link(venue: Venue) -> str:
    if venue.map_url:
        return venue.map_url
    query = venue.address or f"{venue.name} {venue.city or ''}".strip()
    return MAPS_SEARCH_URL.format(query=quote(query, safe=""))


def price_label(price: Optional[float]) -> str:
    if price is None:
        return ""
    if float(price).is_integer():
        return f"${int(price)}"
    return f"${price:g}"


def subtitle(venue: Venue) -> str:
    return " • ".join(p for p in (venue.type, price_label(venue.price_avg)) if p)


def top_tags(venue: Venue, limit: int = 3) -> List[str]:
    return sorted(venue.vibes)[:limit]


def result_count_label(results: Sequence[ScoredVenue], submitted: bool) -> str:
    count = len(results) if submitted else 0
    return f"{count} pick" if count == 1 else f"{count} picks"


def result_to_dict(item: ScoredVenue, store: Optional[KeyValueStore] = None) -> Dict[str, Any]:
    venue = item.venue
    out = {
        "id": venue.key,
        "name": venue.name,
        "type": venue.type,
        "score": item.score,
        "subtitle": subtitle(venue),
        "address": venue.address,
        "city": venue.city,
        "price_avg": venue.price_avg,
        "tags": top_tags(venue),
        "map_url": map_link(venue),
        "images": image_candidates(venue.image_url),
    }
    if store is not None:
        out["saved"] = is_saved(store, venue.key)
    return out


def format_result(rank_no: int, item: ScoredVenue) -> str:
    venue = item.venue
    lines = [f"{rank_no}. {venue.name}  (score {item.score:.2f})"]
    if subtitle(venue):
        lines.append(f"   {subtitle(venue)}")
    if venue.address:
        lines.append(f"   {venue.address}")
    tags = top_tags(venue)
    if tags:
        lines.append("   #" + "  #".join(tags))
    lines.append(f"   {map_link(venue)}")
    return "\n".join(lines)
