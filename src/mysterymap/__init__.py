"""mysterymap — hidden-gem venue recommendations from a published sheet.

Public API surface — import submodules directly for full access:
  mysterymap.processing.read        — CSV / JSON feed parsing
  mysterymap.processing.normalize   — alias-based row -> Venue normalization
  mysterymap.processing.images      — image URL cleanup + fallback chain
  mysterymap.ingestion.source       — one-shot feed loading
  mysterymap.recommend.engine       — scoring + ranking
  mysterymap.app.query_state        — filter state <-> query string
  mysterymap.app.cli                — CLI entry point
"""

from .processing.read import parse_table
from .processing.normalize import Venue, normalize_rows
from .processing.images import resolve_image_url
from .ingestion.source import DataUnavailable, SourceConfig, load
from .recommend.engine import ScoredVenue, get_recommendations, rank
from .app.preferences import FilterState
from .app.query_state import decode_query, encode_query, hydrate


def main():
    """CLI entry point."""
    from .app.main import main as _main
    return _main()


__all__ = [
    "parse_table",
    "Venue",
    "normalize_rows",
    "resolve_image_url",
    "DataUnavailable",
    "SourceConfig",
    "load",
    "ScoredVenue",
    "get_recommendations",
    "rank",
    "FilterState",
    "decode_query",
    "encode_query",
    "hydrate",
    "main",
]
