from dataclasses import dataclass, field
from typing import List, Optional, Union

import requests

from ..config.settings import default_source
from ..processing.normalize import Venue, normalize_rows
from ..utils.logging import get_logger
from .source import DataUnavailable, SourceConfig, load

logger = get_logger(__name__)

DEGRADED_MESSAGE = "Couldn't load venues right now. Please try again later."


@dataclass
class Catalog:
    venues: List[Venue] = field(default_factory=list)
    error: Optional[str] = None
    source: str = ""

    @property
    def available(self) -> bool:
        return self.error is None


def load_venues(
    config: Union[SourceConfig, str],
    session: Optional[requests.Session] = None,
) -> List[Venue]:
    """Fetch, parse and normalize the feed. Raises DataUnavailable."""
    rows = load(config, session=session)
    venues = normalize_rows(rows)
    logger.info("[OK] %d venues ready (%d raw rows)", len(venues), len(rows))
    return venues


def build_catalog(
    config: Union[SourceConfig, str, None] = None,
    session: Optional[requests.Session] = None,
) -> Catalog:
    """Load the working set once; a failed load yields an empty catalog."""
    if config is None:
        config = SourceConfig(default_source())
    elif isinstance(config, str):
        config = SourceConfig(config)

    try:
        venues = load_venues(config, session=session)
    except DataUnavailable as exc:
        logger.warning("Venue feed unavailable (%s): %s", config.location, exc.cause, exc_info=True)
        return Catalog(venues=[], error=DEGRADED_MESSAGE, source=config.location)

    return Catalog(venues=venues, source=config.location)
