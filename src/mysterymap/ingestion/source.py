from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union
from urllib.parse import urlparse

import requests

from ..processing.read import RawRow, parse_feed
from ..utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": "mysterymap/0.1 (+venue feed loader)",
    "Accept": "text/csv,application/json;q=0.9,*/*;q=0.8",
    "Cache-Control": "no-store",
}


class DataUnavailable(RuntimeError):
    """The venue feed could not be fetched or decoded.

    The original exception is kept on ``cause`` (and ``__cause__``) for
    diagnostics; callers only need to show a degraded state.
    """

    def __init__(self, location: str, cause: BaseException):
        super().__init__(f"Venue data unavailable from {location}: {cause}")
        self.location = location
        self.cause = cause


@dataclass(frozen=True)
class SourceConfig:
    location: str
    cache_bust: bool = True
    timeout: Optional[float] = None

    @property
    def is_remote(self) -> bool:
        return urlparse(self.location).scheme.lower() in ("http", "https")


def with_cache_buster(url: str, now_ms: Optional[int] = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    sep = "&" if "?" in url else "?"
    return f"{url}{sep}cb={now_ms}"


def fetch_text(config: SourceConfig, session: Optional[requests.Session] = None) -> str:
    """One GET (or one file read). No retries."""
    if not config.is_remote:
        return Path(config.location).read_text(encoding="utf-8-sig")

    url = with_cache_buster(config.location) if config.cache_bust else config.location
    if session is None:
        with requests.Session() as own:
            return _get_text(own, url, config.timeout)
    return _get_text(session, url, config.timeout)


def _get_text(session: requests.Session, url: str, timeout: Optional[float]) -> str:
    resp = session.get(url, headers=DEFAULT_HEADERS, timeout=timeout)
    resp.raise_for_status()
    if "charset" not in resp.headers.get("Content-Type", "").lower():
        resp.encoding = "utf-8"
    return resp.text


def load(
    config: Union[SourceConfig, str],
    session: Optional[requests.Session] = None,
) -> List[RawRow]:
    """Fetch the feed once and return its raw rows.

    Raises DataUnavailable on any network, HTTP, file or decoding failure.
    """
    if isinstance(config, str):
        config = SourceConfig(config)

    try:
        text = fetch_text(config, session=session)
        rows = parse_feed(text)
    except (requests.RequestException, OSError, ValueError) as exc:
        raise DataUnavailable(config.location, exc) from exc

    logger.info("Loaded %d rows from %s", len(rows), config.location)
    return rows
