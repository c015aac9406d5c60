"""Image reference cleanup for venue cards.

Sheet editors paste anything into the image column: bare ``www.`` links,
Google Drive share links, Instagram CDN URLs that refuse hotlinking. This
module turns such a reference into something an ``<img>`` tag can load, and
describes the fallback chain to walk when loading still fails.
"""

import re
from typing import Any, List, Optional
from urllib.parse import ParseResult, parse_qs, quote, urlparse

from ..config.rules import (
    DRIVE_HOSTS,
    DRIVE_VIEW_URL,
    HOTLINK_HOSTILE_HOSTS,
    IMAGE_PROXY_BASE,
    IMAGE_PROXY_FIT,
    IMAGE_PROXY_HEIGHT,
    IMAGE_PROXY_HOST,
    IMAGE_PROXY_WIDTH,
    PLACEHOLDER_IMAGE,
)

_DRIVE_FILE_SEGMENT = re.compile(r"/file/d/([A-Za-z0-9_-]+)")


def _host_matches(host: str, domains) -> bool:
    return any(host == d or host.endswith("." + d) for d in domains)


def _drive_file_id(parsed: ParseResult) -> Optional[str]:
    m = _DRIVE_FILE_SEGMENT.search(parsed.path)
    if m:
        return m.group(1)
    ids = parse_qs(parsed.query).get("id")
    if ids and ids[0].strip():
        return ids[0].strip()
    return None


def proxy_image_url(url: str) -> str:
    """Route ``url`` through the public resize proxy (fixed size, cover fit)."""
    return (
        f"{IMAGE_PROXY_BASE}?url={quote(url, safe='')}"
        f"&w={IMAGE_PROXY_WIDTH}&h={IMAGE_PROXY_HEIGHT}&fit={IMAGE_PROXY_FIT}"
    )


def is_proxied(url: str) -> bool:
    return (urlparse(url).hostname or "").lower() == IMAGE_PROXY_HOST


def resolve_image_url(raw: Any) -> str:
    """Return a loadable image URL for ``raw``, or '' when there is none."""
    url = str(raw).strip() if raw is not None else ""
    if not url:
        return ""

    if url.lower().startswith("www."):
        url = "https://" + url

    if url.lower().startswith("data:"):
        return url

    parsed = urlparse(url)
    if parsed.scheme.lower() not in ("http", "https") or not parsed.netloc:
        return ""

    host = (parsed.hostname or "").lower()
    if _host_matches(host, DRIVE_HOSTS):
        file_id = _drive_file_id(parsed)
        if file_id:
            url = DRIVE_VIEW_URL.format(file_id=file_id)
            host = urlparse(url).hostname or host

    if _host_matches(host, HOTLINK_HOSTILE_HOSTS):
        return proxy_image_url(url)
    return url


def image_candidates(raw: Any) -> List[str]:
    """Ordered sources to try at render time.

    The resolved URL first, then the proxied form of it, then the static
    placeholder. A card that fails on one source moves to the next and
    never retries past the placeholder.
    """
    resolved = resolve_image_url(raw)
    if not resolved:
        return [PLACEHOLDER_IMAGE]

    chain = [resolved]
    if not resolved.startswith("data:") and not is_proxied(resolved):
        chain.append(proxy_image_url(resolved))
    chain.append(PLACEHOLDER_IMAGE)
    return chain
