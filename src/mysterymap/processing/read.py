import io
import json
from typing import Any, Dict, List

import pandas as pd

from ..utils.logging import get_logger

logger = get_logger(__name__)

RawRow = Dict[str, Any]


def _sanitize_header(name: Any) -> str:
    return str(name).replace("\ufeff", "").strip()


def looks_like_json(text: str) -> bool:
    """Feeds starting with ``[`` or ``{`` are JSON, everything else is CSV."""
    head = (text or "").lstrip("\ufeff \t\r\n")
    return head[:1] in ("[", "{")


def parse_table(text: str) -> List[RawRow]:
    """Parse published-sheet CSV text into header -> value rows.

    Quoted cells may hold commas, newlines and doubled quotes; CRLF and LF
    both end a row. The first row is the header, used as-is for row keys:
    when two header cells are equal the rightmost column wins. Cells are
    trimmed and rows with no content at all are dropped.
    """
    if not text or not text.strip():
        return []

    try:
        # header=None: pandas would rename a repeated header cell to "name.1"
        df = pd.read_csv(
            io.StringIO(text),
            sep=",",
            header=None,
            dtype=str,
            keep_default_na=False,
            na_filter=False,
            skip_blank_lines=True,
            index_col=False,
            on_bad_lines="skip",
        )
    except pd.errors.EmptyDataError:
        return []

    df = df.fillna("")
    for col in df.columns:
        df[col] = df[col].astype(str).str.strip()

    header = [_sanitize_header(c) for c in df.iloc[0]]
    body = df.iloc[1:]

    before = len(body)
    body = body[body.ne("").any(axis=1)]
    if len(body) != before:
        logger.debug("Dropped %d empty rows", before - len(body))

    return [dict(zip(header, values)) for values in body.itertuples(index=False, name=None)]


def parse_json_feed(text: str) -> List[RawRow]:
    """Decode a JSON feed: an array of row objects or ``{"data": [...]}``."""
    payload = json.loads(text.lstrip("\ufeff"))
    if isinstance(payload, dict):
        payload = payload.get("data")
    if not isinstance(payload, list):
        raise ValueError("JSON feed must be an array or an object with a 'data' array")

    rows = [row for row in payload if isinstance(row, dict)]
    if len(rows) != len(payload):
        logger.debug("Ignored %d non-object JSON entries", len(payload) - len(rows))
    return rows


def parse_feed(text: str) -> List[RawRow]:
    if looks_like_json(text):
        return parse_json_feed(text)
    return parse_table(text)
