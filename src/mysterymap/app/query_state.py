"""Filter state <-> query string.

Keys:
  v   selected vibes, comma-joined
  t   selected types, pipe-joined (type names may contain commas)
  b   budget ceiling, decimal integer
  go  "1" once results were requested

The query is read once at start-up (``hydrate``). After that the state is
written back on every change through ``DebouncedQueryWriter``, so a burst of
edits such as dragging the budget slider ends in a single write.
"""

from __future__ import annotations

import re
import threading
from dataclasses import replace
from typing import Any, Callable, Dict, Mapping, Optional, Union
from urllib.parse import parse_qs, urlencode

from ..config.scoring_constants import DEFAULT_BUDGET, URL_WRITE_DELAY
from ..utils.logging import get_logger
from .preferences import FilterState

logger = get_logger(__name__)

KEY_VIBES = "v"
KEY_TYPES = "t"
KEY_BUDGET = "b"
KEY_GO = "go"

VIBE_SEP = ","
TYPE_SEP = "|"

_INT_RE = re.compile(r"^\d+$")

Query = Union[str, Mapping[str, Any], None]


def _first(value: Any) -> Optional[str]:
    if isinstance(value, (list, tuple)):
        return str(value[0]) if value else None
    return None if value is None else str(value)


def _query_params(query: Query) -> Dict[str, str]:
    if query is None:
        return {}
    if isinstance(query, str):
        if "?" in query:
            query = query.split("?", 1)[1]
        query = query.split("#", 1)[0]
        return {k: v[0] for k, v in parse_qs(query).items() if v}
    params = {}
    for key, value in query.items():
        first = _first(value)
        if first is not None:
            params[str(key)] = first
    return params


def _split(raw: Optional[str], sep: str) -> set:
    if not raw:
        return set()
    return {part.strip() for part in raw.split(sep) if part.strip()}


def decode_query(query: Query) -> Dict[str, Any]:
    """Return only the FilterState fields present (and valid) in ``query``."""
    params = _query_params(query)
    partial: Dict[str, Any] = {}

    vibes = _split(params.get(KEY_VIBES), VIBE_SEP)
    if vibes:
        partial["selected_vibes"] = vibes

    types = _split(params.get(KEY_TYPES), TYPE_SEP)
    if types:
        partial["selected_types"] = types

    raw_budget = (params.get(KEY_BUDGET) or "").strip()
    if _INT_RE.match(raw_budget):
        partial["budget_ceiling"] = int(raw_budget)
    elif raw_budget:
        logger.debug("Ignoring invalid budget in query: %r", raw_budget)

    if params.get(KEY_GO) == "1":
        partial["submitted"] = True

    return partial


def apply_partial(state: FilterState, partial: Mapping[str, Any]) -> FilterState:
    """New state with ``partial`` laid over ``state``; ``state`` is untouched."""
    updates = {k: (set(v) if isinstance(v, (set, frozenset, list, tuple)) else v)
               for k, v in partial.items()}
    return replace(state.copy(), **updates)


def hydrate(query: Query, base: Optional[FilterState] = None) -> FilterState:
    return apply_partial(base or FilterState(), decode_query(query))


def encode_params(state: FilterState) -> Dict[str, str]:
    """Query parameters for ``state``; empty and default values are left out."""
    params: Dict[str, str] = {}
    if state.selected_vibes:
        params[KEY_VIBES] = VIBE_SEP.join(sorted(state.selected_vibes))
    if state.selected_types:
        params[KEY_TYPES] = TYPE_SEP.join(sorted(state.selected_types))
    budget = int(round(float(state.budget_ceiling)))
    if budget != DEFAULT_BUDGET:
        params[KEY_BUDGET] = str(budget)
    if state.submitted:
        params[KEY_GO] = "1"
    return params


def encode_query(state: FilterState) -> str:
    return urlencode(encode_params(state), safe=",|")


class Location:
    """Current address of the page. Writes replace it; there is no history."""

    def __init__(self, path: str = "/", query: str = ""):
        self.path = path
        self.query = query
        self.writes = 0

    def replace(self, query: str) -> None:
        self.query = query
        self.writes += 1

    @property
    def url(self) -> str:
        return f"{self.path}?{self.query}" if self.query else self.path


class DebouncedQueryWriter:
    """Write the encoded state to ``sink`` once changes settle.

    Every ``schedule`` cancels the pending write and starts a fresh timer,
    so only one timer is ever outstanding and only the last state is
    written.
    """

    def __init__(
        self,
        sink: Callable[[str], None],
        delay: float = URL_WRITE_DELAY,
        timer_factory: Callable[..., Any] = threading.Timer,
    ):
        self._sink = sink
        self._delay = delay
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._timer = None
        self._pending: Optional[str] = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending is not None

    def schedule(self, state: FilterState) -> None:
        query = encode_query(state)
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            self._pending = query
            timer = self._timer_factory(self._delay, self._fire, args=(self._generation,))
            timer.daemon = True
            self._timer = timer
        timer.start()

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._pending is None:
                return
            query, self._pending, self._timer = self._pending, None, None
        try:
            self._sink(query)
        except Exception:
            logger.exception("Query string write failed")

    def flush(self) -> None:
        """Write the pending state right away, if there is one."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            query, self._pending, self._timer = self._pending, None, None
        if query is not None:
            self._sink(query)

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            self._pending = None
            self._timer = None
