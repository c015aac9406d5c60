from __future__ import annotations

import json
import os
import time
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from ..config.settings import STORE_FILE
from ..utils.logging import get_logger

logger = get_logger(__name__)

KEY_JOINED = "mm_waitlisted"
KEY_HIDDEN_UNTIL = "mm_waitlist_hidden_until"
KEY_SAVED = "mysterymapp_saved"

DAY_MS = 24 * 60 * 60 * 1000


class KeyValueStore(Protocol):
    """The only storage surface the app relies on: string-keyed get/set/has."""

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def has(self, key: str) -> bool: ...


class MemoryStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._data.get(key, default)

    def set(self, key: str, value: str) -> None:
        self._data[key] = str(value)

    def has(self, key: str) -> bool:
        return key in self._data


class JsonFileStore:
    """Key-value store persisted as one JSON object on disk."""

    def __init__(self, path: Path = STORE_FILE):
        self.path = Path(path)
        self._data = self._read()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Store file unreadable, starting empty: %s", exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Store file is not a JSON object, starting empty: %s", self.path)
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(self._data, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp, self.path)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._data.get(key, default)

    def set(self, key: str, value: str) -> None:
        self._data[key] = str(value)
        self._write()

    def has(self, key: str) -> bool:
        return key in self._data


def open_store(path: Optional[Path] = None) -> KeyValueStore:
    """File-backed store at ``path``, or an in-memory one when no path is given."""
    if path is None:
        return MemoryStore()
    return JsonFileStore(path)


def _now_ms(now: Optional[datetime] = None) -> int:
    if now is None:
        return int(time.time() * 1000)
    return int(now.timestamp() * 1000)


# --- waitlist flags ---

def is_joined(store: KeyValueStore) -> bool:
    return store.get(KEY_JOINED) == "1"


def mark_joined(store: KeyValueStore) -> None:
    store.set(KEY_JOINED, "1")


def snooze(store: KeyValueStore, days: int, now: Optional[datetime] = None) -> int:
    """Hide waitlist prompts for ``days``; returns the epoch-ms deadline."""
    until = _now_ms(now) + days * DAY_MS
    store.set(KEY_HIDDEN_UNTIL, str(until))
    return until


def snoozed_until(store: KeyValueStore) -> int:
    raw = store.get(KEY_HIDDEN_UNTIL) or "0"
    try:
        return int(float(raw))
    except ValueError:
        return 0


def is_snoozed(store: KeyValueStore, now: Optional[datetime] = None) -> bool:
    return _now_ms(now) < snoozed_until(store)


def should_show_waitlist(store: KeyValueStore, now: Optional[datetime] = None) -> bool:
    return not is_joined(store) and not is_snoozed(store, now)


# --- saved venues ---

def saved_ids(store: KeyValueStore) -> List[str]:
    raw = store.get(KEY_SAVED)
    if not raw:
        return []
    try:
        ids = json.loads(raw)
    except ValueError:
        logger.warning("Saved venue list is corrupt, ignoring it")
        return []
    if not isinstance(ids, list):
        return []
    return [str(i) for i in ids]


def is_saved(store: KeyValueStore, venue_id: str) -> bool:
    return venue_id in saved_ids(store)


def save_venue(store: KeyValueStore, venue_id: str) -> bool:
    """Add ``venue_id`` to the saved list. Returns False if it was already there."""
    ids = saved_ids(store)
    if venue_id in ids:
        return False
    ids.append(venue_id)
    store.set(KEY_SAVED, json.dumps(ids, ensure_ascii=False))
    return True
