"""
Persistent storage for the user's swipe decisions.

Two logical keys are kept in a small key-value store:

    interestedEvents      -> [event ids swiped right]
    notInterestedEvents   -> [event ids swiped left]

Design rationale:
- the event sheet is re-read every session and never written
- the selection is the only user state and must survive restarts

The backend is injected into SelectionStore, so tests (and other
front-ends) can swap the JSON file for anything with get/set.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional, Protocol, Union

logger = logging.getLogger(__name__)

INTERESTED_KEY = "interestedEvents"
NOT_INTERESTED_KEY = "notInterestedEvents"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Any:
        ...

    def set(self, key: str, value: Any) -> bool:
        ...


class MemoryStore:
    """In-process backend (no durability)."""

    def __init__(self, initial: Optional[dict[str, Any]] = None) -> None:
        self._data: dict[str, Any] = dict(initial or {})

    def get(self, key: str) -> Any:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> bool:
        self._data[key] = value
        return True


class JsonFileStore:
    """
    Key-value pairs kept in a single JSON object file.

    This class is deliberately forgiving:
    a missing, unreadable or corrupted file reads as "no data",
    and a failed write is logged and reported as False, never raised.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def _read_all(self) -> dict[str, Any]:
        # First run: file does not exist yet
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("Ignoring unreadable selection file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring selection file %s: not a JSON object", self.path)
            return {}
        return data

    def get(self, key: str) -> Any:
        return self._read_all().get(key)

    def set(self, key: str, value: Any) -> bool:
        data = self._read_all()
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Could not save %s to %s: %s", key, self.path, e)
            return False
        return True


def _clean_ids(value: Any) -> list[int]:
    """
    Keep only integer ids, first occurrence wins. Anything else -> [].
    """
    if not isinstance(value, list):
        return []
    out: list[int] = []
    for x in value:
        # bool is an int subclass, but never a valid id
        if isinstance(x, int) and not isinstance(x, bool) and x not in out:
            out.append(x)
    return out


class SelectionStore:
    """
    Interested / not-interested event ids with mutual exclusion.

    State is loaded once from the backend at construction and written
    back on every mutation.
    """

    def __init__(self, backend: KeyValueStore) -> None:
        self._backend = backend
        self._interested = _clean_ids(backend.get(INTERESTED_KEY))
        self._not_interested = [
            x for x in _clean_ids(backend.get(NOT_INTERESTED_KEY)) if x not in self._interested
        ]

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "SelectionStore":
        return cls(JsonFileStore(path))

    @property
    def interested(self) -> frozenset[int]:
        return frozenset(self._interested)

    @property
    def not_interested(self) -> frozenset[int]:
        return frozenset(self._not_interested)

    def interested_ids(self) -> list[int]:
        """Interested ids in the order they were marked."""
        return list(self._interested)

    def _persist(self) -> None:
        self._backend.set(INTERESTED_KEY, list(self._interested))
        self._backend.set(NOT_INTERESTED_KEY, list(self._not_interested))

    def mark_interested(self, event_id: int) -> None:
        if event_id in self._not_interested:
            self._not_interested.remove(event_id)
        if event_id not in self._interested:
            self._interested.append(event_id)
        logger.debug("Marked %d interested", event_id)
        self._persist()

    def mark_not_interested(self, event_id: int) -> None:
        if event_id in self._interested:
            self._interested.remove(event_id)
        if event_id not in self._not_interested:
            self._not_interested.append(event_id)
        logger.debug("Marked %d not interested", event_id)
        self._persist()

    def unmark(self, event_id: int) -> None:
        """Remove an event from the schedule (interested list only)."""
        if event_id in self._interested:
            self._interested.remove(event_id)
        self._persist()

    def is_rated(self, event_id: int) -> bool:
        return event_id in self._interested or event_id in self._not_interested

