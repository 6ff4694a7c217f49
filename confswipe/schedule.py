"""
Schedule assembly.

- EventCatalog: the in-memory event collection for one session
  (list all / get by id)
- swipe_deck: which events are still waiting for a swipe
- build_agenda: the user's interested events, grouped per date,
  sorted by start time and conflict-annotated
"""

from __future__ import annotations

import logging
from collections import defaultdict
from pathlib import Path
from typing import AbstractSet, Iterable, Optional, Union

from confswipe.conflicts import annotate_conflicts
from confswipe.model import ConflictAnnotatedEvent, Event
from confswipe.source import SourceError, load_events
from confswipe.storage import SelectionStore
from confswipe.timeutil import to_minutes

logger = logging.getLogger(__name__)


class EventCatalog:
    """
    Read-only view over the normalized events of the current session.
    """

    def __init__(self, events: Iterable[Event] = (), load_error: Optional[str] = None) -> None:
        self._events: list[Event] = list(events)
        self._by_id: dict[int, Event] = {ev.id: ev for ev in self._events}
        self.load_error = load_error

    @classmethod
    def load(cls, location: Union[str, Path]) -> "EventCatalog":
        """
        Load the catalog from a data source.

        A load failure is logged and leaves the catalog empty,
        with the reason in `load_error`.
        """
        try:
            events = load_events(location)
        except SourceError as e:
            logger.error("Could not load events from %s: %s", location, e)
            return cls(load_error=str(e))
        return cls(events)

    def __len__(self) -> int:
        return len(self._events)

    def all_events(self) -> list[Event]:
        return list(self._events)

    def get_event(self, event_id: int) -> Optional[Event]:
        """Return the event, or None for an unknown id."""
        return self._by_id.get(event_id)

    def dates(self) -> list[str]:
        return sorted({ev.date for ev in self._events})

    def by_type(self, types: AbstractSet[str]) -> list[Event]:
        return [ev for ev in self._events if ev.type in types]


def swipe_deck(
    events: Iterable[Event],
    selection: SelectionStore,
    types: Optional[AbstractSet[str]] = None,
) -> list[Event]:
    """
    Events not yet swiped either way, in catalog order.
    Optionally restricted to some categories (the filter panel).
    """
    return [
        ev
        for ev in events
        if not selection.is_rated(ev.id) and (types is None or ev.type in types)
    ]


def build_agenda(
    all_events: Iterable[Event], interested_ids: AbstractSet[int]
) -> dict[str, list[ConflictAnnotatedEvent]]:
    """
    Build the per-date agenda for the interested events.

    Dates come out in ascending order; within a date events are sorted by
    start time (stable, so equal starts keep catalog order). Conflicts are
    only ever checked inside one date.
    """
    by_date: dict[str, list[Event]] = defaultdict(list)
    for ev in all_events:
        if ev.id in interested_ids:
            by_date[ev.date].append(ev)

    agenda: dict[str, list[ConflictAnnotatedEvent]] = {}
    for date in sorted(by_date):
        day = sorted(by_date[date], key=lambda ev: to_minutes(ev.start_time))
        agenda[date] = annotate_conflicts(day)

    return agenda
