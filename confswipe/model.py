"""
Central data model definitions used across the project.

This module defines the canonical structure of Event objects so that:
- all modules share the same field names
- nothing downstream of the normalizer ever looks at raw CSV column names
- events stay immutable once a data load has produced them
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

# Fixed category set. "networking" is also what secondary ("Side") rows map to.
EVENT_TYPES = ("main", "workshop", "panel", "networking", "breakout", "other")

# Keys that may appear in Event.additional_data
ADDITIONAL_KEYS = ("action", "action_link", "details_link", "sponsors")


@dataclass(frozen=True)
class Event:
    """
    Represents one logical conference event after normalization.

    start_time / end_time are always canonical 24-hour "HH:MM" strings and
    date is always a valid "YYYY-MM-DD" calendar date.
    """

    id: int
    title: str
    description: str
    date: str
    start_time: str
    end_time: str
    location: str
    type: str
    speakers: Tuple[str, ...] = ()
    additional_data: Optional[Mapping[str, str]] = None

    def __post_init__(self) -> None:
        # Freeze the side-channel bag so callers cannot mutate a shared event
        if self.additional_data is not None and not isinstance(self.additional_data, MappingProxyType):
            object.__setattr__(self, "additional_data", MappingProxyType(dict(self.additional_data)))
        if not isinstance(self.speakers, tuple):
            object.__setattr__(self, "speakers", tuple(self.speakers))

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass(frozen=True)
class ConflictAnnotatedEvent:
    """
    An Event plus the result of one conflict check.

    Computed per agenda request and never persisted.
    """

    event: Event
    has_conflict: bool
    conflicting_events: Tuple[Event, ...] = field(default_factory=tuple)

    @property
    def id(self) -> int:
        return self.event.id

    @property
    def title(self) -> str:
        return self.event.title

    @property
    def date(self) -> str:
        return self.event.date

    @property
    def start_time(self) -> str:
        return self.event.start_time

    @property
    def end_time(self) -> str:
        return self.event.end_time
