"""
Conflict detection.

Given the events of ONE date, flag every event that overlaps another.
Overlap rule:
    start < other_end AND other_start < end

Touching endpoints (one talk ends at 10:00, the next starts at 10:00)
are not a conflict. Grouping by date and sorting are the schedule
assembler's job; nothing here compares across dates on its own.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable

from confswipe.model import ConflictAnnotatedEvent, Event
from confswipe.timeutil import times_overlap


def annotate_conflicts(events: list[Event]) -> list[ConflictAnnotatedEvent]:
    """
    Annotate each event of a single day with the peers it overlaps.

    Output order equals input order.
    """
    out: list[ConflictAnnotatedEvent] = []

    # O(n^2) is fine, a conference day has tens of sessions
    for i, ev in enumerate(events):
        peers = tuple(
            other
            for j, other in enumerate(events)
            if j != i and times_overlap(ev.start_time, ev.end_time, other.start_time, other.end_time)
        )
        out.append(ConflictAnnotatedEvent(event=ev, has_conflict=bool(peers), conflicting_events=peers))

    return out


def find_conflicts(events: Iterable[Event]) -> list[tuple[Event, Event]]:
    """
    Find overlapping event pairs (A,B), each pair appears once.
    Only events on the same date are compared.
    """
    by_date: dict[str, list[Event]] = defaultdict(list)
    for ev in events:
        by_date[ev.date].append(ev)

    conflicts: list[tuple[Event, Event]] = []
    for date in sorted(by_date):
        day = by_date[date]
        for i in range(len(day)):
            for j in range(i + 1, len(day)):
                a, b = day[i], day[j]
                if times_overlap(a.start_time, a.end_time, b.start_time, b.end_time):
                    conflicts.append((a, b))

    return conflicts
