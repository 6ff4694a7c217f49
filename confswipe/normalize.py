"""
Normalization (raw sheet rows -> canonical Event objects).

The conference sheet lists many events twice: once as a "Main" row with
the real description and once as a "Side" row that carries RSVP links.
This module:
- skips rows without a title or a usable date
- merges rows that share (title, date) into one record
- maps the merged record onto the Event model with safe defaults

Important rules:
- normalization never raises for a bad field, it substitutes a default
- ids are 1-based and follow first-seen order of the (title, date) key
- output order == first-seen order (not sorted by date)
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from confswipe.model import ADDITIONAL_KEYS, Event
from confswipe.timeutil import is_canonical_time, normalize_date, normalize_time

logger = logging.getLogger(__name__)

DEFAULT_TIME = "00:00"
DEFAULT_LOCATION = "TBD"
DEFAULT_DESCRIPTION = "No description provided"

# Canonical field -> accepted column headers (first non-empty wins)
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "title": ("Event Name", "title", "Title"),
    "date": ("Date", "date"),
    "start": ("StartTime", "startTime", "Start Time"),
    "end": ("EndTime", "endTime", "End Time"),
    "time": ("Time", "time"),
    "location": ("Location", "location"),
    "type": ("Type", "type"),
    "description": ("Description", "description"),
    "action": ("Action", "action"),
    "action_link": ("Action Link", "actionLink"),
    "details_link": ("Details Link", "detailsLink"),
    "sponsors": ("Sponsors", "sponsors"),
    "speakers": ("Speakers", "speakers"),
}

# Fields a secondary row may contribute to a primary one
SIDE_CHANNEL_FIELDS = ("action", "action_link", "details_link", "sponsors")

_RANGE_SPLIT_RE = re.compile(r"\s*[-–—]\s*")
_TIME_LIKE_RE = re.compile(r":|\d\s*[AaPp]\.?[Mm]\b|\b(?:AM|PM)\b")
_SPEAKER_SPLIT_RE = re.compile(r"[;,]")

Record = Dict[str, str]


def _extract(row: Mapping[str, object]) -> Record:
    """
    Pull the recognized fields out of a raw row, whitespace-stripped.
    Missing fields come back as "".
    """
    rec: Record = {}
    for name, aliases in FIELD_ALIASES.items():
        value = ""
        for alias in aliases:
            raw = row.get(alias)
            if raw is None:
                continue
            text = str(raw).strip()
            if text:
                value = text
                break
        rec[name] = value
    return rec


def _variant(rec: Record) -> str:
    return rec["type"].strip().lower()


def _fill_gaps(stored: Record, incoming: Record, fields: Optional[Iterable[str]] = None) -> None:
    # First non-empty value wins per field
    for name in fields if fields is not None else FIELD_ALIASES:
        if not stored.get(name) and incoming.get(name):
            stored[name] = incoming[name]


def _merge(stored: Record, incoming: Record) -> None:
    """
    Merge a companion row into the record already stored for its key.
    """
    new_v = _variant(incoming)
    old_v = _variant(stored)

    if new_v == "main" and old_v == "side":
        logger.debug("Promoting %r on %s to Main", stored["title"], stored["date"])
        for name in ("description", "location"):
            if incoming[name]:
                stored[name] = incoming[name]
        stored["type"] = incoming["type"]
        _fill_gaps(stored, incoming)
    elif new_v == "side" and old_v == "main":
        logger.debug("Taking side-channel fields for %r on %s", stored["title"], stored["date"])
        _fill_gaps(stored, incoming, SIDE_CHANNEL_FIELDS)
    else:
        _fill_gaps(stored, incoming)


def _canonical_or_default(raw: str) -> str:
    value = normalize_time(raw)
    return value if is_canonical_time(value) else DEFAULT_TIME


def parse_time_range(start: str, end: str, combined: str) -> Tuple[str, str]:
    """
    Work out (start_time, end_time) from explicit fields or a "Time" range.
    """
    if start and end:
        return _canonical_or_default(start), _canonical_or_default(end)

    if combined:
        parts = _RANGE_SPLIT_RE.split(combined.strip(), maxsplit=1)
        if len(parts) == 2:
            return _canonical_or_default(parts[0]), _canonical_or_default(parts[1])

    return DEFAULT_TIME, DEFAULT_TIME


def sanitize_location(raw: str) -> str:
    """
    Return the location, or "TBD" if it is empty or looks like a clock time.

    Some sheets have the time shifted into the Location column.
    """
    text = (raw or "").strip()
    if not text:
        return DEFAULT_LOCATION
    if _TIME_LIKE_RE.search(text):
        logger.debug("Rejecting time-like location %r", text)
        return DEFAULT_LOCATION
    return text


def map_event_type(raw: str) -> str:
    """
    Map the sheet's Type column to the fixed category set.

    "Side" events show up as networking so they stand out from Main ones.
    """
    value = (raw or "").strip().lower()
    if value == "main":
        return "main"
    if value == "side":
        return "networking"
    return "other"


def _split_speakers(raw: str) -> Tuple[str, ...]:
    return tuple(s.strip() for s in _SPEAKER_SPLIT_RE.split(raw or "") if s.strip())


def _placeholder_description(rec: Record) -> str:
    # Side rows without text show their title instead
    return rec["title"] if _variant(rec) == "side" else DEFAULT_DESCRIPTION


def _to_event(rec: Record, event_id: int) -> Event:
    start_time, end_time = parse_time_range(rec["start"], rec["end"], rec["time"])

    extra = {key: rec[key] for key in ADDITIONAL_KEYS if rec.get(key)}

    return Event(
        id=event_id,
        title=rec["title"] or f"Untitled Event {event_id}",
        description=rec["description"] or _placeholder_description(rec),
        date=rec["date"],
        start_time=start_time,
        end_time=end_time,
        location=sanitize_location(rec["location"]),
        type=map_event_type(rec["type"]),
        speakers=_split_speakers(rec["speakers"]),
        additional_data=extra or None,
    )


def normalize(rows: Iterable[Mapping[str, object]]) -> List[Event]:
    """
    Turn raw rows into deduplicated, canonical Events.
    """
    groups: Dict[Tuple[str, str], Record] = {}
    total = 0

    for n, row in enumerate(rows, start=1):
        total = n
        rec = _extract(row)

        if not rec["title"] or not rec["date"]:
            logger.warning("Skipping row %d: missing title or date", n)
            continue

        date_iso = normalize_date(rec["date"])
        if date_iso is None:
            logger.warning("Skipping row %d (%r): invalid date %r", n, rec["title"], rec["date"])
            continue
        rec["date"] = date_iso

        key = (rec["title"], date_iso)
        stored = groups.get(key)
        if stored is None:
            groups[key] = rec
        else:
            _merge(stored, rec)

    events = [_to_event(rec, i) for i, rec in enumerate(groups.values(), start=1)]
    logger.info("Normalized %d events from %d rows", len(events), total)
    return events
