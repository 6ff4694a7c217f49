"""
Clock and calendar helpers.

Conference sheets write times every way imaginable ("7PM", "6:00 PM",
"18:00", "9"). Everything here turns them into the canonical "HH:MM"
24-hour form the rest of the package works with.

Leniency rule: parsing never raises. Empty input becomes "00:00" and
input that cannot be understood is handed back unchanged, so
the caller decides what default to substitute.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Optional

_CANONICAL_RE = re.compile(r"^\d{2}:\d{2}$")
_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")
_MERIDIEM_RE = re.compile(r"^(\d{1,2})(?::(\d{2}))?\s*([AaPp])\.?[Mm]\.?$")
_BARE_HOUR_RE = re.compile(r"^\d{1,2}$")

DATE_FORMATS = (
    "%Y-%m-%d",  # ISO 8601
    "%m/%d/%Y",  # US
    "%m-%d-%Y",  # US with dashes
    "%B %d, %Y",  # June 12, 2023
    "%b %d, %Y",  # Jun 12, 2023
    "%Y/%m/%d",
)


def _fmt(hour: int, minute: int) -> str:
    return f"{hour:02d}:{minute:02d}"


def normalize_time(raw: str) -> str:
    """
    Convert a loosely formatted clock time into "HH:MM".

    Accepted shapes:
        "9:05", "18:00", "18:00:00"   -> already 24-hour, zero-padded
        "7PM", "7 pm", "6:30 PM"      -> 12-hour with meridiem
        "9", "21"                     -> bare hour, taken as 24-hour
    """
    text = (raw or "").strip()
    if not text:
        return "00:00"

    m = _CLOCK_RE.match(text)
    if m:
        hour, minute = int(m.group(1)), int(m.group(2))
        if hour <= 23 and minute <= 59:
            return _fmt(hour, minute)
        return raw

    m = _MERIDIEM_RE.match(text)
    if m:
        hour = int(m.group(1))
        minute = int(m.group(2)) if m.group(2) else 0
        if not (1 <= hour <= 12 and minute <= 59):
            return raw
        is_pm = m.group(3).lower() == "p"
        if is_pm and hour < 12:
            hour += 12
        elif not is_pm and hour == 12:
            hour = 0
        return _fmt(hour, minute)

    if _BARE_HOUR_RE.match(text):
        hour = int(text)
        if hour <= 23:
            return _fmt(hour, 0)

    return raw


def is_canonical_time(value: str) -> bool:
    if not isinstance(value, str) or not _CANONICAL_RE.match(value):
        return False
    hour, minute = value.split(":")
    return int(hour) <= 23 and int(minute) <= 59


def to_minutes(hhmm: str) -> int:
    """
    Convert 'HH:MM' to minutes since midnight.
    Raises ValueError for invalid formats.
    """
    if not is_canonical_time(hhmm):
        raise ValueError(f"Invalid time format: {hhmm!r}")
    hour, minute = hhmm.split(":")
    return int(hour) * 60 + int(minute)


def times_overlap(start_a: str, end_a: str, start_b: str, end_b: str) -> bool:
    # Half-open intervals: touching endpoints are not an overlap
    return to_minutes(start_a) < to_minutes(end_b) and to_minutes(start_b) < to_minutes(end_a)


def normalize_date(raw: str) -> Optional[str]:
    """
    Normalize a date to ISO 8601 (YYYY-MM-DD).

    Returns None if the value is not a real calendar date in any known format.
    """
    text = (raw or "").strip()
    if not text:
        return None
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date().isoformat()
        except ValueError:
            continue
    return None


def format_time_12h(hhmm: str) -> str:
    """'18:00' -> '6:00 PM'"""
    hour_s, minute_s = hhmm.split(":")
    hour = int(hour_s)
    suffix = "PM" if hour >= 12 else "AM"
    hour12 = hour % 12 or 12
    return f"{hour12}:{minute_s} {suffix}"


def format_date_short(date_iso: str) -> str:
    """'2023-06-12' -> 'Jun 12'"""
    d = datetime.strptime(date_iso, "%Y-%m-%d").date()
    return f"{d.strftime('%b')} {d.day}"
