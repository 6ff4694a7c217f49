"""
iCalendar (.ics) export.

We convert the interested events into a calendar file that can be
imported into:
- Google Calendar
- Outlook
- Apple Calendar
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Union

from confswipe.model import Event
from confswipe.normalize import DEFAULT_LOCATION
from confswipe.timeutil import to_minutes


def _ics_escape(text: str) -> str:
    """
    Escape text for ICS fields (very small subset, sufficient for our use).
    """
    return (
        text.replace("\\", "\\\\").replace("\r\n", "\\n").replace("\n", "\\n").replace(";", "\\;").replace(",", "\\,")
    )


def _dt_local(date_yyyy_mm_dd: str, time_hh_mm: str) -> str:
    """
    Convert date + time to ICS local datetime string 'YYYYMMDDTHHMM00'.
    """
    dt = datetime.strptime(f"{date_yyyy_mm_dd} {time_hh_mm}", "%Y-%m-%d %H:%M")
    return dt.strftime("%Y%m%dT%H%M00")


def export_events_to_ics(events: Iterable[Event], out_path: Union[str, Path]) -> int:
    """
    Export events to an .ics file. Returns number of exported events.

    Events without a real time slot (end not after start) are skipped.
    """
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    lines: list[str] = []
    lines.append("BEGIN:VCALENDAR")
    lines.append("VERSION:2.0")
    lines.append("PRODID:-//ConfSwipe//EN")
    lines.append("CALSCALE:GREGORIAN")

    dtstamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    count = 0
    for ev in events:
        if to_minutes(ev.end_time) <= to_minutes(ev.start_time):
            continue

        lines.append("BEGIN:VEVENT")
        lines.append(f"UID:confswipe-{ev.id}@{ev.date}")
        lines.append(f"DTSTAMP:{dtstamp}")
        lines.append(f"DTSTART:{_dt_local(ev.date, ev.start_time)}")
        lines.append(f"DTEND:{_dt_local(ev.date, ev.end_time)}")
        lines.append(f"SUMMARY:{_ics_escape(ev.title)}")
        if ev.location and ev.location != DEFAULT_LOCATION:
            lines.append(f"LOCATION:{_ics_escape(ev.location)}")
        if ev.description:
            lines.append(f"DESCRIPTION:{_ics_escape(ev.description)}")
        lines.append("END:VEVENT")
        count += 1

    lines.append("END:VCALENDAR")

    # ICS standard uses CRLF
    out.write_text("\r\n".join(lines) + "\r\n", encoding="utf-8")
    return count
