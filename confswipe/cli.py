"""
CLI (Command Line Interface).

This module provides quick terminal commands, e.g.:

    confswipe events --type main
    confswipe show <id>
    confswipe interested <id>
    confswipe skip <id>
    confswipe remove <id>
    confswipe agenda
    confswipe conflicts
    confswipe export <file.ics>
    confswipe swipe

Note:
- The interactive swipe deck lives in confswipe/interactive.py
- Commands print plain text; only log records go through rich
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from confswipe.config import load_settings
from confswipe.conflicts import find_conflicts
from confswipe.export_ics import export_events_to_ics
from confswipe.model import EVENT_TYPES, Event
from confswipe.schedule import EventCatalog, build_agenda
from confswipe.storage import SelectionStore
from confswipe.timeutil import format_date_short, format_time_12h


def _setup_logging(level: int) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _event_line(ev: Event) -> str:
    bits = [f"{ev.id:>3}", f"{ev.date} {ev.start_time}-{ev.end_time}", ev.title, f"({ev.type})"]
    if ev.location:
        bits.append(f"@ {ev.location}")
    return " | ".join(bits)


def _status_mark(selection: SelectionStore, event_id: int) -> str:
    if event_id in selection.interested:
        return "[+]"
    if event_id in selection.not_interested:
        return "[-]"
    return "[ ]"


def _cmd_events(args: argparse.Namespace, catalog: EventCatalog, selection: SelectionStore) -> int:
    """
    List events, optionally filtered by type and date.
    """
    events = catalog.all_events()
    if args.type:
        events = catalog.by_type(set(args.type))
    if args.date:
        date = args.date.strip()
        if date not in catalog.dates():
            print(f"No events on {date}. Dates: {', '.join(catalog.dates()) or '(none)'}")
            return 0
        events = [ev for ev in events if ev.date == date]

    if not events:
        print("No events.")
        return 0

    for ev in events:
        print(f"{_status_mark(selection, ev.id)} {_event_line(ev)}")
    return 0


def _cmd_show(args: argparse.Namespace, catalog: EventCatalog) -> int:
    ev = catalog.get_event(args.event_id)
    if ev is None:
        print(f"Event not found: {args.event_id}")
        return 1

    print(f"{ev.title}  [{ev.type}]")
    print(f"{format_date_short(ev.date)} ({ev.date}), {format_time_12h(ev.start_time)} - {format_time_12h(ev.end_time)}")
    print(f"Location: {ev.location}")
    if ev.speakers:
        print(f"Speakers: {', '.join(ev.speakers)}")
    print()
    print(ev.description)
    if ev.additional_data:
        print()
        for key, value in ev.additional_data.items():
            print(f"{key}: {value}")
    return 0


def _cmd_mark(args: argparse.Namespace, catalog: EventCatalog, selection: SelectionStore) -> int:
    """
    Mark an event as interested ("interested") or not interested ("skip").
    """
    ev = catalog.get_event(args.event_id)
    if ev is None:
        print(f"Event not found: {args.event_id}")
        return 1

    if args.command == "interested":
        selection.mark_interested(ev.id)
        print(f"Added to schedule: {ev.title} (interested: {len(selection.interested)})")
    else:
        selection.mark_not_interested(ev.id)
        print(f"Not interested: {ev.title}")
    return 0


def _cmd_remove(args: argparse.Namespace, selection: SelectionStore) -> int:
    if args.event_id not in selection.interested:
        print(f"Not in schedule: {args.event_id}")
        return 0

    selection.unmark(args.event_id)
    print(f"Removed: {args.event_id} (interested: {len(selection.interested)})")
    return 0


def _cmd_agenda(args: argparse.Namespace, catalog: EventCatalog, selection: SelectionStore) -> int:
    """
    Print the per-date agenda with conflict markers.
    """
    agenda = build_agenda(catalog.all_events(), selection.interested)
    if not agenda:
        print("Your schedule is empty.")
        return 0

    for date, day in agenda.items():
        print(f"\n{format_date_short(date)} ({date})")
        for item in day:
            marker = "!" if item.has_conflict else "-"
            print(f"  {marker} {_event_line(item.event)}")
            if item.has_conflict:
                others = ", ".join(o.title for o in item.conflicting_events)
                print(f"      conflicts with: {others}")
    return 0


def _interested_events(catalog: EventCatalog, selection: SelectionStore) -> list[Event]:
    agenda = build_agenda(catalog.all_events(), selection.interested)
    return [item.event for day in agenda.values() for item in day]


def _cmd_conflicts(args: argparse.Namespace, catalog: EventCatalog, selection: SelectionStore) -> int:
    """
    Print all overlapping pairs among the interested events.
    """
    confs = find_conflicts(_interested_events(catalog, selection))
    if not confs:
        print("No conflicts found.")
        return 0

    print(f"Conflicts found: {len(confs)}")
    for a, b in confs:
        print(f"- {a.date} {a.start_time}-{a.end_time} {a.title}  <->  {b.start_time}-{b.end_time} {b.title}")
    return 0


def _cmd_export(args: argparse.Namespace, catalog: EventCatalog, selection: SelectionStore) -> int:
    """
    Export interested events into an iCalendar (.ics) file.
    """
    out_path = (args.out or "").strip()
    if not out_path:
        print("Please provide output .ics path.")
        return 1

    events = _interested_events(catalog, selection)
    if not events:
        print("No interested events to export.")
        return 0

    n = export_events_to_ics(events, out_path)
    print(f"Exported {n} events to: {out_path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="confswipe", description="ConfSwipe conference schedule CLI")
    parser.add_argument("--source", type=str, default=None, help="URL or path of the event sheet (CSV or HTML)")
    parser.add_argument("--state", type=str, default=None, help="Path of the selection JSON file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_events = sub.add_parser("events", help="List events")
    p_events.add_argument("--type", action="append", choices=EVENT_TYPES, help="Only this type (repeatable)")
    p_events.add_argument("--date", type=str, default=None, help="Only this date (YYYY-MM-DD)")

    p_show = sub.add_parser("show", help="Show one event")
    p_show.add_argument("event_id", type=int)

    p_int = sub.add_parser("interested", help="Mark event as interested (adds it to your schedule)")
    p_int.add_argument("event_id", type=int)

    p_skip = sub.add_parser("skip", help="Mark event as not interested")
    p_skip.add_argument("event_id", type=int)

    p_remove = sub.add_parser("remove", help="Remove event from your schedule")
    p_remove.add_argument("event_id", type=int)

    sub.add_parser("agenda", help="Show your schedule per day with conflicts")
    sub.add_parser("conflicts", help="Show overlapping events in your schedule")

    p_export = sub.add_parser("export", help="Export your schedule to .ics")
    p_export.add_argument("out", type=str, help="Output file path (e.g. schedule.ics)")

    p_swipe = sub.add_parser("swipe", help="Interactive swipe deck")
    p_swipe.add_argument("--type", action="append", choices=EVENT_TYPES, help="Only this type (repeatable)")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, loads events and selection once,
    dispatches to command handlers, and exits via SystemExit.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = load_settings()
    _setup_logging(logging.DEBUG if args.verbose else settings.log_level)

    source = args.source or settings.source
    state_path = Path(args.state).expanduser() if args.state else settings.state_path

    catalog = EventCatalog.load(source)
    if catalog.load_error:
        print(f"Could not load events: {catalog.load_error}")
    selection = SelectionStore.from_path(state_path)

    if args.command == "events":
        raise SystemExit(_cmd_events(args, catalog, selection))
    if args.command == "show":
        raise SystemExit(_cmd_show(args, catalog))
    if args.command in ("interested", "skip"):
        raise SystemExit(_cmd_mark(args, catalog, selection))
    if args.command == "remove":
        raise SystemExit(_cmd_remove(args, selection))
    if args.command == "agenda":
        raise SystemExit(_cmd_agenda(args, catalog, selection))
    if args.command == "conflicts":
        raise SystemExit(_cmd_conflicts(args, catalog, selection))
    if args.command == "export":
        raise SystemExit(_cmd_export(args, catalog, selection))

    if args.command == "swipe":
        from confswipe.interactive import run_swipe

        types = set(args.type) if args.type else None
        run_swipe(catalog, selection, types=types)
        raise SystemExit(0)

    raise SystemExit(2)
