from __future__ import annotations

from typing import AbstractSet, Callable, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from confswipe.model import ConflictAnnotatedEvent, Event
from confswipe.schedule import EventCatalog, build_agenda, swipe_deck
from confswipe.storage import SelectionStore
from confswipe.timeutil import format_date_short, format_time_12h

TYPE_COLORS = {
    "main": "blue",
    "workshop": "green",
    "panel": "yellow",
    "networking": "magenta",
    "breakout": "dark_orange",
    "other": "white",
}


def _event_card(ev: Event, position: int, total: int) -> Panel:
    color = TYPE_COLORS.get(ev.type, "white")
    when = f"{format_date_short(ev.date)}  {format_time_12h(ev.start_time)} - {format_time_12h(ev.end_time)}"

    lines = [
        f"[bold]{escape(ev.title)}[/]",
        f"[{color}]{ev.type}[/]  |  {when}  |  {escape(ev.location)}",
        "",
        escape(ev.description),
    ]
    if ev.speakers:
        lines.append(f"\n[cyan]Speakers:[/] {escape(', '.join(ev.speakers))}")
    if ev.additional_data:
        action = ev.additional_data.get("action")
        link = ev.additional_data.get("action_link")
        if action or link:
            lines.append(f"\n[green]{escape(action or 'Link')}:[/] {escape(link or '')}")
        sponsors = ev.additional_data.get("sponsors")
        if sponsors:
            lines.append(f"[magenta]Sponsors:[/] {escape(sponsors)}")

    return Panel("\n".join(lines), title=f"{position}/{total}", border_style=color, box=box.ROUNDED)


def render_agenda(console: Console, agenda: dict[str, list[ConflictAnnotatedEvent]]) -> None:
    if not agenda:
        console.print("Your schedule is empty.")
        return

    for date, day in agenda.items():
        table = Table(title=f"{format_date_short(date)} ({date})", box=box.SIMPLE)
        table.add_column("Time")
        table.add_column("Event")
        table.add_column("Location")
        table.add_column("Conflicts")
        for item in day:
            ev = item.event
            clash = ", ".join(escape(o.title) for o in item.conflicting_events)
            table.add_row(
                f"{format_time_12h(ev.start_time)} - {format_time_12h(ev.end_time)}",
                f"[bold red]{escape(ev.title)}[/]" if item.has_conflict else escape(ev.title),
                escape(ev.location),
                f"[red]{clash}[/]" if clash else "",
            )
        console.print(table)


def run_swipe(
    catalog: EventCatalog,
    selection: SelectionStore,
    types: Optional[AbstractSet[str]] = None,
    console: Optional[Console] = None,
    input_fn: Optional[Callable[[str], str]] = None,
) -> None:
    """
    Swipe through unrated events one card at a time, then show the agenda.

    Keys: y = interested, n = not interested, s = decide later, q = quit.
    """
    console = console or Console()
    ask = input_fn or console.input

    deck = swipe_deck(catalog.all_events(), selection, types)
    if not deck:
        console.print("No events left to swipe.")
    else:
        console.print(f"{len(deck)} of {len(catalog)} events left to swipe.")
        for i, ev in enumerate(deck, start=1):
            console.print(_event_card(ev, i, len(deck)))
            choice = ""
            while choice not in ("y", "n", "s", "q"):
                choice = ask("(y) interested  (n) not interested  (s) later  (q) quit: ").strip().lower()
            if choice == "q":
                break
            if choice == "y":
                selection.mark_interested(ev.id)
            elif choice == "n":
                selection.mark_not_interested(ev.id)

    console.print(f"\nInterested: {len(selection.interested)} | Not interested: {len(selection.not_interested)}")
    render_agenda(console, build_agenda(catalog.all_events(), selection.interested))
