"""Rich terminal display for since-when."""

from __future__ import annotations

from datetime import date

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from since_when.calendar_view import WEEKDAY_HEADERS, MonthView, annotate_grid

console = Console()

NO_AVERAGE = "---"


def format_days(n: int) -> str:
    """1 -> '1 day', 3 -> '3 days', 0 -> '0 days'."""
    return f"{n} day" if n == 1 else f"{n} days"


def format_ago(n: int) -> str:
    """Render days since an occurrence: 1 -> "1 day ago", -2 -> "in 2 days"."""
    if n < 0:
        return f"in {format_days(-n)}"
    return f"{format_days(n)} ago"


def format_average(average: int | None) -> str:
    """Render an average gap, or the placeholder when there is none yet."""
    if average is None:
        return NO_AVERAGE
    return format_days(average)


def print_events(rows: list[dict]) -> None:
    """Print tracked events, most recent first.

    rows: dicts with name, days_since, average (None = no average yet).
    """
    if not rows:
        print_no_events_message()
        return

    table = Table(
        title="Since When?",
        box=box.ROUNDED,
        border_style="purple",
        show_header=True,
        header_style="bold",
    )
    table.add_column("Event", style="bold magenta", justify="right")
    table.add_column("Days Since", justify="center")
    table.add_column("Average", justify="center")

    for row in rows:
        days = row.get("days_since", 0)
        style = "yellow" if days < 0 else None
        table.add_row(
            row["name"],
            format_ago(days),
            format_average(row.get("average")),
            style=style,
        )

    console.print(table)


def print_no_events_message() -> None:
    """Print message when no events are tracked yet."""
    panel = Panel(
        "\n  No events yet. Run [bold]since-when add <name>[/] to start tracking one.\n",
        title="[bold]SINCE WHEN[/]",
        box=box.ROUNDED,
        border_style="grey50",
        width=60,
    )
    console.print(panel)


def print_calendar(
    view: MonthView, events_by_day: dict[int, list[str]], today: date | None = None
) -> None:
    """Print a month grid; days with occurrences are highlighted and listed below."""
    today = today or date.today()
    table = Table(
        title=f"[bold]{view.title}[/]",
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold",
    )
    for header in WEEKDAY_HEADERS:
        table.add_column(header, justify="right", width=4)

    for week in annotate_grid(view.grid(), events_by_day):
        if all(day == 0 for day, _ in week):
            continue
        cells: list[str] = []
        for day, names in week:
            if day == 0:
                cells.append("")
                continue
            label = str(day)
            if names:
                label = f"[bold magenta]{day}*[/]"
            if (view.year, view.month, day) == (today.year, today.month, today.day):
                label = f"[reverse]{label}[/]"
            cells.append(label)
        table.add_row(*cells)

    console.print(table)

    if events_by_day:
        for day in sorted(events_by_day):
            names = ", ".join(sorted(events_by_day[day]))
            console.print(f"  [bold]{day:>2}[/]  {names}")
    else:
        console.print("  [grey50]No occurrences this month.[/]")


def print_event_result(result: dict) -> None:
    """Print the outcome of an add/update/delete command."""
    action = result.get("action", "")
    name = result.get("name", "")
    if action == "add":
        message = f"  Now tracking [bold]{name}[/], first seen {result.get('date')}."
    elif action == "update":
        message = f"  Recorded [bold]{name}[/] on {result.get('date')}."
    else:
        removed = result.get("occurrences_removed", 0)
        message = f"  Deleted [bold]{name}[/] and {removed} occurrence(s)."
    panel = Panel(
        f"\n{message}\n",
        title="[bold]SINCE WHEN[/]",
        box=box.ROUNDED,
        border_style="green",
        width=60,
    )
    console.print(panel)


def print_config(data: dict) -> None:
    """Print the effective configuration."""
    table = Table(box=box.ROUNDED, show_header=True, header_style="bold")
    table.add_column("Setting", style="bold")
    table.add_column("Value")
    for key, value in data.items():
        table.add_row(key, str(value))
    console.print(table)


def print_error(message: str) -> None:
    console.print(f"[red]{message}[/]")
