"""Days-since and recurrence statistics for tracked events.

Pure functions that turn a flat list of occurrences into per-event
statistics. No side effects, no DB access - accepts raw data as input.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from since_when.errors import DataFormatError, InvalidDateError


@dataclass(frozen=True)
class Occurrence:
    event_name: str
    date: date


def parse_date(d: str) -> date:
    """Parse a YYYY-MM-DD string to a date object."""
    try:
        return date.fromisoformat(d)
    except (TypeError, ValueError) as exc:
        raise DataFormatError(f"Invalid date: {d!r}") from exc


def get_date(year: int, month: int, day: int) -> date:
    """Build a date, raising InvalidDateError for impossible dates (e.g. Feb 30)."""
    try:
        return date(year, month, day)
    except (TypeError, ValueError) as exc:
        raise InvalidDateError(f"Invalid date: {year}-{month}-{day}") from exc


def last_day_of_month(year: int, month: int) -> int:
    """Return the number of days in a month."""
    get_date(year, month, 1)
    if month == 12:
        return 31
    return (get_date(year, month + 1, 1) - timedelta(days=1)).day


def _reference_date(now: date | str | None) -> date:
    if now is None:
        return date.today()
    if isinstance(now, str):
        return parse_date(now)
    return now


def get_days_since_now(
    occurrences: list[Occurrence], now: date | str | None = None
) -> dict[str, list[int]]:
    """Days since each occurrence, grouped by event name.

    Each event's list is sorted ascending, so index 0 is the most recent
    occurrence. Future dates yield negative counts.
    """
    ref = _reference_date(now)
    days_since: dict[str, list[int]] = {}
    for occ in occurrences:
        days = (ref - occ.date).days
        days_since[occ.event_name] = days_since.get(occ.event_name, []) + [days]
    return {name: sorted(days) for name, days in days_since.items()}


def get_elapsed_days(days_since: dict[str, list[int]]) -> dict[str, list[int]]:
    """Days between consecutive occurrences of each event.

    Events with fewer than two occurrences are left out.

    {"a": [1, 11, 22, 33, 44]} -> {"a": [10, 11, 11, 11]}
    """
    return {
        name: [days[i + 1] - days[i] for i in range(len(days) - 1)]
        for name, days in days_since.items()
        if len(days) >= 2
    }


def _truncating_div(total: int, count: int) -> int:
    """Integer division rounding toward zero: -7 / 2 -> -3."""
    quotient = abs(total) // abs(count)
    return quotient if (total >= 0) == (count > 0) else -quotient


def get_averages(elapsed: dict[str, list[int]]) -> dict[str, int]:
    """Average gap per event, truncated toward zero.

    [10, 11, 11, 11] -> 10
    """
    return {
        name: _truncating_div(sum(gaps), len(gaps))
        for name, gaps in elapsed.items()
        if gaps
    }


def sort_events(
    days_since: dict[str, list[int]], averages: dict[str, int]
) -> list[tuple[str, int, int]]:
    """Return (name, days_since_last, average) sorted by most recent first.

    Events without an average get 0. Ties are ordered by name.
    """
    rows = [
        (name, days[0], averages.get(name, 0))
        for name, days in days_since.items()
        if days
    ]
    return sorted(rows, key=lambda row: (row[1], row[0]))


def event_details(
    occurrences: list[Occurrence], now: date | str | None = None
) -> list[tuple[str, int, int]]:
    """Run the full pipeline: days since -> gaps -> averages -> sorted rows."""
    days_since = get_days_since_now(occurrences, _reference_date(now))
    averages = get_averages(get_elapsed_days(days_since))
    return sort_events(days_since, averages)


def summarize(
    occurrences: list[Occurrence], now: date | str | None = None
) -> list[dict]:
    """Like event_details, but as dicts with average=None when there is no gap yet.

    Also reports the occurrence count and the date of the latest occurrence.
    """
    ref = _reference_date(now)
    days_since = get_days_since_now(occurrences, ref)
    averages = get_averages(get_elapsed_days(days_since))
    return [
        {
            "name": name,
            "days_since": days,
            "average": averages.get(name),
            "occurrences": len(days_since[name]),
            "last_date": (ref - timedelta(days=days)).isoformat(),
        }
        for name, days, _ in sort_events(days_since, averages)
    ]
