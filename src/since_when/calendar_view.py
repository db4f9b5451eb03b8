"""Month grid for picking occurrence dates."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from since_when.since import get_date, last_day_of_month

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

WEEKDAY_HEADERS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

GRID_ROWS = 6
GRID_COLS = 7


@dataclass(frozen=True)
class MonthView:
    year: int
    month: int

    @classmethod
    def for_date(cls, d: date | None = None) -> MonthView:
        d = d or date.today()
        return cls(year=d.year, month=d.month)

    @property
    def title(self) -> str:
        return f"{MONTH_NAMES[self.month - 1]} - {self.year}"

    def next_month(self) -> MonthView:
        if self.month == 12:
            return MonthView(year=self.year + 1, month=1)
        return MonthView(year=self.year, month=self.month + 1)

    def previous_month(self) -> MonthView:
        if self.month == 1:
            return MonthView(year=self.year - 1, month=12)
        return MonthView(year=self.year, month=self.month - 1)

    def grid(self) -> list[list[int]]:
        return month_grid(self.year, self.month)


def month_grid(year: int, month: int) -> list[list[int]]:
    """Return a 6x7 grid of day numbers, weeks starting on Sunday.

    Cells outside the month are 0.
    """
    first = get_date(year, month, 1)
    # date.weekday() is Monday=0; shift so Sunday=0
    offset = (first.weekday() + 1) % 7
    length = last_day_of_month(year, month)

    cells = [0] * (GRID_ROWS * GRID_COLS)
    for day in range(1, length + 1):
        cells[offset + day - 1] = day
    return [cells[i:i + GRID_COLS] for i in range(0, len(cells), GRID_COLS)]


def annotate_grid(
    grid: list[list[int]], events_by_day: dict[int, list[str]]
) -> list[list[tuple[int, list[str]]]]:
    """Attach the events that occurred on each day to its grid cell."""
    return [
        [(day, sorted(events_by_day.get(day, [])) if day else []) for day in week]
        for week in grid
    ]
