"""
Calendar Grid - date keys and the rolling week grid.

Every calendar day on the display is identified by a "date key", the
YYYY-MM-DD string of its *local* calendar date in the display timezone.
Timestamps are converted to the display timezone before the date is taken,
so an event at 00:30 local time never lands on the previous day because
its UTC form still reads the day before.

The grid itself is a fixed number of weeks of 7 days, starting at the
beginning of the week that contains the anchor date.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import List, Optional

# Python's date.weekday() is Monday=0; the display counts Sunday=0.
SUNDAY = 0
SATURDAY = 6


def local_date(value: date, tz: Optional[tzinfo] = None) -> date:
    """
    Return the local calendar date of a date or timestamp.

    Aware timestamps are converted to `tz` first; naive timestamps are
    taken to already be local.
    """
    if isinstance(value, datetime):
        if tz is not None and value.tzinfo is not None:
            value = value.astimezone(tz)
        return value.date()
    return value


def date_key(value: date, tz: Optional[tzinfo] = None) -> str:
    """Canonical YYYY-MM-DD bucketing key from local calendar components."""
    day = local_date(value, tz)
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def sunday_based_weekday(day: date) -> int:
    """Weekday with Sunday=0 ... Saturday=6."""
    return (day.weekday() + 1) % 7


@dataclass(frozen=True)
class DayDescriptor:
    """
    One cell of the week grid.

    weekday_index is relative to the configured week start (0 = first
    column); calendar_weekday is absolute (Sunday=0).
    """
    date: date
    date_key: str
    weekday_index: int
    calendar_weekday: int

    @property
    def is_sunday(self) -> bool:
        return self.calendar_weekday == SUNDAY

    @property
    def is_saturday(self) -> bool:
        return self.calendar_weekday == SATURDAY

    @property
    def is_weekend(self) -> bool:
        return self.is_sunday or self.is_saturday

    @property
    def is_week_start(self) -> bool:
        return self.weekday_index == 0


def week_start_for(anchor: date, week_start: int = SUNDAY) -> date:
    """First day of the week containing `anchor`."""
    offset = (sunday_based_weekday(anchor) - week_start) % 7
    return anchor - timedelta(days=offset)


def build_week_grid(
    anchor: date,
    week_count: int = 4,
    week_start: int = SUNDAY,
) -> List[List[DayDescriptor]]:
    """
    Build `week_count` consecutive weeks of 7 day descriptors.

    Args:
        anchor: Any date within the first week to show
        week_count: Number of weeks (rows)
        week_start: Calendar weekday of the first column (Sunday=0)

    Returns:
        A list of weeks, each a list of 7 DayDescriptor in date order
    """
    if isinstance(anchor, datetime):
        anchor = anchor.date()

    current = week_start_for(anchor, week_start)
    weeks: List[List[DayDescriptor]] = []

    for _ in range(week_count):
        days = []
        for index in range(7):
            days.append(
                DayDescriptor(
                    date=current,
                    date_key=date_key(current),
                    weekday_index=index,
                    calendar_weekday=sunday_based_weekday(current),
                )
            )
            current += timedelta(days=1)
        weeks.append(days)

    return weeks


def weekday_labels(week_start: int = SUNDAY) -> List[str]:
    """Japanese weekday header labels, rotated to the configured week start."""
    labels = ["日", "月", "火", "水", "木", "金", "土"]
    return labels[week_start:] + labels[:week_start]
