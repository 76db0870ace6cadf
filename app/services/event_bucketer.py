"""
Event Bucketer - assign every event to each calendar day it occupies.

Rules:
- start/end are reduced to local calendar dates (see calendar_grid.date_key)
- all-day events use Google's exclusive end, so one day is taken off
- single-day events land in exactly one bucket
- multi-day events land in every day from start to end inclusive; the walk
  steps calendar dates, so a DST change can never skip or repeat a day
- an inverted range (end before start) is shown on its start day only
"""

import logging
from datetime import date, timedelta, tzinfo
from typing import Dict, Iterable, List, Optional, Tuple

from app.schemas.calendar import Event
from app.services.calendar_grid import date_key, local_date

logger = logging.getLogger("wallcal.services.event_bucketer")


DayBuckets = Dict[str, List[Event]]


def event_day_range(event: Event, tz: Optional[tzinfo] = None) -> Tuple[date, date]:
    """
    Inclusive (first_day, last_day) of an event in local calendar dates.

    A missing end is treated as ending on the start day. The returned
    last_day may precede first_day for malformed events; callers decide
    how to degrade.
    """
    first_day = local_date(event.start, tz)

    if event.end is None:
        return first_day, first_day

    last_day = local_date(event.end, tz)
    if event.all_day:
        last_day -= timedelta(days=1)

    return first_day, last_day


def bucket_events(events: Iterable[Event], tz: Optional[tzinfo] = None) -> DayBuckets:
    """
    Map each date key to the events that must render on that day.

    Args:
        events: Flat event list (order irrelevant)
        tz: Display timezone used to localise aware timestamps

    Returns:
        Dict of date key -> list of events; days without events are absent
    """
    buckets: DayBuckets = {}

    for event in events:
        first_day, last_day = event_day_range(event, tz)

        if last_day < first_day:
            logger.warning(
                f"Event {event.id!r} ends before it starts "
                f"({first_day.isoformat()} > {last_day.isoformat()}); showing start day only"
            )
            last_day = first_day

        current = first_day
        while current <= last_day:
            buckets.setdefault(date_key(current), []).append(event)
            current += timedelta(days=1)

    return buckets
