"""
Day Ordering - render order and lanes for the events of one day cell.

Sort contract (stable):
1. multi-day spans before single-day events
2. all-day before timed
3. start time ascending

Lanes:
Every day is sorted on its own, so a multi-day bar could end up at a
different vertical slot in each column. To keep it steady, multi-day events
get a lane key derived from their id (the same on every day they cover),
while single-day events use 1000 + render order. This is best-effort: two
spans whose ids hash to the same lane still share a slot.
"""

import zlib
from dataclasses import dataclass
from datetime import datetime, time, timezone, tzinfo
from typing import List, Optional

from app.schemas.calendar import Event
from app.services.event_bucketer import DayBuckets
from app.services.span_classifier import SpanInfo, classify_span

# Multi-day lanes live in [0, SINGLE_DAY_LANE_BASE); single-day lanes above it.
SINGLE_DAY_LANE_BASE = 1000


@dataclass(frozen=True)
class DayEventView:
    """An event as it renders inside one day cell."""
    event: Event
    is_multi_day: bool
    is_span_start: bool
    is_span_end: bool
    render_order: int
    lane_key: int
    is_week_start: bool = False

    @property
    def show_time(self) -> bool:
        """Time label only on the first visible occurrence of a timed event."""
        return self.event.is_timed() and (not self.is_multi_day or self.is_span_start)

    @property
    def show_title(self) -> bool:
        """Span titles repeat at the start of each week row the bar crosses."""
        return not self.is_multi_day or self.is_span_start or self.is_week_start

    @property
    def continuation_class(self) -> str:
        """CSS class describing this day's piece of a multi-day bar."""
        if not self.is_multi_day:
            return ""
        if self.is_span_start:
            return "multi-day-start"
        if self.is_span_end:
            return "multi-day-end"
        return "multi-day-middle"


def span_lane_key(event_id: str) -> int:
    """Stable lane for a multi-day event, independent of the day it is drawn on."""
    if not event_id:
        return 0
    return zlib.crc32(event_id.encode("utf-8")) % SINGLE_DAY_LANE_BASE


def start_instant(event: Event, tz: Optional[tzinfo] = None) -> datetime:
    """All-day dates and naive timestamps become comparable aware datetimes."""
    tz = tz or timezone.utc
    start = event.start
    if not isinstance(start, datetime):
        return datetime.combine(start, time.min, tzinfo=tz)
    if start.tzinfo is None:
        return start.replace(tzinfo=tz)
    return start


def sort_key(span: SpanInfo, event: Event, tz: Optional[tzinfo] = None):
    return (not span.is_multi_day, not event.all_day, start_instant(event, tz))


def order_day_events(
    buckets: DayBuckets,
    day_key: str,
    is_week_start: bool = False,
    tz: Optional[tzinfo] = None,
) -> List[DayEventView]:
    """
    Build the ordered views for the events bucketed on `day_key`.

    Args:
        buckets: Output of bucket_events for the whole event list
        day_key: Date key of the cell being rendered
        is_week_start: True for the first column of a grid row
        tz: Display timezone, used to compare naive and aware starts

    Returns:
        Views in render order with render_order and lane_key assigned
    """
    events = buckets.get(day_key, [])
    classified = [(classify_span(buckets, event, day_key), event) for event in events]
    classified.sort(key=lambda pair: sort_key(pair[0], pair[1], tz))

    views = []
    for index, (span, event) in enumerate(classified):
        if span.is_multi_day:
            lane = span_lane_key(event.id)
        else:
            lane = SINGLE_DAY_LANE_BASE + index

        views.append(
            DayEventView(
                event=event,
                is_multi_day=span.is_multi_day,
                is_span_start=span.is_span_start,
                is_span_end=span.is_span_end,
                render_order=index,
                lane_key=lane,
                is_week_start=is_week_start,
            )
        )

    return views
