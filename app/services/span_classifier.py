"""
Span Classifier - decide whether an event is a multi-day span on a given day.

The answer is read off the bucket map itself: an event is multi-day when
its id appears under more than one date key. The scan is repeated on every
render because the event list is replaced on every refresh.

The classifier knows nothing about the visible window. An event whose real
start lies before the first grid day is *not* flagged as starting there;
the renderer handles that with the week-start flag instead.
"""

from dataclasses import dataclass
from typing import List

from app.schemas.calendar import Event
from app.services.event_bucketer import DayBuckets


@dataclass(frozen=True)
class SpanInfo:
    """Span position of one event on one day."""
    is_multi_day: bool
    is_span_start: bool
    is_span_end: bool


SINGLE_DAY = SpanInfo(is_multi_day=False, is_span_start=False, is_span_end=False)


def occupied_date_keys(buckets: DayBuckets, event_id: str) -> List[str]:
    """Sorted date keys whose bucket holds an event with this id."""
    return sorted(
        key for key, events in buckets.items()
        if any(candidate.id == event_id for candidate in events)
    )


def classify_span(buckets: DayBuckets, event: Event, day_key: str) -> SpanInfo:
    """
    Classify `event` as rendered on `day_key`.

    YYYY-MM-DD keys sort lexicographically in date order, so the span's
    first and last days are the smallest and largest keys found.
    """
    keys = occupied_date_keys(buckets, event.id)

    if len(keys) <= 1:
        return SINGLE_DAY

    return SpanInfo(
        is_multi_day=True,
        is_span_start=day_key == keys[0],
        is_span_end=day_key == keys[-1],
    )
