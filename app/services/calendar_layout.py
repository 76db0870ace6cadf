"""
Calendar Layout - assemble the full display grid for one render.

Pipeline:
    events ──► bucket_events ──► per-day buckets
    anchor ──► build_week_grid ──► weeks of DayDescriptor
    for each day: order_day_events (classify + sort + lanes)
                  weather_for_day
                  holiday / today flags

The result is recomputed from scratch on every render and never stored.
"""

from dataclasses import dataclass, field
from datetime import date, tzinfo
from typing import Any, Dict, Iterable, List, Optional, Set

from app.schemas.calendar import Event, WeatherEntry
from app.services.calendar_grid import DayDescriptor, build_week_grid
from app.services.day_ordering import DayEventView, order_day_events
from app.services.event_bucketer import bucket_events
from app.services.weather_overlay import index_weather, weather_for_day

HOLIDAY_MARKER = "holiday"


@dataclass
class DayCell:
    """Everything the renderer needs for one grid cell."""
    day: DayDescriptor
    events: List[DayEventView] = field(default_factory=list)
    weather: Optional[WeatherEntry] = None
    is_holiday: bool = False
    is_today: bool = False


def is_holiday_source(source_id: str, holiday_sources: Optional[Set[str]] = None) -> bool:
    """Holiday calendars are recognised by id substring or explicit config flag."""
    if holiday_sources and source_id in holiday_sources:
        return True
    return HOLIDAY_MARKER in source_id


def build_calendar_view(
    events: Iterable[Event],
    weather: Iterable[WeatherEntry],
    anchor: date,
    week_count: int = 4,
    week_start: int = 0,
    tz: Optional[tzinfo] = None,
    today: Optional[date] = None,
    holiday_sources: Optional[Set[str]] = None,
) -> List[List[DayCell]]:
    """
    Build the weeks of day cells for the display.

    Args:
        events: Current event list (replaced wholesale on refresh)
        weather: Current sparse weather entries
        anchor: Any date in the first week to show
        week_count: Number of week rows
        week_start: Calendar weekday of the first column (Sunday=0)
        tz: Display timezone
        today: Date to highlight (defaults to anchor)
        holiday_sources: Calendar ids flagged as holiday calendars in config

    Returns:
        List of weeks, each a list of 7 DayCell
    """
    buckets = bucket_events(events, tz)
    weather_by_date = index_weather(weather)
    today = today or anchor

    weeks = []
    for week in build_week_grid(anchor, week_count, week_start):
        cells = []
        for day in week:
            views = order_day_events(buckets, day.date_key, day.is_week_start, tz)
            cells.append(
                DayCell(
                    day=day,
                    events=views,
                    weather=weather_for_day(day, weather_by_date),
                    is_holiday=any(
                        is_holiday_source(view.event.source_id, holiday_sources)
                        for view in views
                    ),
                    is_today=day.date == today,
                )
            )
        weeks.append(cells)

    return weeks


def serialize_calendar_view(weeks: List[List[DayCell]]) -> List[List[Dict[str, Any]]]:
    """JSON-ready form of the grid for the /api/calendar/grid endpoint."""
    result = []
    for week in weeks:
        row = []
        for cell in week:
            row.append({
                "date": cell.day.date_key,
                "weekdayIndex": cell.day.weekday_index,
                "isSunday": cell.day.is_sunday,
                "isSaturday": cell.day.is_saturday,
                "isWeekend": cell.day.is_weekend,
                "isHoliday": cell.is_holiday,
                "isToday": cell.is_today,
                "weather": cell.weather.model_dump(by_alias=True) if cell.weather else None,
                "events": [
                    {
                        "id": view.event.id,
                        "title": view.event.title,
                        "color": view.event.color,
                        "allDay": view.event.all_day,
                        "isMultiDay": view.is_multi_day,
                        "isStart": view.is_span_start,
                        "isEnd": view.is_span_end,
                        "order": view.render_order,
                        "lane": view.lane_key,
                        "showTime": view.show_time,
                        "showTitle": view.show_title,
                    }
                    for view in cell.events
                ],
            })
        result.append(row)
    return result
