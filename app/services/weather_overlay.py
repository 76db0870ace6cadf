"""
Weather Overlay - attach forecast entries to grid days by date key.

Plain lookup: a day without an entry simply shows no weather.
"""

from typing import Dict, Iterable, Optional

from app.schemas.calendar import WeatherEntry
from app.services.calendar_grid import DayDescriptor


def index_weather(entries: Iterable[WeatherEntry]) -> Dict[str, WeatherEntry]:
    """Map date key -> entry; a later entry for the same day wins."""
    return {entry.date_key: entry for entry in entries}


def weather_for_day(
    day: DayDescriptor,
    weather_by_date: Dict[str, WeatherEntry],
) -> Optional[WeatherEntry]:
    return weather_by_date.get(day.date_key)
