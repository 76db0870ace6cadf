"""
Calendar schemas - Pydantic models for events and weather shown on the display.

These are the records the layout engine consumes. They are produced by the
Google Calendar and JMA weather integrations and replaced wholesale on every
refresh; nothing in the layout engine mutates them.
"""

from datetime import date, datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# A start/end value is either a calendar date (all-day) or a timestamp (timed).
EventMoment = Union[datetime, date]


def parse_event_moment(value):
    """
    Parse "YYYY-MM-DD" as a date and anything longer as an ISO timestamp.

    Pydantic's own union handling would happily coerce "2024-06-10" into a
    midnight datetime, which loses the all-day distinction.
    """
    if isinstance(value, str):
        text = value.strip()
        if len(text) == 10 and "T" not in text:
            return date.fromisoformat(text)
        return datetime.fromisoformat(text)
    return value


class Event(BaseModel):
    """
    A single calendar event, already expanded from any recurrence.

    Example:
    {
        "id": "abc123",
        "title": "Field trip",
        "start": "2024-06-10",
        "end": "2024-06-13",
        "allDay": true,
        "calendarId": "family@group.calendar.google.com",
        "color": "#4a90d9"
    }

    For all-day events `end` is exclusive: a one-day event has
    end == start + 1 day.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(..., description="Identifier, unique within a fetch batch")
    title: str = Field("", description="Display title")
    start: EventMoment = Field(..., description="Start date (all-day) or timestamp")
    end: Optional[EventMoment] = Field(None, description="End date (exclusive for all-day) or timestamp")
    all_day: bool = Field(False, alias="allDay")
    source_id: str = Field("", alias="calendarId", description="Origin calendar id")
    color: Optional[str] = Field(None, description="Display color")

    @field_validator("start", "end", mode="before")
    @classmethod
    def _parse_moment(cls, value):
        return parse_event_moment(value)

    def is_timed(self) -> bool:
        """True when the event carries a time of day."""
        return not self.all_day and isinstance(self.start, datetime)


class WeatherEntry(BaseModel):
    """
    Forecast for one calendar day.

    Sparse: only the days covered by the weekly forecast have an entry.
    """
    model_config = ConfigDict(populate_by_name=True)

    date_key: str = Field(..., alias="date", description="YYYY-MM-DD")
    emoji: List[str] = Field(default_factory=list, description="Ordered glyph sequence")
    weather: Optional[str] = Field(None, description="Forecast text")
    weather_code: Optional[str] = Field(None, alias="weatherCode")
    precipitation_probability: Optional[str] = Field(None, alias="precipitationProbability")
    reliability_class: Optional[str] = Field(None, alias="reliability")

    @property
    def emoji_text(self) -> str:
        return "".join(self.emoji)
