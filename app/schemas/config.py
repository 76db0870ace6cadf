"""
Display configuration schemas - which calendars to show and how.

Stored as JSON at DATA_DIR/calendars.json with camelCase keys:
{
    "calendars": [
        {"id": "family@group.calendar.google.com", "name": "Family", "color": "#4a90d9"},
        {"id": "ja.japanese#holiday@group.v.calendar.google.com", "name": "祝日",
         "color": "#d32f2f", "isHoliday": true}
    ],
    "display": {"weekStart": 0, "language": "ja-JP", "timezone": "Asia/Tokyo"}
}
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class CalendarSource(BaseModel):
    """One Google calendar shown on the display."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1, description="Google calendar id")
    name: str = Field(..., min_length=1, description="Label shown in admin")
    color: str = Field(..., min_length=1, description="Bar color for its events")
    is_holiday: bool = Field(False, alias="isHoliday", description="Marks days red")


class DisplaySettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    week_start: int = Field(0, alias="weekStart", ge=0, le=6, description="Sunday=0")
    language: str = Field("ja-JP", min_length=1)
    timezone: str = Field("Asia/Tokyo", min_length=1)


class DisplayConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    calendars: List[CalendarSource] = Field(default_factory=list)
    display: DisplaySettings = Field(default_factory=DisplaySettings)

    def holiday_source_ids(self) -> set:
        return {source.id for source in self.calendars if source.is_holiday}

    def color_for(self, calendar_id: str):
        for source in self.calendars:
            if source.id == calendar_id:
                return source.color
        return None
