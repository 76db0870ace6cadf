"""
JMA Schemas - Parsed rows of the weekly prefecture forecast.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class WeatherForecast(BaseModel):
    """
    One forecast day from the JMA weekly forecast.

    Example:
    {
        "date": "2024-06-10",
        "weather": "晴れ時々くもり",
        "weatherCode": "101",
        "probabilityOfPrecipitation": "20",
        "reliabilityClass": "A"
    }
    """
    model_config = ConfigDict(populate_by_name=True)

    date: str = Field(..., description="YYYY-MM-DD of the forecast day")
    weather: str = Field(..., description="Forecast text")
    weather_code: str = Field(..., alias="weatherCode")
    probability_of_precipitation: Optional[str] = Field(None, alias="probabilityOfPrecipitation")
    reliability_class: Optional[str] = Field(None, alias="reliabilityClass")
