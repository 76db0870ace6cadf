"""
JMA Module - weekly weather forecast from the Japan Meteorological Agency XML feed.
"""

from app.environments.jma.client import (
    JMAWeatherClient,
    WeatherFetchError,
    find_forecast_url,
    parse_forecast,
)
from app.environments.jma.codes import weather_code_to_emoji
from app.environments.jma.schemas import WeatherForecast

__all__ = [
    "JMAWeatherClient",
    "WeatherFetchError",
    "WeatherForecast",
    "find_forecast_url",
    "parse_forecast",
    "weather_code_to_emoji",
]
