"""
Weather Service - cached weekly forecast as display weather entries.

The JMA feed changes a few times a day, so results are cached for
WEATHER_CACHE_SECONDS (10 minutes by default). A failed fetch is not
cached and propagates as WeatherFetchError.
"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Callable, List, Optional

from app.core.config import settings
from app.environments.jma import JMAWeatherClient, WeatherFetchError, WeatherForecast
from app.environments.jma.codes import weather_code_to_emoji
from app.schemas.calendar import WeatherEntry


logger = logging.getLogger("wallcal.services.weather")

__all__ = ["WeatherService", "WeatherFetchError", "to_weather_entry", "weather_service"]


def to_weather_entry(forecast: WeatherForecast) -> WeatherEntry:
    return WeatherEntry(
        date_key=forecast.date,
        emoji=weather_code_to_emoji(forecast.weather_code),
        weather=forecast.weather,
        weather_code=forecast.weather_code,
        precipitation_probability=forecast.probability_of_precipitation,
        reliability_class=forecast.reliability_class,
    )


class WeatherService:
    def __init__(
        self,
        client: Optional[JMAWeatherClient] = None,
        cache_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._client = client
        self.cache_seconds = (
            cache_seconds if cache_seconds is not None else settings.WEATHER_CACHE_SECONDS
        )
        self._clock = clock
        self._cached: Optional[List[WeatherEntry]] = None
        self._cached_at: Optional[float] = None
        self._lock = asyncio.Lock()
        self.last_fetched: Optional[datetime] = None

    @property
    def client(self) -> JMAWeatherClient:
        if self._client is None:
            self._client = JMAWeatherClient()
        return self._client

    def _cache_valid(self) -> bool:
        return (
            self._cached is not None
            and self._cached_at is not None
            and self._clock() - self._cached_at < self.cache_seconds
        )

    async def get_entries(self) -> List[WeatherEntry]:
        """
        Current forecast as weather entries, served from cache when fresh.

        Raises:
            WeatherFetchError: If the forecast cannot be fetched or parsed
        """
        async with self._lock:
            if self._cache_valid():
                return list(self._cached)

            forecasts = await self.client.fetch_forecast()
            entries = [to_weather_entry(forecast) for forecast in forecasts]

            self._cached = entries
            self._cached_at = self._clock()
            self.last_fetched = datetime.now(timezone.utc)
            logger.info(f"Weather cache refreshed with {len(entries)} days")

            return list(entries)

    def invalidate(self) -> None:
        self._cached = None
        self._cached_at = None


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------
weather_service = WeatherService()
