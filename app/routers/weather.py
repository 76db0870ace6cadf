"""
Weather router - weekly forecast as JSON.

Response (200):
{
    "success": true,
    "data": [
        {"date": "2024-06-10", "weather": "晴れ時々くもり", "weatherCode": "101",
         "emoji": "☀️☁️", "precipitationProbability": "20", "reliability": "A"}
    ],
    "lastUpdated": "2024-06-10T00:00:00+00:00"
}

Response (500):
{"success": false, "error": {"code": "WEATHER_FETCH_ERROR", "message": "..."}}
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.deps import get_weather_service
from app.services.weather_service import WeatherFetchError, WeatherService


logger = logging.getLogger("wallcal.routers.weather")

router = APIRouter(prefix="/api/weather", tags=["weather"])

WEATHER_FETCH_ERROR = "WEATHER_FETCH_ERROR"
WEATHER_FETCH_MESSAGE = "天気予報データの取得に失敗しました"


@router.get("")
async def get_weather(
    weather: WeatherService = Depends(get_weather_service),
):
    try:
        entries = await weather.get_entries()
    except WeatherFetchError as e:
        logger.error(f"Weather API error: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "error": {"code": WEATHER_FETCH_ERROR, "message": WEATHER_FETCH_MESSAGE},
            },
        )

    return {
        "success": True,
        "data": [
            {
                "date": entry.date_key,
                "weather": entry.weather,
                "weatherCode": entry.weather_code,
                "emoji": entry.emoji_text,
                "precipitationProbability": entry.precipitation_probability,
                "reliability": entry.reliability_class,
            }
            for entry in entries
        ],
        "lastUpdated": datetime.now(timezone.utc).isoformat(),
    }
