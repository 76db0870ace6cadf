"""
JMA Weather Client - weekly forecast from the Japan Meteorological Agency.

Data Flow:
==========
1. Fetch the "regular" Atom feed of recently published XML documents
2. Pick the entry whose content mentions the target forecast
   (e.g., "神奈川県府県週間天気予報") and follow its link
3. Fetch the forecast document and read the area forecast section
   (MeteorologicalInfos type="区域予報")
4. For each TimeDefine (one per forecast day) collect Weather,
   WeatherCode, ProbabilityOfPrecipitation and ReliabilityClass by refID

Both documents are parsed with BeautifulSoup's "xml" (lxml) builder, which
matches tags by local name, so the JMA namespace prefixes need no mapping.
"""

import logging
from typing import List, Optional, Union

import httpx
from bs4 import BeautifulSoup

from app.core.config import settings
from app.environments.jma.schemas import WeatherForecast


logger = logging.getLogger("wallcal.environments.jma")

AREA_FORECAST_TYPE = "区域予報"


class WeatherFetchError(Exception):
    """Raised when the forecast cannot be fetched or parsed."""
    pass


# ---------------------------------------------------------------------------
# PARSING
# ---------------------------------------------------------------------------


def find_forecast_url(feed_xml: Union[str, bytes], target_area: str) -> str:
    """
    Find the link of the first feed entry whose content mentions `target_area`.

    Raises:
        WeatherFetchError: If no entry matches
    """
    soup = BeautifulSoup(feed_xml, "xml")

    for entry in soup.find_all("entry"):
        content = entry.find("content")
        if content is None or target_area not in content.get_text():
            continue
        link = entry.find("link")
        if link is not None and link.get("href"):
            return link["href"]

    raise WeatherFetchError(f"{target_area}が見つかりませんでした")


def _ref_text(series, tag: str, time_id: str) -> Optional[str]:
    node = series.find(tag, attrs={"refID": time_id})
    if node is None:
        return None
    text = node.get_text().strip()
    return text or None


def parse_forecast(forecast_xml: Union[str, bytes]) -> List[WeatherForecast]:
    """
    Parse the area forecast section of a weekly forecast document.

    Days missing either the weather text or the weather code are skipped.

    Raises:
        WeatherFetchError: If the area forecast section is missing
    """
    soup = BeautifulSoup(forecast_xml, "xml")

    area_forecast = soup.find("MeteorologicalInfos", attrs={"type": AREA_FORECAST_TYPE})
    if area_forecast is None:
        raise WeatherFetchError(f"{AREA_FORECAST_TYPE}が見つかりませんでした")

    series_list = area_forecast.find_all("TimeSeriesInfo")
    if not series_list:
        return []

    forecasts = []
    for time_define in series_list[0].find_all("TimeDefine"):
        time_id = time_define.get("timeId")
        date_time = time_define.find("DateTime")
        if not time_id or date_time is None:
            continue

        values = {
            "Weather": None,
            "WeatherCode": None,
            "ProbabilityOfPrecipitation": None,
            "ReliabilityClass": None,
        }
        # Later series override earlier ones.
        for series in series_list:
            for tag in values:
                text = _ref_text(series, tag, time_id)
                if text is not None:
                    values[tag] = text

        if not values["Weather"] or not values["WeatherCode"]:
            continue

        forecasts.append(
            WeatherForecast(
                date=date_time.get_text().strip().split("T")[0],
                weather=values["Weather"],
                weather_code=values["WeatherCode"],
                probability_of_precipitation=values["ProbabilityOfPrecipitation"],
                reliability_class=values["ReliabilityClass"],
            )
        )

    return forecasts


# ---------------------------------------------------------------------------
# CLIENT
# ---------------------------------------------------------------------------


class JMAWeatherClient:
    """
    Fetches and parses the weekly forecast for one prefecture.

    Example:
        client = JMAWeatherClient()
        forecasts = await client.fetch_forecast()
    """

    def __init__(
        self,
        feed_url: Optional[str] = None,
        target_area: Optional[str] = None,
        timeout: float = 30.0,
    ):
        self.feed_url = feed_url or settings.WEATHER_FEED_URL
        self.target_area = target_area or settings.WEATHER_TARGET_AREA
        self.timeout = timeout

    async def _get_document(self, client: httpx.AsyncClient, url: str) -> bytes:
        try:
            response = await client.get(url, timeout=self.timeout)
        except httpx.RequestError as e:
            logger.error(f"Network error fetching {url}: {e}")
            raise WeatherFetchError(f"Network error: {e}")

        if response.status_code != 200:
            logger.error(f"JMA returned {response.status_code} for {url}")
            raise WeatherFetchError(f"Request failed with status {response.status_code}")

        return response.content

    async def fetch_forecast(self) -> List[WeatherForecast]:
        """
        Fetch the current weekly forecast.

        Raises:
            WeatherFetchError: On network errors, non-200 responses, a missing
                target entry or a missing area forecast section
        """
        async with httpx.AsyncClient() as client:
            feed_xml = await self._get_document(client, self.feed_url)
            forecast_url = find_forecast_url(feed_xml, self.target_area)

            logger.info(f"Fetching forecast document {forecast_url}")

            forecast_xml = await self._get_document(client, forecast_url)

        forecasts = parse_forecast(forecast_xml)

        logger.info(f"Parsed {len(forecasts)} forecast days")

        return forecasts
