import requests
from datetime import datetime
import logging
from typing import Any, Dict, Optional

# use .env file to load the API key
import os
from dotenv import load_dotenv
from pydantic import ValidationError

from core.errors import LocationNotFoundError, WeatherServiceUnavailableError
from core.models import SnapshotTemperature, WeatherSnapshot

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

load_dotenv()

DEFAULT_BASE_URL = "http://api.weatherstack.com"
DEFAULT_TIMEOUT_SECONDS = 10

# WeatherStack reports errors in the body with HTTP 200; 615 means the query matched nothing
LOCATION_NOT_FOUND_CODES = {615}
LOCATION_NOT_FOUND_TYPES = {"request_failed"}

# WeatherStack condition codes, grouped into our condition categories
WEATHER_CODE_CONDITIONS = {
    113: "Clear",
    116: "Clouds", 119: "Clouds", 122: "Clouds",
    143: "Mist",
    248: "Fog", 260: "Fog",
    200: "Thunderstorm", 386: "Thunderstorm", 389: "Thunderstorm",
    392: "Thunderstorm", 395: "Thunderstorm",
}
for _code in (176, 185, 263, 266, 281, 284, 293, 296, 299, 302, 305, 308, 311, 314, 353, 356, 359):
    WEATHER_CODE_CONDITIONS[_code] = "Rain"
for _code in (179, 182, 227, 230, 317, 320, 323, 326, 329, 332, 335, 338, 350,
              362, 365, 368, 371, 374, 377):
    WEATHER_CODE_CONDITIONS[_code] = "Snow"

# Checked in order, so "light rain with thunder" lands on Thunderstorm
DESCRIPTION_KEYWORDS = [
    ("thunder", "Thunderstorm"),
    ("snow", "Snow"), ("sleet", "Snow"), ("blizzard", "Snow"), ("ice", "Snow"),
    ("rain", "Rain"), ("drizzle", "Rain"), ("shower", "Rain"),
    ("fog", "Fog"),
    ("mist", "Mist"), ("haze", "Mist"),
    ("cloud", "Clouds"), ("overcast", "Clouds"),
    ("sunny", "Clear"), ("clear", "Clear"),
]


def map_condition(weather_code: Optional[int], description: str) -> str:
    """Turn a WeatherStack code (or, failing that, its description) into one of our condition categories."""
    if weather_code in WEATHER_CODE_CONDITIONS:
        return WEATHER_CODE_CONDITIONS[weather_code]

    lowered = (description or "").lower()
    for keyword, condition in DESCRIPTION_KEYWORDS:
        if keyword in lowered:
            return condition

    logger.warning(f"Unknown weather code {weather_code} / description '{description}', assuming Clouds")
    return "Clouds"


def _parse_localtime(value: Optional[str]) -> datetime:
    if value:
        try:
            return datetime.strptime(value, "%Y-%m-%d %H:%M")
        except ValueError:
            logger.warning(f"Couldn't parse local time '{value}', using now")
    return datetime.now()


class WeatherClient:
    """
    Current-conditions lookup against WeatherStack.

    Every failure leaves here as one of two exceptions: LocationNotFoundError
    when the place isn't recognised, WeatherServiceUnavailableError for
    everything else. No caching and no retries, each call is one request.
    """

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None,
                 timeout: Optional[float] = None):
        self.api_key = api_key or os.getenv("WEATHERSTACK_API_KEY")
        self.base_url = (base_url or os.getenv("WEATHERSTACK_BASE_URL", DEFAULT_BASE_URL)).rstrip("/")
        self.timeout = timeout or float(os.getenv("WEATHER_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS))

        if not self.api_key:
            logger.warning("WEATHERSTACK_API_KEY is not set - weather lookups will fail")

    def _request_current(self, location: str) -> Dict[str, Any]:
        url = f"{self.base_url}/current"
        params = {"access_key": self.api_key, "query": location, "units": "m"}

        try:
            res = requests.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.Timeout:
            logger.error(f"WeatherStack timed out after {self.timeout}s for {location}")
            raise WeatherServiceUnavailableError("Weather service timed out", location)
        except requests.exceptions.RequestException as e:
            logger.error(f"WeatherStack request failed for {location}: {str(e)}")
            raise WeatherServiceUnavailableError(f"Weather service request failed: {str(e)}", location)

        if res.status_code != 200:
            logger.error(f"WeatherStack returned HTTP {res.status_code} for {location}")
            raise WeatherServiceUnavailableError(f"Weather service returned HTTP {res.status_code}", location)

        try:
            data = res.json()
        except ValueError:
            raise WeatherServiceUnavailableError("Weather service returned invalid JSON", location)

        error = data.get("error")
        if data.get("success") is False or error:
            error = error or {}
            info = error.get("info") or "Unable to fetch weather data"
            if error.get("code") in LOCATION_NOT_FOUND_CODES or error.get("type") in LOCATION_NOT_FOUND_TYPES:
                logger.warning(f"WeatherStack couldn't find location '{location}': {info}")
                raise LocationNotFoundError(info, location)
            logger.error(f"WeatherStack error for {location}: {error.get('type')} - {info}")
            raise WeatherServiceUnavailableError(info, location)

        return data

    def fetch_current_weather(self, location: str) -> WeatherSnapshot:
        """The function everyone calls to get the weather right now for a place."""
        if not location or not location.strip():
            raise LocationNotFoundError("Destination is required", location or "")

        location = location.strip()
        if not self.api_key:
            raise WeatherServiceUnavailableError("WeatherStack API key not configured", location)

        logger.info(f"Looking up weather for: {location}")
        data = self._request_current(location)

        try:
            place = data["location"]
            current = data["current"]
            descriptions = current.get("weather_descriptions") or [""]
            description = descriptions[0]
            temperature = round(current["temperature"])

            snapshot = WeatherSnapshot(
                location=f"{place['name']}, {place['country']}",
                temperature=SnapshotTemperature(
                    current=temperature,
                    feels_like=round(current.get("feelslike", temperature)),
                    # free plan has no daily range, so fake one around the current reading
                    min=temperature - 3,
                    max=temperature + 3,
                ),
                condition=map_condition(current.get("weather_code"), description),
                description=description.lower(),
                humidity=current.get("humidity", 0),
                pressure=current.get("pressure", 0),
                wind_speed=round(current.get("wind_speed", 0) / 3.6, 1),
                wind_direction=current.get("wind_degree", 0),
                cloud_cover=current.get("cloudcover", 0),
                visibility=current.get("visibility", 0),
                precipitation=current.get("precip") or 0,
                observed_at=_parse_localtime(place.get("localtime")),
            )
        except (KeyError, TypeError, ValidationError) as e:
            logger.error(f"Unexpected WeatherStack payload for {location}: {str(e)}")
            raise WeatherServiceUnavailableError("Weather service returned an unexpected payload", location)

        logger.info(f"Got weather for {location}: {snapshot.temperature.current}°C, {snapshot.condition}")
        return snapshot
