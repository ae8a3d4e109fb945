"""Current weather from OpenWeatherMap, shown on the dashboard."""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from planner.config import settings

logger = logging.getLogger(__name__)


@dataclass
class WeatherSummary:
    city: str
    temperature_c: float
    description: str
    icon: Optional[str] = None


class OpenWeatherMapService:
    def __init__(self, api_key: str, base_url: str, client: Optional[httpx.Client] = None, timeout: float = 10.0):
        self.api_key = api_key
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self._client = client or httpx.Client(timeout=timeout)

    def get_current_weather(self, city: str) -> Optional[WeatherSummary]:
        """Fetch current conditions in metric units.

        Returns None when the response carries no temperature block. HTTP and
        transport errors propagate to the caller.
        """
        if not city or not city.strip():
            raise ValueError("City is required.")
        if not self.api_key:
            raise ValueError("OpenWeatherMap API key is not configured.")

        response = self._client.get(
            self.base_url + "weather",
            params={"q": city.strip(), "appid": self.api_key, "units": "metric"},
        )
        response.raise_for_status()
        payload = response.json() or {}

        main = payload.get("main")
        if not main:
            logger.warning("Weather response for %r had no 'main' block", city)
            return None

        weather = (payload.get("weather") or [{}])[0]
        return WeatherSummary(
            city=payload.get("name") or city.strip(),
            temperature_c=float(main.get("temp", 0.0)),
            description=weather.get("description") or "",
            icon=weather.get("icon"),
        )


def get_weather_service() -> OpenWeatherMapService:
    """FastAPI dependency built from settings."""
    return OpenWeatherMapService(
        api_key=settings.OPENWEATHERMAP_API_KEY,
        base_url=settings.OPENWEATHERMAP_BASE_URL,
    )
