import logging
from typing import Optional

from tripplanner.integrations.api_client import ApiClient
from tripplanner.integrations.parsing import parse_response
from tripplanner.integrations.query_cache import QueryCache, make_key
from tripplanner.models.entities import WeatherResponse
from tripplanner.models.trip_preferences import TravelInput

logger = logging.getLogger(__name__)

WEATHER_PATH = "/api/weather"
WEATHER_STALE_SECONDS = 30 * 60


class WeatherService:
    """Weather forecast and local events for a trip (POST /api/weather)."""

    def __init__(self, client: ApiClient, cache: Optional[QueryCache] = None):
        self.client = client
        self.cache = cache or QueryCache()

    @staticmethod
    def is_enabled(params: TravelInput) -> bool:
        # origin is not needed for a forecast
        return bool(params.destination and params.start_date and params.return_date)

    def _fetch(self, params: TravelInput) -> WeatherResponse:
        payload = self.client.post(WEATHER_PATH, params.model_dump())
        return parse_response(WeatherResponse, payload, WEATHER_PATH)

    def get_weather_and_events(self, params: TravelInput) -> Optional[WeatherResponse]:
        if not self.is_enabled(params):
            logger.info("Weather lookup skipped: destination or dates missing")
            return None
        key = make_key("weather", params.model_dump())
        return self.cache.fetch(key, lambda: self._fetch(params), WEATHER_STALE_SECONDS)
