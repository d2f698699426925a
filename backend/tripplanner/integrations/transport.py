import logging
from typing import Optional

from tripplanner.integrations.api_client import ApiClient
from tripplanner.integrations.parsing import parse_response
from tripplanner.integrations.query_cache import QueryCache, make_key
from tripplanner.models.entities import TransportResponse
from tripplanner.models.trip_preferences import TravelInput

logger = logging.getLogger(__name__)

TRANSPORT_PATH = "/api/transport"
TRANSPORT_STALE_SECONDS = 5 * 60


class TransportService:
    """Transport options between origin and destination (POST /api/transport)."""

    def __init__(self, client: ApiClient, cache: Optional[QueryCache] = None):
        self.client = client
        self.cache = cache or QueryCache()

    @staticmethod
    def is_enabled(params: TravelInput) -> bool:
        return bool(params.origin and params.destination and params.start_date and params.return_date)

    def _fetch(self, params: TravelInput) -> TransportResponse:
        payload = self.client.post(TRANSPORT_PATH, params.model_dump())
        return parse_response(TransportResponse, payload, TRANSPORT_PATH)

    def get_transport_options(self, params: TravelInput) -> Optional[TransportResponse]:
        if not self.is_enabled(params):
            logger.info("Transport lookup skipped: travel input incomplete")
            return None
        key = make_key("transport", params.model_dump())
        return self.cache.fetch(key, lambda: self._fetch(params), TRANSPORT_STALE_SECONDS)
