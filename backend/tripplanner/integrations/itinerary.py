import logging
from typing import Optional
from urllib.parse import quote

from tripplanner.integrations.api_client import ApiClient, ITINERARY_PATH
from tripplanner.integrations.cancellation import CancelToken
from tripplanner.integrations.parsing import parse_response
from tripplanner.models.entities import ItineraryResponse
from tripplanner.models.trip_preferences import GenerateItineraryRequest

logger = logging.getLogger(__name__)


class ItineraryService:
    """Generate and fetch itineraries from the planning API."""

    def __init__(self, client: ApiClient):
        self.client = client

    def new_token(self) -> CancelToken:
        """Supersede any generation in flight; the returned token belongs to the next one."""
        return self.client.renew_cancel_token()

    def generate(self, request: GenerateItineraryRequest, cancel_token: Optional[CancelToken] = None) -> ItineraryResponse:
        """
        POST /api/itinerary. A newer call cancels this one while it is in flight,
        in which case APIError(CANCELLED) is raised here.
        """
        ti = request.travel_input
        logger.info(f"Generating itinerary: {ti.origin} -> {ti.destination} ({ti.start_date} to {ti.return_date})")
        payload = self.client.post(ITINERARY_PATH, request.model_dump(mode="json"), cancel_token=cancel_token)
        itinerary = parse_response(ItineraryResponse, payload, ITINERARY_PATH)
        logger.info(f"Itinerary received with {len(itinerary.daily_itineraries)} days")
        return itinerary

    def get(self, itinerary_id: str) -> ItineraryResponse:
        endpoint = f"{ITINERARY_PATH}/{quote(itinerary_id, safe='')}"
        payload = self.client.get(endpoint)
        return parse_response(ItineraryResponse, payload, endpoint)

    def cancel(self) -> None:
        self.client.cancel_request()
