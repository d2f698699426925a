import logging
from typing import Optional

import requests

from tripplanner.config import get_settings
from tripplanner.integrations.api_client import ApiClient
from tripplanner.integrations.events import EventsService
from tripplanner.integrations.itinerary import ItineraryService
from tripplanner.integrations.query_cache import QueryCache
from tripplanner.integrations.transport import TransportService
from tripplanner.integrations.weather import WeatherService
from tripplanner.planner.location import LocationInput
from tripplanner.planner.notifications import Notifier
from tripplanner.planner.submission import ItinerarySubmitter
from tripplanner.planner.wizard import TripWizard
from tripplanner.state.stores import EventsStore, ItineraryStore, TripStore
from tripplanner.state.theme import ThemeStore

logger = logging.getLogger(__name__)


class PlannerSession:
    """Everything one user works with: stores, notifications, API client and services."""

    def __init__(
        self,
        client: Optional[ApiClient] = None,
        theme_store: Optional[ThemeStore] = None,
        session: Optional[requests.Session] = None,
    ):
        self.client = client or ApiClient(session=session)
        self.theme = theme_store or ThemeStore(get_settings().theme_file)
        self._build()

    def _build(self) -> None:
        self.notifier = Notifier()
        self.cache = QueryCache()
        self.trip = TripStore()
        self.itinerary = ItineraryStore()
        self.events = EventsStore()

        self.itinerary_service = ItineraryService(self.client)
        self.weather_service = WeatherService(self.client, self.cache)
        self.transport_service = TransportService(self.client, self.cache)
        self.events_service = EventsService(self.client, self.events, self.cache)

        self.wizard = TripWizard(self.notifier, self.trip)
        self.origin_input = LocationInput("origin", self.trip)
        self.destination_input = LocationInput("destination", self.trip)
        self.submitter = ItinerarySubmitter(self.itinerary_service, self.itinerary, self.trip, self.notifier)

    def flush_inputs(self) -> None:
        """Push whatever is still waiting in the location inputs into the trip store."""
        self.origin_input.flush()
        self.destination_input.flush()

    def reset(self) -> None:
        """Back to a fresh session. The theme preference is kept."""
        self.client.cancel_request()
        self.origin_input.close()
        self.destination_input.close()
        self._build()
        logger.info("Planner session reset")
