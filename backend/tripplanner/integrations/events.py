import logging
from datetime import date
from typing import List, Optional
from urllib.parse import quote

from pydantic import BaseModel

from tripplanner.integrations.api_client import ApiClient
from tripplanner.integrations.parsing import parse_response
from tripplanner.integrations.query_cache import QueryCache, make_key
from tripplanner.models.entities import EventsResponse, LocalEvent
from tripplanner.state.stores import EventsStore

logger = logging.getLogger(__name__)

EVENTS_PATH = "/api/events"
EVENTS_STALE_SECONDS = 5 * 60


class EventParams(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    location: Optional[str] = None
    radius: Optional[int] = None
    categories: List[str] = []
    limit: Optional[int] = None

    def to_query(self) -> dict:
        query = self.model_dump(mode="json", exclude_none=True)
        if not query.get("categories"):
            query.pop("categories", None)
        return query


class EventsService:
    """
    Local events CRUD against /api/events. Results flow into the EventsStore:
    a successful fetch replaces the store's events, a failed one sets its error.
    """

    def __init__(self, client: ApiClient, store: EventsStore, cache: Optional[QueryCache] = None):
        self.client = client
        self.store = store
        self.cache = cache or QueryCache()

    def _fetch(self, query: dict) -> List[LocalEvent]:
        payload = self.client.get(EVENTS_PATH, params=query)
        return parse_response(EventsResponse, payload, EVENTS_PATH).events

    def fetch_events(self, params: Optional[EventParams] = None) -> List[LocalEvent]:
        query = (params or EventParams()).to_query()
        self.store.set_loading(True)
        try:
            events = self.cache.fetch(make_key("events", query), lambda: self._fetch(query), EVENTS_STALE_SECONDS)
        except Exception as e:
            logger.warning(f"Fetching events failed: {e}")
            self.store.set_error(e)
            raise
        else:
            self.store.set_events(events)
            self.store.set_error(None)
            return events
        finally:
            self.store.set_loading(False)

    def add_event(self, event: LocalEvent) -> LocalEvent:
        payload = self.client.post(EVENTS_PATH, event.model_dump(exclude={"id"}, exclude_none=True))
        created = parse_response(LocalEvent, payload, EVENTS_PATH)
        self.store.add_event(created)
        self.cache.invalidate("events")
        return created

    def remove_event(self, event_id: str) -> str:
        self.client.delete(f"{EVENTS_PATH}/{quote(event_id, safe='')}")
        self.store.remove_event(event_id)
        self.cache.invalidate("events")
        return event_id
