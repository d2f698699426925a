"""
Session state containers.

Each store owns a small piece of state and a fixed set of actions. Stores are
plain objects handed around by the PlannerSession, never module globals, so
two sessions never share state. Subscribers are called after every action
with the action name.
"""

import logging
from datetime import date
from typing import Any, Callable, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from tripplanner.integrations.parsing import parse_response
from tripplanner.models.entities import ItineraryResponse, LocalEvent
from tripplanner.models.trip_preferences import DateRange, UserPreferences
from tripplanner.planner.listings import event_day, filter_events

logger = logging.getLogger(__name__)

Listener = Callable[[str, "Store"], None]


class Store:
    """Base for the stores: subscription plus name-based dispatch."""

    ACTIONS: tuple = ()

    def __init__(self):
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, action: str) -> None:
        for listener in list(self._listeners):
            listener(action, self)

    def dispatch(self, action: str, *args, **kwargs) -> Any:
        if action not in self.ACTIONS:
            raise ValueError(f"{type(self).__name__} has no action {action!r}")
        return getattr(self, action)(*args, **kwargs)


class TripStore(Store):
    ACTIONS = ("set_location", "set_dates", "set_preferences", "set_budget", "set_itinerary", "reset")

    def __init__(self):
        super().__init__()
        self._initial()

    def _initial(self) -> None:
        self.origin = ""
        self.destination = ""
        self.dates: Optional[DateRange] = None
        self.preferences: Optional[UserPreferences] = None
        self.budget: float = 0
        self.current_itinerary: Optional[ItineraryResponse] = None

    def set_location(self, kind: Literal["origin", "destination"], value: str) -> None:
        if kind not in ("origin", "destination"):
            raise ValueError(f"Unknown location kind: {kind}")
        setattr(self, kind, value)
        self._emit("set_location")

    def set_dates(self, dates: DateRange) -> None:
        self.dates = dates
        self._emit("set_dates")

    def set_preferences(self, preferences: UserPreferences) -> None:
        self.preferences = preferences
        self._emit("set_preferences")

    def set_budget(self, budget: float) -> None:
        self.budget = budget
        self._emit("set_budget")

    def set_itinerary(self, itinerary: Union[ItineraryResponse, Dict[str, Any]]) -> None:
        """Accept an itinerary only if it matches the schema; raises ResponseParseError otherwise."""
        if not isinstance(itinerary, ItineraryResponse):
            itinerary = parse_response(ItineraryResponse, itinerary, "trip store")
        self.current_itinerary = itinerary
        logger.info(f"Trip itinerary set with {len(itinerary.daily_itineraries)} days")
        self._emit("set_itinerary")

    def reset(self) -> None:
        self._initial()
        self._emit("reset")


class ItineraryStore(Store):
    """
    Holds the itinerary shown on the results page.

    Generation requests are numbered; only the outcome of the most recently
    started request may change the store, so a late answer to a superseded
    request is dropped.
    """

    ACTIONS = ("begin_request", "commit", "fail", "set_current_itinerary", "clear")

    def __init__(self):
        super().__init__()
        self.current_itinerary: Optional[ItineraryResponse] = None
        self.is_pending = False
        self.error: Optional[Exception] = None
        self._latest_request_id = 0

    @property
    def latest_request_id(self) -> int:
        return self._latest_request_id

    def is_current(self, request_id: int) -> bool:
        return request_id == self._latest_request_id

    def begin_request(self) -> int:
        self._latest_request_id += 1
        self.is_pending = True
        self.error = None
        self._emit("begin_request")
        return self._latest_request_id

    def commit(self, request_id: int, itinerary: ItineraryResponse) -> bool:
        if not self.is_current(request_id):
            logger.warning(f"Dropping stale itinerary for request {request_id} (latest is {self._latest_request_id})")
            return False
        self.current_itinerary = itinerary
        self.is_pending = False
        self.error = None
        self._emit("commit")
        return True

    def fail(self, request_id: int, error: Exception) -> bool:
        if not self.is_current(request_id):
            logger.info(f"Ignoring error from superseded request {request_id}: {error}")
            return False
        self.is_pending = False
        self.error = error
        self._emit("fail")
        return True

    def set_current_itinerary(self, itinerary: Optional[ItineraryResponse]) -> None:
        self.current_itinerary = itinerary
        self._emit("set_current_itinerary")

    def clear(self) -> None:
        self.current_itinerary = None
        self.is_pending = False
        self.error = None
        self._emit("clear")


class EventFilters(BaseModel):
    categories: List[str] = Field(default_factory=list)
    max_price: Optional[float] = None
    search_query: str = ""
    start: Optional[date] = None
    end: Optional[date] = None


class EventsStore(Store):
    ACTIONS = (
        "set_events",
        "add_event",
        "remove_event",
        "toggle_selection",
        "clear_selection",
        "set_filters",
        "reset_filters",
        "set_loading",
        "set_error",
    )

    def __init__(self):
        super().__init__()
        self.events: List[LocalEvent] = []
        self.selected_events: List[LocalEvent] = []
        self.is_loading = False
        self.error: Optional[Exception] = None
        self.filters = EventFilters()

    def set_events(self, events: List[LocalEvent]) -> None:
        self.events = list(events)
        self._emit("set_events")

    def add_event(self, event: LocalEvent) -> None:
        self.events.append(event)
        self._emit("add_event")

    def remove_event(self, event_id: str) -> None:
        self.events = [e for e in self.events if e.id != event_id]
        self.selected_events = [e for e in self.selected_events if e.id != event_id]
        self._emit("remove_event")

    def is_selected(self, event: LocalEvent) -> bool:
        return any(e.id == event.id for e in self.selected_events)

    def toggle_selection(self, event: LocalEvent) -> None:
        if self.is_selected(event):
            self.selected_events = [e for e in self.selected_events if e.id != event.id]
        else:
            self.selected_events.append(event)
        self._emit("toggle_selection")

    def clear_selection(self) -> None:
        self.selected_events = []
        self._emit("clear_selection")

    def set_filters(self, **changes) -> None:
        self.filters = EventFilters.model_validate({**self.filters.model_dump(), **changes})
        self._emit("set_filters")

    def reset_filters(self) -> None:
        self.filters = EventFilters()
        self._emit("reset_filters")

    def set_loading(self, loading: bool) -> None:
        self.is_loading = loading
        self._emit("set_loading")

    def set_error(self, error: Optional[Exception]) -> None:
        self.error = error
        self._emit("set_error")

    def filtered_events(self) -> List[LocalEvent]:
        f = self.filters
        return filter_events(
            self.events,
            categories=f.categories,
            search=f.search_query,
            max_price=f.max_price,
            start=f.start,
            end=f.end,
        )

    def events_by_date(self, day: date) -> List[LocalEvent]:
        return [e for e in self.events if event_day(e) == day]
