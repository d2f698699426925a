from typing import List, Literal

from pydantic import BaseModel

from tripplanner.planner.debounce import DEFAULT_WAIT_SECONDS, Debouncer
from tripplanner.state.stores import TripStore

MAX_SUGGESTIONS = 5


class City(BaseModel):
    name: str
    country: str
    image: str
    landmarks: List[str] = []


POPULAR_DESTINATIONS = [
    City(name="Paris", country="France", image="/images/destinations/paris.jpg",
         landmarks=["Eiffel Tower", "Louvre Museum"]),
    City(name="Tokyo", country="Japan", image="/images/destinations/tokyo.jpg",
         landmarks=["Tokyo Tower", "Shibuya Crossing"]),
    City(name="New York", country="United States", image="/images/destinations/newyork.jpg",
         landmarks=["Statue of Liberty", "Times Square"]),
]

KNOWN_CITIES = [c.name for c in POPULAR_DESTINATIONS] + ["London", "Dubai", "Singapore", "Rome", "Barcelona"]


def get_suggestions(value: str) -> List[str]:
    needle = value.strip().lower()
    if not needle:
        return []
    return [city for city in KNOWN_CITIES if needle in city.lower()][:MAX_SUGGESTIONS]


class LocationInput:
    """
    A text field bound to the trip store's origin or destination.

    ``value`` follows every keystroke; the store only sees the value once
    typing has paused for the debounce window.
    """

    def __init__(self, kind: Literal["origin", "destination"], store: TripStore, wait: float = DEFAULT_WAIT_SECONDS):
        self.kind = kind
        self.store = store
        self.value = ""
        self._propagate = Debouncer(lambda v: self.store.set_location(self.kind, v), wait=wait)

    def change(self, value: str) -> None:
        self.value = value
        self._propagate(value)

    def suggestions(self) -> List[str]:
        return get_suggestions(self.value)

    def flush(self) -> None:
        self._propagate.flush()

    def close(self) -> None:
        self._propagate.cancel()
