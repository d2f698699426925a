from unittest.mock import MagicMock

import pytest

from tripplanner.integrations.events import EventParams, EventsService
from tripplanner.integrations.exceptions import APIError, ErrorKind, ResponseParseError
from tripplanner.integrations.itinerary import ItineraryService
from tripplanner.integrations.query_cache import QueryCache
from tripplanner.integrations.transport import TransportService
from tripplanner.integrations.weather import WeatherService
from tripplanner.models.entities import LocalEvent
from tripplanner.models.trip_preferences import GenerateItineraryRequest, TravelInput, UserPreferences
from tripplanner.state.stores import EventsStore

TRIP = TravelInput(origin="London", destination="Paris", start_date="2026-11-01", return_date="2026-11-04")

WEATHER_BODY = {
    "weather_forecast": [
        {"date": "2026-11-01", "temperature_celsius": 12.4, "condition": "Cloudy", "precipitation_chance": 20, "humidity": 70}
    ],
    "local_events": [{"name": "Jazz Night", "date": "2026-11-01", "venue": "Le Duc", "category": "Music"}],
}

TRANSPORT_BODY = {
    "options": [
        {"mode": "train", "provider": "Eurostar", "departure": "2026-11-01T08:00:00", "arrival": "2026-11-01T11:30:00",
         "price": "$120", "duration": "2h 30m", "details": {"route": "London - Paris", "amenities": ["WiFi"]}},
    ]
}


@pytest.fixture
def client():
    return MagicMock()


def test_generate_posts_request_and_parses(client, itinerary_body):
    client.post.return_value = itinerary_body
    request = GenerateItineraryRequest(travel_input=TRIP, user_preferences=UserPreferences(activities=["museums"]))

    itinerary = ItineraryService(client).generate(request)

    assert itinerary.id == "itn-1"
    path, payload = client.post.call_args.args
    assert path == "/api/itinerary"
    assert payload["travel_input"]["destination"] == "Paris"
    assert payload["user_preferences"]["accommodation_type"] == "hotel"


def test_generate_rejects_malformed_body(client):
    client.post.return_value = {"trip_summary": {}}
    request = GenerateItineraryRequest(travel_input=TRIP, user_preferences=UserPreferences())
    with pytest.raises(ResponseParseError) as exc_info:
        ItineraryService(client).generate(request)
    assert exc_info.value.endpoint == "/api/itinerary"


def test_get_itinerary_quotes_id(client, itinerary_body):
    client.get.return_value = itinerary_body
    ItineraryService(client).get("a/b")
    assert client.get.call_args.args == ("/api/itinerary/a%2Fb",)


def test_weather_disabled_without_dates(client):
    service = WeatherService(client)
    assert service.get_weather_and_events(TRIP.model_copy(update={"start_date": ""})) is None
    client.post.assert_not_called()


def test_weather_is_cached(client):
    client.post.return_value = WEATHER_BODY
    service = WeatherService(client, QueryCache())

    first = service.get_weather_and_events(TRIP)
    second = service.get_weather_and_events(TRIP)

    assert first.weather_forecast[0].condition == "Cloudy"
    assert second is first
    client.post.assert_called_once_with("/api/weather", TRIP.model_dump())


def test_weather_does_not_need_origin(client):
    client.post.return_value = WEATHER_BODY
    assert WeatherService.is_enabled(TRIP.model_copy(update={"origin": ""}))


def test_transport_requires_all_fields(client):
    service = TransportService(client)
    assert service.get_transport_options(TRIP.model_copy(update={"origin": ""})) is None
    client.post.assert_not_called()


def test_transport_options_parsed(client):
    client.post.return_value = TRANSPORT_BODY
    response = TransportService(client).get_transport_options(TRIP)
    option = response.options[0]
    assert option.price == "$120"
    assert option.details.amenities == ["WiFi"]


def test_fetch_events_fills_store(client):
    client.get.return_value = {"events": [{"id": "1", "name": "Jazz Night", "date": "2026-11-01", "category": "Music"}]}
    store = EventsStore()
    service = EventsService(client, store)

    events = service.fetch_events(EventParams(location="Paris", categories=["Music"]))

    assert [e.name for e in store.events] == ["Jazz Night"] == [e.name for e in events]
    assert store.error is None and not store.is_loading
    assert client.get.call_args.kwargs["params"] == {"location": "Paris", "categories": ["Music"]}


def test_fetch_events_error_sets_store_error(client):
    error = APIError(ErrorKind.VALIDATION_ERROR, "Invalid request data", "VAL_001")
    client.get.side_effect = error
    store = EventsStore()

    with pytest.raises(APIError):
        EventsService(client, store).fetch_events()

    assert store.error is error
    assert not store.is_loading
    # validation errors are final
    assert client.get.call_count == 1


def test_add_and_remove_event_invalidate_cache(client):
    client.get.return_value = {"events": []}
    client.post.return_value = {"id": "9", "name": "Opera Gala", "date": "2026-11-03", "category": "Music"}
    store = EventsStore()
    service = EventsService(client, store, QueryCache())

    service.fetch_events()
    created = service.add_event(LocalEvent(name="Opera Gala", date="2026-11-03", category="Music"))
    service.fetch_events()

    assert created.id == "9"
    assert client.get.call_count == 2
    assert "id" not in client.post.call_args.args[1]

    service.remove_event("9")
    client.delete.assert_called_once_with("/api/events/9")
    assert store.events == []
