import json
from datetime import date, timedelta
from unittest.mock import MagicMock

import pytest
import requests

from tripplanner.config import get_settings

API_URL = "http://api.test"

ITINERARY_BODY = {
    "id": "itn-1",
    "trip_summary": {
        "destination": "Paris",
        "trip_dates": "2026-11-01 to 2026-11-03",
        "budget": "$1500",
    },
    "daily_itineraries": [
        {
            "date": "2026-11-01",
            "activities": [{"time": "09:00", "description": "Louvre Museum"}],
            "meals": [{"type": "lunch", "suggestion": "Bistro near the Seine"}],
            "transport": [{"time": "08:30", "description": "Metro line 1"}],
            "estimated_costs": {"activities": 50, "meals": 40, "transport": 10, "accommodation": 150},
            "weather": {"date": "2026-11-01", "temperature_celsius": "12", "condition": "Cloudy"},
        }
    ],
    "total_cost": 250,
    "recommendations": ["Book the Louvre in advance"],
}


def make_response(status_code, body=None, url=API_URL):
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    if body is None:
        response._content = b""
    elif isinstance(body, (dict, list)):
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    else:
        response._content = str(body).encode("utf-8")
    return response


@pytest.fixture(autouse=True)
def planner_env(monkeypatch, tmp_path):
    monkeypatch.setenv("PLANNER_API_URL", API_URL)
    monkeypatch.setenv("PLANNER_MAPBOX_TOKEN", "test-token")
    monkeypatch.setenv("PLANNER_THEME_FILE", str(tmp_path / "theme.json"))
    monkeypatch.delenv("PLANNER_DEFAULT_TIMEOUT", raising=False)
    monkeypatch.delenv("PLANNER_ITINERARY_TIMEOUT", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def http_session():
    """Stand-in for requests.Session; set .request.side_effect or .return_value per test."""
    return MagicMock()


@pytest.fixture
def itinerary_body():
    return json.loads(json.dumps(ITINERARY_BODY))


@pytest.fixture
def trip_dates():
    start = date.today() + timedelta(days=10)
    return start.isoformat(), (start + timedelta(days=3)).isoformat()


@pytest.fixture
def plan_request(trip_dates):
    start, end = trip_dates
    return {
        "travel_input": {
            "origin": "London",
            "destination": "Paris",
            "start_date": start,
            "return_date": end,
        },
        "user_preferences": {
            "budget": 1500,
            "activities": ["museums"],
            "meal_preferences": ["local cuisine"],
            "preferred_places": ["Louvre Museum"],
            "transport_preferences": ["train"],
            "accommodation_type": "hotel",
        },
    }
