from datetime import date

import pytest

from tripplanner.models.trip_preferences import TravelInput, UserPreferences
from tripplanner.planner import validation as v

TODAY = date(2026, 10, 19)


def _travel(**overrides):
    data = dict(origin="London", destination="Paris", start_date="2026-11-01", return_date="2026-11-05")
    data.update(overrides)
    return TravelInput(**data)


def _prefs(**overrides):
    data = dict(
        budget=1500,
        activities=["museums"],
        meal_preferences=["local cuisine"],
        preferred_places=["Louvre Museum"],
        transport_preferences=["train"],
        accommodation_type="hotel",
    )
    data.update(overrides)
    return UserPreferences(**data)


def test_valid_submission_passes():
    v.validate_submission(_travel(), _prefs(), today=TODAY)


@pytest.mark.parametrize(
    "overrides, message, field",
    [
        ({"origin": ""}, v.MISSING_LOCATIONS, "origin"),
        ({"destination": "  "}, v.MISSING_LOCATIONS, "destination"),
        ({"start_date": ""}, v.MISSING_DATES, "start_date"),
        ({"return_date": "not-a-date"}, v.MISSING_DATES, "return_date"),
        ({"start_date": "2026-10-18"}, v.START_IN_PAST, "start_date"),
        ({"return_date": "2026-11-01"}, v.RETURN_BEFORE_START, "return_date"),
        ({"return_date": "2026-10-30"}, v.RETURN_BEFORE_START, "return_date"),
    ],
)
def test_travel_gate(overrides, message, field):
    with pytest.raises(v.FormValidationError) as exc_info:
        v.validate_travel_input(_travel(**overrides), today=TODAY)
    assert exc_info.value.message == message
    assert exc_info.value.field == field


def test_start_today_is_allowed():
    v.validate_travel_input(_travel(start_date="2026-10-19", return_date="2026-10-20"), today=TODAY)


def test_budget_below_minimum():
    with pytest.raises(v.FormValidationError) as exc_info:
        v.validate_submission(_travel(), _prefs(budget=50), today=TODAY)
    assert str(exc_info.value) == "Budget must be at least $100"


@pytest.mark.parametrize(
    "step, overrides, message",
    [
        ("budget", {"budget": 99}, v.BUDGET_TOO_LOW),
        ("activities", {"activities": []}, v.NO_ACTIVITIES),
        ("meals", {"meal_preferences": []}, v.NO_MEALS),
        ("transport", {"transport_preferences": []}, v.NO_TRANSPORT),
        ("places", {"preferred_places": []}, v.NO_PLACES),
        ("accommodation", {"accommodation_type": None}, v.NO_ACCOMMODATION),
    ],
)
def test_each_preference_step(step, overrides, message):
    prefs = _prefs(**overrides)
    assert v.step_error(step, prefs) == message
    assert not v.is_step_valid(step, prefs)
    assert v.is_step_valid(step, _prefs())


def test_budget_boundary():
    assert v.is_step_valid("budget", _prefs(budget=100))


def test_submission_upper_limits():
    with pytest.raises(v.FormValidationError, match="exceed"):
        v.validate_preferences(_prefs(budget=2_000_000))
    with pytest.raises(v.FormValidationError) as exc_info:
        v.validate_preferences(_prefs(activities=["a", "b", "c", "d", "e", "f"]))
    assert exc_info.value.field == "activities"


def test_parse_iso_date_accepts_datetimes():
    assert v.parse_iso_date("2026-11-01T10:00:00Z") == date(2026, 11, 1)
    assert v.parse_iso_date("") is None
    assert v.parse_iso_date("01/11/2026") is None
