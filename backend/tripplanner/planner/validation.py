"""
Client-side form validation.

Everything here runs before any network call: a failure raises
FormValidationError with the message shown to the user, and the request is
never sent.
"""

from datetime import date
from typing import Callable, Dict, Optional

from tripplanner.models.trip_preferences import ACCOMMODATION_TYPES, TravelInput, UserPreferences

MIN_BUDGET = 100
MAX_BUDGET = 1_000_000
MAX_ACTIVITIES = 5

MISSING_LOCATIONS = "Please select origin and destination"
MISSING_DATES = "Please select travel dates"
START_IN_PAST = "Start date cannot be in the past"
RETURN_BEFORE_START = "Return date must be after start date"
BUDGET_TOO_LOW = "Budget must be at least $100"
BUDGET_TOO_HIGH = "Budget cannot exceed $1,000,000"
NO_ACTIVITIES = "Select at least one activity"
TOO_MANY_ACTIVITIES = "Maximum 5 activities allowed"
NO_MEALS = "Select at least one meal preference"
NO_TRANSPORT = "Select at least one transport preference"
NO_PLACES = "Select at least one preferred place"
NO_ACCOMMODATION = "Select an accommodation type"


class FormValidationError(ValueError):
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def validate_travel_input(travel_input: TravelInput, today: Optional[date] = None) -> None:
    if not travel_input.origin.strip() or not travel_input.destination.strip():
        raise FormValidationError(MISSING_LOCATIONS, "origin" if not travel_input.origin.strip() else "destination")

    start = parse_iso_date(travel_input.start_date)
    end = parse_iso_date(travel_input.return_date)
    if start is None or end is None:
        raise FormValidationError(MISSING_DATES, "start_date" if start is None else "return_date")

    today = today or date.today()
    if start < today:
        raise FormValidationError(START_IN_PAST, "start_date")
    if end <= start:
        raise FormValidationError(RETURN_BEFORE_START, "return_date")


def _budget_error(p: UserPreferences) -> Optional[str]:
    return BUDGET_TOO_LOW if p.budget is None or p.budget < MIN_BUDGET else None


def _activities_error(p: UserPreferences) -> Optional[str]:
    return NO_ACTIVITIES if not p.activities else None


def _meals_error(p: UserPreferences) -> Optional[str]:
    return NO_MEALS if not p.meal_preferences else None


def _transport_error(p: UserPreferences) -> Optional[str]:
    return NO_TRANSPORT if not p.transport_preferences else None


def _places_error(p: UserPreferences) -> Optional[str]:
    return NO_PLACES if not p.preferred_places else None


def _accommodation_error(p: UserPreferences) -> Optional[str]:
    return NO_ACCOMMODATION if p.accommodation_type not in ACCOMMODATION_TYPES else None


# keyed by preference step id, in wizard order
STEP_CHECKS: Dict[str, Callable[[UserPreferences], Optional[str]]] = {
    "budget": _budget_error,
    "activities": _activities_error,
    "meals": _meals_error,
    "transport": _transport_error,
    "places": _places_error,
    "accommodation": _accommodation_error,
}

_STEP_FIELDS = {
    "budget": "budget",
    "activities": "activities",
    "meals": "meal_preferences",
    "transport": "transport_preferences",
    "places": "preferred_places",
    "accommodation": "accommodation_type",
}


def step_error(step: str, preferences: UserPreferences) -> Optional[str]:
    return STEP_CHECKS[step](preferences)


def is_step_valid(step: str, preferences: UserPreferences) -> bool:
    return step_error(step, preferences) is None


def validate_preferences(preferences: UserPreferences) -> None:
    """All step checks plus the upper limits applied on submission."""
    for step in STEP_CHECKS:
        message = step_error(step, preferences)
        if message:
            raise FormValidationError(message, _STEP_FIELDS[step])
    if preferences.budget > MAX_BUDGET:
        raise FormValidationError(BUDGET_TOO_HIGH, "budget")
    if len(preferences.activities) > MAX_ACTIVITIES:
        raise FormValidationError(TOO_MANY_ACTIVITIES, "activities")


def validate_submission(
    travel_input: TravelInput, preferences: UserPreferences, today: Optional[date] = None
) -> None:
    validate_travel_input(travel_input, today=today)
    validate_preferences(preferences)
