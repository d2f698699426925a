"""
The trip planning wizard: Location -> Dates -> Preferences.

The preferences part is its own sequence of steps (budget, activities, meals,
transport, places, accommodation). Moving forward requires the current step
to be valid; moving back is always allowed, and backing out of the first
preference step returns to the Location step.
"""

import logging
from datetime import date, timedelta
from enum import Enum
from typing import List, NamedTuple, Optional, Set

from pydantic import BaseModel, Field

from tripplanner.models.trip_preferences import DateRange, GenerateItineraryRequest, TravelInput, UserPreferences
from tripplanner.planner.notifications import Notifier
from tripplanner.planner.validation import (
    MISSING_DATES,
    MISSING_LOCATIONS,
    is_step_valid,
    parse_iso_date,
    step_error,
)
from tripplanner.state.stores import TripStore

logger = logging.getLogger(__name__)


class PlannerStep(str, Enum):
    LOCATION = "location"
    DATES = "dates"
    PREFERENCES = "preferences"


class PreferenceStep(str, Enum):
    BUDGET = "budget"
    ACTIVITIES = "activities"
    MEALS = "meals"
    TRANSPORT = "transport"
    PLACES = "places"
    ACCOMMODATION = "accommodation"

    @property
    def title(self) -> str:
        return self.value.capitalize()


PREFERENCE_STEPS: List[PreferenceStep] = list(PreferenceStep)


class FormData(BaseModel):
    origin: str = ""
    destination: str = ""
    start_date: str = ""
    end_date: str = ""
    preferences: UserPreferences = Field(default_factory=UserPreferences)


class StepResult(NamedTuple):
    moved: bool
    step: str
    message: Optional[str] = None


class TripWizard:
    """
    Holds the form while the user moves through the steps.

    With a trip store attached, locations typed elsewhere (the debounced
    location inputs) flow into the form, and every completed step is
    written back to the store.
    """

    def __init__(self, notifier: Optional[Notifier] = None, trip_store: Optional[TripStore] = None):
        self.notifier = notifier
        self.trip_store = trip_store
        self.reset()
        if trip_store is not None:
            trip_store.subscribe(self._on_trip_change)

    def reset(self) -> None:
        self.form = FormData()
        self.step = PlannerStep.LOCATION
        self.preference_index = 0
        self.completed_steps: Set[PreferenceStep] = set()

    def _on_trip_change(self, action: str, store: TripStore) -> None:
        if action == "set_location":
            self.form.origin = store.origin
            self.form.destination = store.destination

    # Location

    def set_location(self, origin: Optional[str] = None, destination: Optional[str] = None) -> None:
        for kind, value in (("origin", origin), ("destination", destination)):
            if value is None:
                continue
            setattr(self.form, kind, value)
            if self.trip_store is not None:
                self.trip_store.set_location(kind, value)

    def clear_location(self, kind: str) -> None:
        if kind in ("origin", "destination"):
            self.set_location(**{kind: ""})

    # Dates

    def set_start_date(self, value: str) -> None:
        self.form.start_date = value
        start, end = parse_iso_date(value), parse_iso_date(self.form.end_date)
        if start and end and end < start:
            self.form.end_date = ""

    def set_end_date(self, value: str) -> None:
        self.form.end_date = value

    def apply_preset(self, days: int, today: Optional[date] = None) -> None:
        """Trip of ``days`` days (inclusive) starting tomorrow."""
        start = (today or date.today()) + timedelta(days=1)
        end = start + timedelta(days=days - 1)
        self.form.start_date = start.isoformat()
        self.form.end_date = end.isoformat()

    def ensure_default_dates(self, today: Optional[date] = None) -> None:
        if self.form.start_date or self.form.end_date:
            return
        start = (today or date.today()) + timedelta(days=1)
        self.form.start_date = start.isoformat()
        self.form.end_date = (start + timedelta(days=7)).isoformat()

    def trip_length_days(self) -> Optional[int]:
        start, end = parse_iso_date(self.form.start_date), parse_iso_date(self.form.end_date)
        if not start or not end:
            return None
        return (end - start).days

    # Preferences

    @property
    def preference_step(self) -> PreferenceStep:
        return PREFERENCE_STEPS[self.preference_index]

    @property
    def is_first_preference_step(self) -> bool:
        return self.preference_index == 0

    @property
    def is_last_preference_step(self) -> bool:
        return self.preference_index == len(PREFERENCE_STEPS) - 1

    @property
    def progress(self) -> float:
        return (self.preference_index + 1) / len(PREFERENCE_STEPS)

    def update_preferences(self, **changes) -> UserPreferences:
        self.form.preferences = UserPreferences.model_validate(
            {**self.form.preferences.model_dump(), **changes}
        )
        return self.form.preferences

    def is_step_valid(self, step: PreferenceStep) -> bool:
        return is_step_valid(step, self.form.preferences)

    @property
    def is_complete(self) -> bool:
        return all(self.is_step_valid(step) for step in PREFERENCE_STEPS)

    # Navigation

    def _blocked(self, message: str) -> StepResult:
        if self.notifier is not None:
            self.notifier.error(message)
        return StepResult(False, self.current_step_id, message)

    @property
    def current_step_id(self) -> str:
        if self.step == PlannerStep.PREFERENCES:
            return self.preference_step.value
        return self.step.value

    def next(self) -> StepResult:
        if self.step == PlannerStep.LOCATION:
            if not (self.form.origin.strip() and self.form.destination.strip()):
                return self._blocked(MISSING_LOCATIONS)
            self.step = PlannerStep.DATES
            self.ensure_default_dates()
        elif self.step == PlannerStep.DATES:
            if not (parse_iso_date(self.form.start_date) and parse_iso_date(self.form.end_date)):
                return self._blocked(MISSING_DATES)
            self.step = PlannerStep.PREFERENCES
            self.preference_index = 0
            if self.trip_store is not None:
                self.trip_store.set_dates(DateRange(start_date=self.form.start_date, return_date=self.form.end_date))
        else:
            step = self.preference_step
            message = step_error(step, self.form.preferences)
            if message:
                return self._blocked(message)
            self.completed_steps.add(step)
            if self.trip_store is not None:
                self.trip_store.set_preferences(self.form.preferences)
                if step == PreferenceStep.BUDGET:
                    self.trip_store.set_budget(self.form.preferences.budget)
            if not self.is_last_preference_step:
                self.preference_index += 1
        logger.debug(f"Wizard advanced to {self.current_step_id}")
        return StepResult(True, self.current_step_id)

    def back(self) -> StepResult:
        if self.step == PlannerStep.LOCATION:
            return StepResult(False, self.current_step_id)
        if self.step == PlannerStep.DATES:
            self.step = PlannerStep.LOCATION
        elif self.is_first_preference_step:
            self.step = PlannerStep.LOCATION
        else:
            self.preference_index -= 1
        return StepResult(True, self.current_step_id)

    # Submission payload

    def travel_input(self) -> TravelInput:
        return TravelInput(
            origin=self.form.origin.strip(),
            destination=self.form.destination.strip(),
            start_date=self.form.start_date,
            return_date=self.form.end_date,
        )

    def build_request(self) -> GenerateItineraryRequest:
        return GenerateItineraryRequest(
            travel_input=self.travel_input(),
            user_preferences=self.form.preferences,
        )
