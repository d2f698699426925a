from datetime import date, timedelta

from tripplanner.planner.notifications import Notifier
from tripplanner.planner.validation import MISSING_LOCATIONS, NO_ACTIVITIES
from tripplanner.planner.wizard import PlannerStep, PreferenceStep, TripWizard


def _at_preferences():
    wizard = TripWizard(Notifier())
    wizard.set_location(origin="London", destination="Paris")
    wizard.next()
    wizard.next()
    assert wizard.step == PlannerStep.PREFERENCES
    return wizard


def _fill_preferences(wizard):
    wizard.update_preferences(
        activities=["museums"],
        meal_preferences=["local cuisine"],
        transport_preferences=["train"],
        preferred_places=["Louvre Museum"],
    )


def test_location_requires_both_ends():
    notifier = Notifier()
    wizard = TripWizard(notifier)
    wizard.set_location(origin="London")

    result = wizard.next()

    assert not result.moved
    assert result.message == MISSING_LOCATIONS
    assert wizard.step == PlannerStep.LOCATION
    assert notifier.messages("error") == [MISSING_LOCATIONS]


def test_dates_step_gets_default_dates():
    wizard = TripWizard()
    wizard.set_location(origin="London", destination="Paris")

    result = wizard.next()

    tomorrow = date.today() + timedelta(days=1)
    assert result.moved and result.step == "dates"
    assert wizard.form.start_date == tomorrow.isoformat()
    assert wizard.form.end_date == (tomorrow + timedelta(days=7)).isoformat()


def test_dates_step_requires_both_dates():
    wizard = TripWizard()
    wizard.set_location(origin="London", destination="Paris")
    wizard.next()
    wizard.set_end_date("")

    assert not wizard.next().moved
    assert wizard.step == PlannerStep.DATES


def test_moving_start_past_end_clears_end():
    wizard = TripWizard()
    wizard.set_start_date("2026-11-01")
    wizard.set_end_date("2026-11-05")

    wizard.set_start_date("2026-11-03")
    assert wizard.form.end_date == "2026-11-05"

    wizard.set_start_date("2026-11-10")
    assert wizard.form.end_date == ""


def test_date_presets():
    wizard = TripWizard()
    wizard.apply_preset(3, today=date(2026, 10, 19))
    assert (wizard.form.start_date, wizard.form.end_date) == ("2026-10-20", "2026-10-22")
    assert wizard.trip_length_days() == 2


def test_preferences_start_at_budget_with_defaults():
    wizard = _at_preferences()
    assert wizard.preference_step == PreferenceStep.BUDGET
    assert wizard.form.preferences.budget == 1000
    assert wizard.form.preferences.accommodation_type == "hotel"
    assert wizard.progress == 1 / 6


def test_forward_blocked_until_step_valid():
    wizard = _at_preferences()
    assert wizard.next().step == "activities"

    blocked = wizard.next()
    assert not blocked.moved
    assert blocked.message == NO_ACTIVITIES
    assert wizard.notifier.messages("error") == [NO_ACTIVITIES]

    wizard.update_preferences(activities=["hiking"])
    assert wizard.next().step == "meals"
    assert wizard.completed_steps == {PreferenceStep.BUDGET, PreferenceStep.ACTIVITIES}


def test_back_from_budget_returns_to_location():
    wizard = _at_preferences()
    wizard.next()

    assert wizard.back().step == "budget"
    result = wizard.back()
    assert result.moved
    assert wizard.step == PlannerStep.LOCATION


def test_back_at_location_does_nothing():
    wizard = TripWizard()
    assert not wizard.back().moved


def test_is_complete_needs_every_step():
    wizard = _at_preferences()
    assert not wizard.is_complete
    _fill_preferences(wizard)
    assert wizard.is_complete
    wizard.update_preferences(budget=20)
    assert not wizard.is_complete


def test_walks_to_last_step_and_builds_request():
    wizard = _at_preferences()
    _fill_preferences(wizard)
    for _ in range(5):
        assert wizard.next().moved
    assert wizard.preference_step == PreferenceStep.ACCOMMODATION
    assert wizard.is_last_preference_step

    request = wizard.build_request()
    assert request.travel_input.origin == "London"
    assert request.travel_input.return_date == wizard.form.end_date
    assert request.user_preferences.activities == ["museums"]
