import json
import logging
from datetime import date

from pydantic import BaseModel

from tripplanner.models.catalog import get_weather_condition
from tripplanner.models.entities import DailyItinerary, ItineraryResponse
from tripplanner.planner.listings import format_price, format_temperature, parse_price


def _to_dict(obj):
    """Convert BaseModel or dict to plain dict, else return None."""
    if obj is None:
        return None
    if isinstance(obj, BaseModel):
        return obj.model_dump()
    if isinstance(obj, dict):
        return obj
    return None


def _prune(d: dict, keys: list):
    return {k: d.get(k) for k in keys if d.get(k) not in (None, "", [])}


def _format_weather(day: DailyItinerary):
    if day.weather is None:
        return None
    w = day.weather
    out = _prune(_to_dict(w), ["condition", "precipitation_chance", "humidity"])
    try:
        out["temperature"] = format_temperature(float(w.temperature_celsius))
    except (TypeError, ValueError):
        pass
    if w.condition:
        out["severity"] = get_weather_condition(w.condition).severity
    return out or None


def format_day(day: DailyItinerary) -> dict:
    return {
        "date": day.date,
        "activities": [_prune(_to_dict(a), ["time", "description"]) for a in day.activities],
        "meals": [_prune(_to_dict(m), ["type", "suggestion"]) for m in day.meals],
        "transport": [_prune(_to_dict(t), ["time", "description"]) for t in day.transport],
        "weather": _format_weather(day),
        "accommodation": _prune(_to_dict(day.accommodation), ["name", "address", "details"]) if day.accommodation else None,
        "estimated_cost": format_price(day.estimated_costs.total),
        "route": [_prune(_to_dict(r), ["stop_name", "latitude", "longitude"]) for r in day.daily_route],
    }


def format_itinerary(itinerary: ItineraryResponse) -> dict:
    """Flatten an itinerary into the shape the results page renders."""
    days = [format_day(d) for d in itinerary.daily_itineraries]

    # total_cost is optional on the wire; fall back to the sum of the days
    total = itinerary.total_cost or sum(d.estimated_costs.total for d in itinerary.daily_itineraries)

    out = {
        "id": itinerary.id,
        "summary": _prune(_to_dict(itinerary.trip_summary), ["destination", "trip_dates", "budget", "preferences", "trip_goal"]),
        "days": days,
        "total_cost": format_price(parse_price(total)),
        "recommendations": list(itinerary.recommendations),
    }
    if itinerary.emergency_contacts:
        out["emergency_contacts"] = _prune(_to_dict(itinerary.emergency_contacts), ["police", "ambulance", "tourist_helpline"])
    if itinerary.useful_phrases:
        out["useful_phrases"] = _prune(_to_dict(itinerary.useful_phrases), ["hello", "thank_you", "help"])
    return out


if __name__ == "__main__":
    from tripplanner.state.session import PlannerSession

    logging.basicConfig(level=logging.INFO)

    session = PlannerSession()
    wizard = session.wizard
    session.origin_input.change("Nairobi")
    session.destination_input.change("Paris")
    session.flush_inputs()
    wizard.next()
    wizard.apply_preset(7, today=date.today())
    wizard.next()
    wizard.update_preferences(
        budget=2500,
        activities=["museums", "food tours"],
        meal_preferences=["local cuisine"],
        transport_preferences=["train"],
        preferred_places=["Louvre Museum"],
        accommodation_type="boutique hotel",
    )
    while wizard.next().moved and not wizard.is_last_preference_step:
        pass

    result = session.submitter.submit(wizard.build_request())
    if result.itinerary is not None:
        print(json.dumps(format_itinerary(result.itinerary), indent=2, default=str))
    else:
        print(json.dumps({"outcome": result.outcome.value, "message": result.message}, indent=2))
