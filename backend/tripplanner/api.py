from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from typing import List, Optional
import logging

from tripplanner.config import get_settings
from tripplanner.integrations.events import EventParams
from tripplanner.integrations.exceptions import APIError, ErrorKind, ResponseParseError
from tripplanner.main import format_itinerary
from tripplanner.models.catalog import get_event_category, get_transport_mode, get_weather_condition
from tripplanner.models.entities import LocalEvent
from tripplanner.models.trip_preferences import GenerateItineraryRequest, TravelInput
from tripplanner.planner.listings import (
    filter_transport_options,
    format_duration,
    format_price_range,
    format_temperature,
    group_events_by_date,
    parse_duration,
    parse_price,
    sort_transport_options,
)
from tripplanner.planner.status import status_message
from tripplanner.planner.submission import Outcome
from tripplanner.state.session import PlannerSession

# Configure logging
logging.basicConfig(level=get_settings().log_level.upper())
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Trip Planner API",
    description="Trip planning wizard, itinerary generation and travel listings",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_STATUS_FOR_KIND = {
    ErrorKind.VALIDATION_ERROR: 422,
    ErrorKind.TIMEOUT_ERROR: 504,
    ErrorKind.CANCELLED: 409,
}

_STATUS_FOR_OUTCOME = {
    Outcome.INVALID: 400,
    Outcome.REJECTED: 422,
    Outcome.WAITING: 202,
    Outcome.CANCELLED: 409,
    Outcome.STALE: 409,
    Outcome.FAILED: 502,
}


def get_session(request: Request) -> PlannerSession:
    """One in-memory planner session per app, created on first use."""
    session = getattr(request.app.state, "session", None)
    if session is None:
        session = PlannerSession()
        request.app.state.session = session
    return session


def _http_error(error: Exception) -> HTTPException:
    if isinstance(error, APIError):
        return HTTPException(status_code=_STATUS_FOR_KIND.get(error.type, 502), detail=error.to_dict())
    if isinstance(error, ResponseParseError):
        return HTTPException(status_code=502, detail={"code": error.code, "message": error.message})
    return HTTPException(status_code=500, detail=str(error))


@app.exception_handler(Exception)
async def error_boundary(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {exc!r}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Something went wrong",
            "message": str(exc) or "An unexpected error occurred",
            "reset": "/session/reset",
        },
    )


@app.get("/")
def root():
    return {
        "message": "Trip Planner API",
        "version": "1.0.0",
        "endpoints": {
            "health": "/health",
            "plan_trip": "/plan-trip",
            "itinerary": "/itinerary",
            "weather": "/weather",
            "transport": "/transport",
            "events": "/events",
            "docs": "/docs"
        }
    }


@app.get("/health")
def health():
    return {"status": "healthy", "service": "Trip Planner"}


@app.post("/plan-trip")
def plan_trip(request: GenerateItineraryRequest, session: PlannerSession = Depends(get_session)):
    """
    Validate the trip and ask the planning API for an itinerary.

    - **travel_input**: origin, destination, start_date, return_date (YYYY-MM-DD)
    - **user_preferences**: budget, activities, meals, transport, places, accommodation
    """
    ti = request.travel_input
    logger.info(f"Plan trip requested: {ti.origin} -> {ti.destination} ({ti.start_date} to {ti.return_date})")
    result = session.submitter.submit(request)

    if result.outcome == Outcome.COMPLETED:
        return {
            "success": True,
            "message": result.message,
            "status": result.status.value,
            "redirect": result.redirect,
            "itinerary": format_itinerary(result.itinerary),
        }

    if result.outcome == Outcome.INVALID:
        raise HTTPException(status_code=400, detail=result.message)

    body = {
        "success": False,
        "outcome": result.outcome.value,
        "message": result.message,
        "status": result.status.value if result.status else None,
    }
    if result.status is not None:
        body["status_message"] = status_message(result.status)
    if isinstance(result.error, APIError):
        body["error"] = result.error.to_dict()
    return JSONResponse(status_code=_STATUS_FOR_OUTCOME[result.outcome], content=body)


@app.post("/plan-trip/cancel")
def cancel_plan(session: PlannerSession = Depends(get_session)):
    session.submitter.cancel()
    return {"cancelled": True}


@app.get("/itinerary")
def current_itinerary(session: PlannerSession = Depends(get_session)):
    itinerary = session.itinerary.current_itinerary
    if itinerary is None:
        raise HTTPException(status_code=404, detail="No itinerary has been generated yet")
    return format_itinerary(itinerary)


@app.get("/itinerary/{itinerary_id}")
def itinerary_by_id(itinerary_id: str, session: PlannerSession = Depends(get_session)):
    try:
        itinerary = session.itinerary_service.get(itinerary_id)
    except (APIError, ResponseParseError) as e:
        raise _http_error(e)
    session.itinerary.set_current_itinerary(itinerary)
    return format_itinerary(itinerary)


@app.post("/weather")
def weather(travel_input: TravelInput, unit: str = "C", session: PlannerSession = Depends(get_session)):
    if not session.weather_service.is_enabled(travel_input):
        raise HTTPException(status_code=400, detail="Destination and travel dates are required")
    try:
        response = session.weather_service.get_weather_and_events(travel_input)
    except (APIError, ResponseParseError) as e:
        raise _http_error(e)

    forecast = []
    for day in response.weather_forecast:
        condition = get_weather_condition(day.condition)
        forecast.append({
            **day.model_dump(),
            "temperature": format_temperature(day.temperature_celsius, unit),
            "icon": condition.icon,
            "severity": condition.severity,
        })
    return {"weather_forecast": forecast, "local_events": [e.model_dump() for e in response.local_events]}


@app.post("/transport")
def transport(
    travel_input: TravelInput,
    sort_by: str = "price",
    mode: Optional[List[str]] = Query(None),
    max_price: Optional[float] = None,
    session: PlannerSession = Depends(get_session),
):
    if not session.transport_service.is_enabled(travel_input):
        raise HTTPException(status_code=400, detail="Origin, destination and travel dates are required")
    try:
        response = session.transport_service.get_transport_options(travel_input)
    except (APIError, ResponseParseError) as e:
        raise _http_error(e)

    options = filter_transport_options(response.options, modes=mode, max_price=max_price)
    options = sort_transport_options(options, sort_by)
    prices = [parse_price(o.price) for o in options]
    return {
        "sort_by": sort_by,
        "price_range": format_price_range(min(prices), max(prices)) if prices else None,
        "options": [
            {
                **o.model_dump(),
                "duration_text": format_duration(parse_duration(o.duration)),
                "mode_label": get_transport_mode(o.mode).label,
            }
            for o in options
        ],
    }


@app.get("/events")
def events(
    category: Optional[str] = None,
    q: Optional[str] = None,
    location: Optional[str] = None,
    session: PlannerSession = Depends(get_session),
):
    try:
        session.events_service.fetch_events(EventParams(location=location))
    except (APIError, ResponseParseError) as e:
        raise _http_error(e)

    session.events.set_filters(categories=[category] if category else [], search_query=q or "")
    filtered = session.events.filtered_events()
    return {
        "events": [
            {**e.model_dump(), "category_color": get_event_category(e.category).color}
            for e in filtered
        ],
        "by_date": {day: [e.name for e in items] for day, items in group_events_by_date(filtered).items()},
    }


@app.post("/events")
def add_event(event: LocalEvent, session: PlannerSession = Depends(get_session)):
    try:
        created = session.events_service.add_event(event)
    except (APIError, ResponseParseError) as e:
        raise _http_error(e)
    return created.model_dump()


@app.delete("/events/{event_id}")
def remove_event(event_id: str, session: PlannerSession = Depends(get_session)):
    try:
        session.events_service.remove_event(event_id)
    except APIError as e:
        raise _http_error(e)
    return {"removed": event_id}


@app.get("/theme")
def theme(session: PlannerSession = Depends(get_session)):
    return {"theme": session.theme.theme}


@app.post("/theme/toggle")
def toggle_theme(session: PlannerSession = Depends(get_session)):
    return {"theme": session.theme.toggle()}


@app.post("/session/reset")
def reset_session(session: PlannerSession = Depends(get_session)):
    session.reset()
    return {"reset": True}
