"""
Display status of an itinerary generation request.

The planning API may report one of these states in a ``status`` field. The
client never drives these transitions itself (generation is a single call);
the value only picks the loading message, so unknown or missing values fall
back to the generic one.
"""

from enum import Enum
from typing import Any, Optional


class RequestStatus(str, Enum):
    PENDING = "PENDING"
    VALIDATING = "VALIDATING"
    FETCHING_WEATHER = "FETCHING_WEATHER"
    FETCHING_EVENTS = "FETCHING_EVENTS"
    GENERATING = "GENERATING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


TERMINAL_STATUSES = frozenset({RequestStatus.COMPLETED, RequestStatus.FAILED})

DEFAULT_LOADING_MESSAGE = "Generating your itinerary..."

_LOADING_MESSAGES = {
    RequestStatus.PENDING: "Your request is pending...",
    RequestStatus.VALIDATING: "Validating your preferences...",
    RequestStatus.FETCHING_WEATHER: "Checking weather conditions...",
    RequestStatus.FETCHING_EVENTS: "Finding local events...",
    RequestStatus.GENERATING: "Creating your personalized itinerary...",
    RequestStatus.PROCESSING: "Finalizing your itinerary...",
    RequestStatus.COMPLETED: "Itinerary generation completed!",
    RequestStatus.FAILED: "Failed to generate itinerary. Please try again.",
}


def parse_status(value: Any) -> Optional[RequestStatus]:
    if isinstance(value, RequestStatus):
        return value
    if not isinstance(value, str):
        return None
    try:
        return RequestStatus(value.strip().upper())
    except ValueError:
        return None


def status_message(status: Any) -> str:
    parsed = parse_status(status)
    if parsed is None:
        return DEFAULT_LOADING_MESSAGE
    return _LOADING_MESSAGES[parsed]


def is_terminal(status: Any) -> bool:
    return parse_status(status) in TERMINAL_STATUSES
