"""
Submitting the wizard: validate, generate, commit.

The itinerary store numbers every generation. If the user submits again
while a generation is still running, the older call is cancelled in the
client and, should its answer still arrive, the store drops it. A stale
outcome never touches the store or the notifications.
"""

import logging
import threading
from datetime import date
from enum import Enum
from typing import Callable, NamedTuple, Optional

from tripplanner.integrations.exceptions import APIError, ErrorKind, ResponseParseError
from tripplanner.integrations.itinerary import ItineraryService
from tripplanner.models.entities import ItineraryResponse
from tripplanner.models.trip_preferences import DateRange, GenerateItineraryRequest
from tripplanner.planner.notifications import Notifier
from tripplanner.planner.status import RequestStatus, status_message
from tripplanner.planner.validation import FormValidationError, validate_submission
from tripplanner.state.stores import ItineraryStore, TripStore

logger = logging.getLogger(__name__)

ITINERARY_PAGE = "/itinerary"

INITIALIZING = "Initializing..."
GENERATED = "Itinerary generated successfully!"
STILL_WORKING = "Request is taking longer than expected. Please wait or try again."
CHECK_INPUT = "Please check your input data"
GENERATION_FAILED = "Failed to generate itinerary. Please try again."


class Outcome(str, Enum):
    INVALID = "invalid"
    COMPLETED = "completed"
    WAITING = "waiting"
    REJECTED = "rejected"
    FAILED = "failed"
    CANCELLED = "cancelled"
    STALE = "stale"


class SubmissionResult(NamedTuple):
    outcome: Outcome
    status: Optional[RequestStatus] = None
    message: Optional[str] = None
    itinerary: Optional[ItineraryResponse] = None
    redirect: Optional[str] = None
    request_id: Optional[int] = None
    error: Optional[Exception] = None


def failure_message(error: Exception) -> Optional[str]:
    """What the user is told about a failed generation; None means stay silent."""
    if isinstance(error, APIError):
        if error.type == ErrorKind.CANCELLED:
            return None
        if error.type == ErrorKind.TIMEOUT_ERROR:
            return STILL_WORKING
        if error.type == ErrorKind.VALIDATION_ERROR:
            return error.message or CHECK_INPUT
    return GENERATION_FAILED


class ItinerarySubmitter:
    def __init__(
        self,
        service: ItineraryService,
        itinerary_store: ItineraryStore,
        trip_store: TripStore,
        notifier: Notifier,
        today: Callable[[], date] = date.today,
    ):
        self.service = service
        self.itinerary_store = itinerary_store
        self.trip_store = trip_store
        self.notifier = notifier
        self.today = today
        # request ids and cancel tokens are handed out together
        self._begin_lock = threading.Lock()

    def submit(self, request: GenerateItineraryRequest) -> SubmissionResult:
        try:
            validate_submission(request.travel_input, request.user_preferences, today=self.today())
        except FormValidationError as e:
            self.notifier.error(e.message)
            return SubmissionResult(Outcome.INVALID, message=e.message, error=e)

        self._record_trip(request)
        with self._begin_lock:
            request_id = self.itinerary_store.begin_request()
            token = self.service.new_token()
        toast = self.notifier.loading(INITIALIZING)
        self.notifier.update(toast, status_message(RequestStatus.GENERATING))

        try:
            itinerary = self.service.generate(request, cancel_token=token)
        except (APIError, ResponseParseError) as e:
            return self._failed(request_id, toast, e)

        if not self.itinerary_store.commit(request_id, itinerary):
            self.notifier.dismiss(toast)
            return SubmissionResult(Outcome.STALE, request_id=request_id)

        self.trip_store.set_itinerary(itinerary)
        self.notifier.dismiss(toast)
        self.notifier.success(GENERATED)
        return SubmissionResult(
            Outcome.COMPLETED,
            status=RequestStatus.COMPLETED,
            message=GENERATED,
            itinerary=itinerary,
            redirect=ITINERARY_PAGE,
            request_id=request_id,
        )

    def _failed(self, request_id: int, toast: int, error: Exception) -> SubmissionResult:
        self.notifier.dismiss(toast)
        if not self.itinerary_store.fail(request_id, error):
            return SubmissionResult(Outcome.STALE, request_id=request_id, error=error)

        message = failure_message(error)
        if isinstance(error, APIError) and error.type == ErrorKind.CANCELLED:
            logger.info(f"Itinerary request {request_id} cancelled")
            return SubmissionResult(Outcome.CANCELLED, request_id=request_id, error=error)

        if isinstance(error, APIError) and error.type == ErrorKind.TIMEOUT_ERROR:
            self.notifier.info(message)
            return SubmissionResult(
                Outcome.WAITING, status=RequestStatus.PROCESSING, message=message, request_id=request_id, error=error
            )

        self.notifier.error(message)
        if isinstance(error, APIError) and error.type == ErrorKind.VALIDATION_ERROR:
            return SubmissionResult(Outcome.REJECTED, status=RequestStatus.FAILED, message=message,
                                    request_id=request_id, error=error)

        logger.error(f"Itinerary request {request_id} failed: {error!r}")
        return SubmissionResult(Outcome.FAILED, status=RequestStatus.FAILED, message=message,
                                request_id=request_id, error=error)

    def cancel(self) -> None:
        self.service.cancel()

    def _record_trip(self, request: GenerateItineraryRequest) -> None:
        ti = request.travel_input
        self.trip_store.set_location("origin", ti.origin)
        self.trip_store.set_location("destination", ti.destination)
        self.trip_store.set_dates(DateRange(start_date=ti.start_date, return_date=ti.return_date))
        self.trip_store.set_preferences(request.user_preferences)
        self.trip_store.set_budget(request.user_preferences.budget)
