"""
HTTP client for the planning API.

Wraps a requests.Session so every call:
- goes to the configured base URL with a per-endpoint timeout
  (itinerary endpoints get the long one)
- retries on 408/429/5xx through urllib3's Retry mounted on the session
- raises only APIError, never a requests/urllib3 exception

Itinerary generation POSTs share one cancellation source: starting a new
generation cancels whatever generation is still in flight.
"""

import logging
from typing import Any, Dict, NamedTuple, Optional, Tuple

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from tripplanner.config import get_settings
from tripplanner.integrations.cancellation import CancelToken, CancelTokenSource, RequestCancelled
from tripplanner.integrations.exceptions import (
    APIError,
    ErrorKind,
    IntegrationError,
    ResponseParseError,
)

logger = logging.getLogger(__name__)

ITINERARY_PATH = "/api/itinerary"
RETRY_STATUS_CODES: Tuple[int, ...] = (408, 429, 500, 502, 503, 504)


class RetryPolicy(NamedTuple):
    attempts: int
    delay: float  # seconds between attempts
    status_codes: Tuple[int, ...] = RETRY_STATUS_CODES


DEFAULT_RETRY = RetryPolicy(attempts=3, delay=1.0)
ITINERARY_RETRY = RetryPolicy(attempts=2, delay=2.0)


class FixedDelayRetry(Retry):
    """urllib3 Retry that waits a fixed delay instead of backing off exponentially."""

    def __init__(self, *args, delay: float = 0.0, **kwargs):
        super().__init__(*args, **kwargs)
        self.delay = delay

    def new(self, **kw):
        retry = super().new(**kw)
        retry.delay = self.delay
        return retry

    def get_backoff_time(self) -> float:
        return self.delay


def build_retry(policy: RetryPolicy) -> FixedDelayRetry:
    retries = max(policy.attempts - 1, 0)
    return FixedDelayRetry(
        total=retries,
        connect=retries,
        read=False,  # read timeouts surface as TIMEOUT_ERROR, never replayed
        status=retries,
        other=0,
        status_forcelist=policy.status_codes,
        allowed_methods=None,  # the policy applies to POST generation calls too
        raise_on_status=False,
        respect_retry_after_header=False,  # delays are fixed, Retry-After is ignored
        delay=policy.delay,
    )


def _response_body(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or None


def handle_error(error: BaseException, method: Optional[str] = None) -> APIError:
    """Map any exception raised around a request onto the closed error taxonomy.

    Pure with respect to its input: the same exception (or an equal one)
    always yields the same kind, code and message.
    """
    if isinstance(error, APIError):
        return error

    if isinstance(error, RequestCancelled):
        return APIError(
            ErrorKind.CANCELLED,
            "Request was cancelled",
            "REQ_001",
            details={"reason": error.reason},
        )

    # ConnectTimeout is also a ConnectionError, so timeouts are checked first
    if isinstance(error, requests.Timeout):
        return APIError(ErrorKind.TIMEOUT_ERROR, "Request timed out", "TMT_001")

    if isinstance(error, requests.RequestException):
        response = error.response
        if response is None:
            return APIError(
                ErrorKind.NETWORK_ERROR,
                "Network connection error",
                "NET_001",
                details={"reason": str(error)},
            )

        status_code = response.status_code
        body = _response_body(response)
        body_dict = body if isinstance(body, dict) else {}
        reported_status = body_dict.get("status") if isinstance(body_dict.get("status"), str) else None

        if status_code == 405:
            request_method = method
            if request_method is None and error.request is not None:
                request_method = error.request.method
            return APIError(
                ErrorKind.VALIDATION_ERROR,
                "Invalid request method",
                "VAL_002",
                details={"method": request_method.lower() if request_method else None},
            )

        if status_code == 400:
            return APIError(
                ErrorKind.VALIDATION_ERROR,
                body_dict.get("message") or "Invalid request data",
                "VAL_001",
                details=body,
                status=reported_status,
            )

        if status_code >= 500:
            return APIError(
                ErrorKind.SERVER_ERROR,
                body_dict.get("message") or "Server error occurred",
                "SRV_001",
                details=body,
                status=reported_status,
            )

        return APIError(
            ErrorKind.UNKNOWN_ERROR,
            "An unexpected error occurred",
            "UNK_001",
            details={"status_code": status_code, "body": body},
            status=reported_status,
        )

    return APIError(
        ErrorKind.UNKNOWN_ERROR,
        "An unexpected error occurred",
        "UNK_001",
        details={"reason": str(error)},
    )


class ApiClient:
    """Typed access to the planning API: get/post/put/delete returning decoded JSON."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        default_timeout: Optional[float] = None,
        itinerary_timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        settings = get_settings()
        base_url = (base_url or settings.api_url).rstrip("/")
        if not base_url.startswith(("http://", "https://")):
            raise IntegrationError(f"Invalid API base URL: {base_url!r}")

        self.base_url = base_url
        self.default_timeout = default_timeout or settings.default_timeout
        self.itinerary_timeout = itinerary_timeout or settings.itinerary_timeout

        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        # Session.mount keeps prefixes ordered longest first
        for prefix in (self.base_url + ITINERARY_PATH, self.base_url):
            self.session.mount(prefix, HTTPAdapter(max_retries=build_retry(self.retry_policy_for(prefix))))

        self._cancel_source = CancelTokenSource()

    @staticmethod
    def is_itinerary_url(url: str) -> bool:
        return ITINERARY_PATH in url

    def timeout_for(self, url: str) -> float:
        return self.itinerary_timeout if self.is_itinerary_url(url) else self.default_timeout

    def retry_policy_for(self, url: str) -> RetryPolicy:
        return ITINERARY_RETRY if self.is_itinerary_url(url) else DEFAULT_RETRY

    def _full_url(self, url: str) -> str:
        if url.startswith(("http://", "https://")):
            return url
        return f"{self.base_url}/{url.lstrip('/')}"

    def cancel_request(self) -> None:
        """Cancel the in-flight itinerary generation, if any."""
        self._cancel_source.cancel("Operation cancelled by user.")

    def renew_cancel_token(self) -> CancelToken:
        """Cancel any in-flight generation and return the token for the next one."""
        return self._cancel_source.renew("Operation cancelled due to new request.")

    def _request(
        self,
        method: str,
        url: str,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> Any:
        full_url = self._full_url(url)
        token = cancel_token
        if token is None and method == "POST" and self.is_itinerary_url(url):
            token = self.renew_cancel_token()

        try:
            if token is not None:
                token.raise_if_cancelled()
            response = self.session.request(
                method,
                full_url,
                json=json,
                params=params,
                timeout=timeout or self.timeout_for(url),
            )
            if token is not None:
                token.raise_if_cancelled()
            if not 200 <= response.status_code < 300:
                raise requests.HTTPError(
                    f"{response.status_code} Error for url: {full_url}", response=response
                )
        except Exception as exc:
            # a cancelled call reports CANCELLED however the transport ended
            if token is not None and token.is_cancelled and not isinstance(exc, RequestCancelled):
                api_error = handle_error(RequestCancelled(token.reason), method=method)
            else:
                api_error = handle_error(exc, method=method)
            if api_error.type == ErrorKind.CANCELLED:
                logger.info(f"{method} {url} cancelled: {api_error.details}")
            else:
                logger.warning(f"{method} {url} failed: {api_error.code} {api_error.message}")
            raise api_error from exc

        logger.info(f"{method} {url} -> {response.status_code}")
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ResponseParseError(f"Response from {url} is not valid JSON", endpoint=url) from exc

    def get(self, url: str, params: Optional[Dict[str, Any]] = None, timeout: Optional[float] = None) -> Any:
        return self._request("GET", url, params=params, timeout=timeout)

    def post(
        self,
        url: str,
        data: Any = None,
        timeout: Optional[float] = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> Any:
        return self._request("POST", url, json={} if data is None else data, timeout=timeout, cancel_token=cancel_token)

    def put(self, url: str, data: Any = None, timeout: Optional[float] = None) -> Any:
        return self._request("PUT", url, json={} if data is None else data, timeout=timeout)

    def delete(self, url: str, params: Optional[Dict[str, Any]] = None, timeout: Optional[float] = None) -> Any:
        return self._request("DELETE", url, params=params, timeout=timeout)
