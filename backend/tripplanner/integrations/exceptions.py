from enum import Enum
from typing import Any, Optional


class IntegrationError(Exception):
    """Base exception for integration-level failures (config, connectivity, auth)."""


class UpstreamAPIError(Exception):
    """Represents an upstream API call failure (quota, 4xx/5xx, malformed response)."""


class ErrorKind(str, Enum):
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT_ERROR = "TIMEOUT_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    SERVER_ERROR = "SERVER_ERROR"
    CANCELLED = "CANCELLED"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class APIError(UpstreamAPIError):
    """Normalized failure raised by every public method of the API client.

    ``type`` is one of the closed ErrorKind set and ``code`` is a stable
    string (NET_001, TMT_001, VAL_001, VAL_002, SRV_001, REQ_001, UNK_001).
    ``details`` echoes the server body or extra context when there is any.
    ``status`` is the optional request status the planning API reported.
    """

    def __init__(
        self,
        type: ErrorKind,
        message: str,
        code: str,
        details: Any = None,
        status: Optional[str] = None,
    ):
        super().__init__(message)
        self.type = ErrorKind(type)
        self.message = message
        self.code = code
        self.details = details
        self.status = status

    def to_dict(self) -> dict:
        data = {"type": self.type.value, "message": self.message, "code": self.code}
        if self.details is not None:
            data["details"] = self.details
        if self.status is not None:
            data["status"] = self.status
        return data

    def __eq__(self, other):
        if not isinstance(other, APIError):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self):
        return hash((self.type, self.code, self.message))

    def __repr__(self):
        return f"APIError(type={self.type.value}, code={self.code}, message={self.message!r})"


class ResponseParseError(UpstreamAPIError):
    """A 2xx response whose body does not match the expected schema."""

    code = "PRS_001"

    def __init__(self, message: str, endpoint: Optional[str] = None, errors: Any = None):
        super().__init__(message)
        self.message = message
        self.endpoint = endpoint
        self.errors = errors
