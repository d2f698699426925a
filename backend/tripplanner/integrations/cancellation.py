"""
Cancellation tokens for in-flight requests.

requests cannot abort a call that is already on the wire, so cancellation is
cooperative: the client checks the token before sending and again when the
response comes back, and drops the result if the token was cancelled.
"""

import threading
from typing import Optional


class RequestCancelled(Exception):
    """Raised internally when a request's token was cancelled."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class CancelToken:
    def __init__(self):
        self._event = threading.Event()
        self.reason: Optional[str] = None

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str) -> None:
        if self._event.is_set():
            return
        self.reason = reason
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self.is_cancelled:
            raise RequestCancelled(self.reason or "Request was cancelled")


class CancelTokenSource:
    """Holds the current token and swaps it for a fresh one on demand."""

    def __init__(self):
        self._lock = threading.Lock()
        self._token = CancelToken()

    @property
    def token(self) -> CancelToken:
        return self._token

    def cancel(self, reason: str) -> None:
        with self._lock:
            self._token.cancel(reason)

    def renew(self, reason: str) -> CancelToken:
        """Cancel the current token and return the new one."""
        with self._lock:
            self._token.cancel(reason)
            self._token = CancelToken()
            return self._token
