"""
Small query cache with per-entry freshness, used by the read-side services
(weather, transport, events) so repeated lookups for the same travel input
don't hit the planning API again while the data is still fresh.

Also owns the query retry rule: validation errors are final, anything else
is tried again up to MAX_QUERY_FAILURES failures in total.
"""

import json
import logging
import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple

from tripplanner.integrations.exceptions import APIError, ErrorKind

logger = logging.getLogger(__name__)

MAX_QUERY_FAILURES = 3


def make_key(*parts: Any) -> str:
    """Stable cache key from JSON-serialisable parts."""
    return json.dumps(parts, sort_keys=True, default=str)


def should_retry(failure_count: int, error: Exception) -> bool:
    if isinstance(error, APIError) and error.type == ErrorKind.VALIDATION_ERROR:
        return False
    return failure_count < MAX_QUERY_FAILURES


class QueryCache:
    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._entries: Dict[str, Tuple[Any, float]] = {}
        self._lock = threading.RLock()
        self._clock = clock

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: Any, stale_time: float) -> None:
        with self._lock:
            self._entries[key] = (value, self._clock() + stale_time)

    def invalidate(self, prefix: str = "") -> int:
        """Drop every entry whose key starts with the JSON encoding of ``prefix``."""
        with self._lock:
            if not prefix:
                count = len(self._entries)
                self._entries.clear()
                return count
            marker = json.dumps([prefix])[:-1]
            stale = [k for k in self._entries if k.startswith(marker)]
            for k in stale:
                del self._entries[k]
            return len(stale)

    def fetch(self, key: str, fn: Callable[[], Any], stale_time: float) -> Any:
        """Return the cached value for ``key`` or compute it, retrying per should_retry."""
        cached = self.get(key)
        if cached is not None:
            return cached

        failures = 0
        while True:
            try:
                value = fn()
                break
            except Exception as e:
                failures += 1
                if not should_retry(failures, e):
                    raise
                logger.warning(f"Query {key} failed (attempt {failures}), retrying: {e}")

        self.set(key, value, stale_time)
        return value
