import logging
import threading
from typing import Any, Callable, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_WAIT_SECONDS = 0.3


class Debouncer:
    """
    Delay calls to ``fn`` until no new call has arrived for ``wait`` seconds.

    Every call restarts the timer and replaces the pending arguments, so only
    the last call in a burst reaches ``fn``.
    """

    def __init__(self, fn: Callable[..., Any], wait: float = DEFAULT_WAIT_SECONDS):
        self.fn = fn
        self.wait = wait
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._pending: Optional[Tuple[tuple, dict]] = None

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def __call__(self, *args, **kwargs) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._pending = (args, kwargs)
            self._timer = threading.Timer(self.wait, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def _take(self) -> Optional[Tuple[tuple, dict]]:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            pending, self._pending = self._pending, None
            return pending

    def _fire(self) -> None:
        pending = self._take()
        if pending is not None:
            args, kwargs = pending
            self.fn(*args, **kwargs)

    def flush(self) -> None:
        """Deliver the pending call now instead of waiting for the timer."""
        self._fire()

    def cancel(self) -> None:
        if self._take() is not None:
            logger.debug("Dropped pending debounced call")
