import itertools
import logging
import threading
from collections import deque
from typing import Deque, List, Literal, Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)

Level = Literal["success", "error", "loading", "info"]

MAX_NOTIFICATIONS = 20


class Notification(BaseModel):
    id: int
    level: Level
    message: str


class Notifier:
    """
    Toast-style messages for the user; loading toasts stay until dismissed.

    Only the newest ``max_items`` are kept, so a long-lived session does not
    accumulate every message it ever showed.
    """

    def __init__(self, max_items: int = MAX_NOTIFICATIONS):
        self._ids = itertools.count(1)
        self._lock = threading.Lock()
        self.items: Deque[Notification] = deque(maxlen=max_items)

    def _push(self, level: Level, message: str) -> int:
        with self._lock:
            note = Notification(id=next(self._ids), level=level, message=message)
            self.items.append(note)
        log = logger.error if level == "error" else logger.info
        log(f"[{level}] {message}")
        return note.id

    def success(self, message: str) -> int:
        return self._push("success", message)

    def error(self, message: str) -> int:
        return self._push("error", message)

    def info(self, message: str) -> int:
        return self._push("info", message)

    def loading(self, message: str) -> int:
        return self._push("loading", message)

    def update(self, note_id: int, message: str) -> None:
        with self._lock:
            for i, note in enumerate(self.items):
                if note.id == note_id:
                    self.items[i] = note.model_copy(update={"message": message})
                    return

    def dismiss(self, note_id: Optional[int]) -> None:
        if note_id is None:
            return
        with self._lock:
            self.items = deque((n for n in self.items if n.id != note_id), maxlen=self.items.maxlen)

    def clear(self) -> None:
        with self._lock:
            self.items.clear()

    def messages(self, level: Optional[Level] = None) -> List[str]:
        return [n.message for n in self.items if level is None or n.level == level]

    @property
    def last(self) -> Optional[Notification]:
        return self.items[-1] if self.items else None
