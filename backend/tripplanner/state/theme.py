import json
import logging
from pathlib import Path
from typing import Literal, Optional

from tripplanner.state.stores import Store

logger = logging.getLogger(__name__)

Theme = Literal["light", "dark"]
DEFAULT_THEME: Theme = "dark"


class ThemeStore(Store):
    """
    Light/dark preference. The only piece of state that outlives a session:
    it is written to a small JSON file and re-applied on the next load.
    """

    ACTIONS = ("set_theme", "toggle")

    def __init__(self, path: Optional[Path] = None):
        super().__init__()
        self.path = path
        self.theme: Theme = self._load()

    def _load(self) -> Theme:
        if self.path is None or not self.path.exists():
            return DEFAULT_THEME
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read theme file {self.path}: {e}")
            return DEFAULT_THEME
        theme = data.get("theme") if isinstance(data, dict) else None
        return theme if theme in ("light", "dark") else DEFAULT_THEME

    def _save(self) -> None:
        if self.path is None:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps({"theme": self.theme}), encoding="utf-8")
        except OSError as e:
            logger.warning(f"Could not persist theme to {self.path}: {e}")

    def set_theme(self, theme: Theme) -> None:
        if theme not in ("light", "dark"):
            raise ValueError(f"Unknown theme: {theme}")
        self.theme = theme
        self._save()
        self._emit("set_theme")

    def toggle(self) -> Theme:
        self.set_theme("light" if self.theme == "dark" else "dark")
        return self.theme
