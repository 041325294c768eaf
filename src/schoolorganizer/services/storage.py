from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

from schoolorganizer.config.logger import get_logger
from schoolorganizer.config.settings import settings
from schoolorganizer.state.app_state import OrganizerState

logger = get_logger("storage")


class StateStoreError(Exception):
    pass


class StateStore:
    """Keeps the whole organizer state in one JSON document, rewritten on every save."""

    def __init__(self, path: str = "school_organizer_v1.json") -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    @classmethod
    def from_settings(cls) -> "StateStore":
        return cls(settings.state_file)

    def load(self) -> OrganizerState:
        if not self.path.exists():
            return OrganizerState()
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.error("Failed to load state from %s: %s", self.path, exc)
            return OrganizerState()
        if not isinstance(raw, dict):
            logger.error("Ignoring state in %s: expected a JSON object", self.path)
            return OrganizerState()
        return OrganizerState.from_dict(raw)

    def save(self, state: OrganizerState) -> None:
        payload = json.dumps(state.to_dict(), indent=2)
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StateStoreError(f"Failed to save state to {self.path}: {exc}") from exc
        logger.debug("Saved state to %s", self.path)

    def clear(self) -> OrganizerState:
        state = OrganizerState()
        self.save(state)
        return state
