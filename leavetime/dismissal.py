"""
Dismissal Tracker

Holds the calendar date on which the leave reminder was last dismissed, so
further reminders are suppressed for the rest of that day. A single slot:
a 'YYYY-MM-DD' string or None.
"""

import contextlib
import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional

from leavetime.logger import get_logger


_instance: Optional["DismissalTracker"] = None


def get_dismissal_tracker(config=None) -> Optional["DismissalTracker"]:
    """Get or create the singleton DismissalTracker."""
    global _instance
    if _instance is None and config is not None:
        _instance = DismissalTracker(config.get("dismissal.path"), config)
    return _instance


class DismissalTracker:
    """Single-slot dismissal record, optionally persisted to a JSON file."""

    def __init__(self, path=None, config=None):
        self.logger = get_logger(__name__, config)
        self.path = Path(path).expanduser() if path else None
        self._lock = threading.Lock()
        self._dismissed = self._load()

    def _load(self) -> Optional[str]:
        if self.path is None or not self.path.exists():
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                value = json.load(f).get("dismissed")
        except (OSError, ValueError, AttributeError) as e:
            self.logger.warning(f"Could not read dismissal state from {self.path}: {e}")
            return None
        return value if isinstance(value, str) else None

    def _write(self, date: Optional[str]) -> None:
        """Replace the state file atomically; the old file survives a failed write."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=".dismissal-", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump({"dismissed": date}, f)
            os.replace(tmp_name, str(self.path))
        except Exception:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            raise

    def update_dismiss(self, date: Optional[str]) -> None:
        """Set the dismissal date. None clears it."""
        with self._lock:
            if self.path is not None:
                self._write(date)
            self._dismissed = date
        if date is None:
            self.logger.debug("Dismissal cleared")
        else:
            self.logger.info(f"Leave reminder dismissed for {date}")

    def get_dismiss(self) -> Optional[str]:
        with self._lock:
            return self._dismissed
