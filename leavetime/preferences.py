"""
User Preferences

JSON-file preferences store. The leave-time evaluator only reads the
``notification``, ``repetition`` and ``notifications-interval`` keys; any
other keys are carried through untouched.

Uses the same singleton pattern as the dismissal tracker.
"""

import json
import threading
from pathlib import Path
from typing import Optional, Dict, Any

from leavetime.logger import get_logger


DEFAULT_PREFERENCES: Dict[str, Any] = {
    "notification": True,
    "repetition": True,
    "notifications-interval": "5",
}

_instance: Optional["PreferencesStore"] = None


def get_preferences_store(config=None) -> Optional["PreferencesStore"]:
    """Get or create the singleton PreferencesStore.

    Call with config on first invocation (from the host script).
    Call with no args afterwards to retrieve the existing instance.
    """
    global _instance
    if _instance is None and config is not None:
        _instance = PreferencesStore(config.get("preferences.path"), config)
    return _instance


class PreferencesStore:
    """Loads, saves and resets user preferences.

    With no path the preferences live in memory only.
    """

    def __init__(self, path=None, config=None):
        self.logger = get_logger(__name__, config)
        self.path = Path(path).expanduser() if path else None
        self._lock = threading.Lock()
        self._prefs = self._load()

    def _load(self) -> Dict[str, Any]:
        prefs = dict(DEFAULT_PREFERENCES)
        if self.path is None or not self.path.exists():
            return prefs
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                stored = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            self.logger.warning(f"Could not read preferences from {self.path}, using defaults: {e}")
            return prefs
        if not isinstance(stored, dict):
            self.logger.warning(f"Ignoring malformed preferences file {self.path}")
            return prefs
        prefs.update(stored)
        return prefs

    def _write(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self._prefs, f, indent=4, sort_keys=True)

    def get_preferences(self) -> Dict[str, Any]:
        """Return a copy of the current preferences."""
        with self._lock:
            return dict(self._prefs)

    def save_preferences(self, preferences: Dict[str, Any]) -> None:
        """Replace the stored preferences, filling in missing defaults."""
        merged = dict(DEFAULT_PREFERENCES)
        merged.update(preferences)
        with self._lock:
            self._prefs = merged
            self._write()
        self.logger.debug(f"Preferences saved: {merged}")

    def reset_preferences(self) -> None:
        """Restore the default preferences."""
        with self._lock:
            self._prefs = dict(DEFAULT_PREFERENCES)
            self._write()
        self.logger.info("Preferences reset to defaults")
