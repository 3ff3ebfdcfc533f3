"""Date and time-of-day helpers."""

import re
from datetime import datetime
from typing import Optional, Tuple

_TIME_RE = re.compile(r"([0-9]{2}):([0-9]{2})")


def get_date_str(moment: datetime) -> str:
    """Per-calendar-day key, e.g. '2026-10-19'."""
    return moment.strftime("%Y-%m-%d")


def parse_time(value) -> Optional[Tuple[int, int]]:
    """Parse an 'HH:MM' string into (hour, minute), or None if malformed."""
    if not isinstance(value, str):
        return None
    match = _TIME_RE.fullmatch(value)
    if not match:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return hour, minute


def time_on_day(day: datetime, hour: int, minute: int) -> datetime:
    """The given hour:minute on the same calendar day as ``day``."""
    return day.replace(hour=hour, minute=minute, second=0, microsecond=0)
