"""
Leave-Time Evaluator

Decides, once per call, whether the user should be told their work day is
over. The decision runs through these gates in order, and the first one
that fails returns False:

    1. notifications enabled in preferences
    2. leave time is a valid 'HH:MM'
    3. not already dismissed today
    4. leave time reached (now >= target)
    5. within the grace window, or repetition enabled

When all pass, a NotificationDescriptor is built and wired so that dismissing
or closing it suppresses reminders for the rest of the day, and clicking it
asks the host to bring its window to the front.

The evaluator owns no timer. The host polls it.
"""

from datetime import datetime, timedelta
from typing import Callable, Optional, Union

from leavetime.date_aux import get_date_str, parse_time, time_on_day
from leavetime.dismissal import DismissalTracker, get_dismissal_tracker
from leavetime.events import ActivationSink
from leavetime.logger import get_logger
from leavetime.notification import (
    ACTION, APP_TITLE, CLICK, CLOSE, DISMISS_ACTION, SHOW,
    NotificationDescriptor, create_notification, get_presenter,
)
from leavetime.preferences import PreferencesStore, get_preferences_store


LEAVE_MESSAGE = "Hey there! I think it's time to leave."
DEFAULT_GRACE_MINUTES = 5

_instance: Optional["LeaveTimeEvaluator"] = None


def _whole_minutes(raw) -> Optional[int]:
    """Non-negative whole minutes from an int or a digit string, else None."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw if raw >= 0 else None
    if isinstance(raw, str) and raw.strip().isdecimal():
        return int(raw)
    return None


def get_leave_notifier(config=None) -> Optional["LeaveTimeEvaluator"]:
    """Get or create the singleton LeaveTimeEvaluator, wired from config."""
    global _instance
    if _instance is None and config is not None:
        _instance = LeaveTimeEvaluator(
            preferences=get_preferences_store(config),
            tracker=get_dismissal_tracker(config),
            activation=ActivationSink(),
            presenter=get_presenter(config),
            config=config,
        )
    return _instance


class LeaveTimeEvaluator:
    """Evaluates a configured leave time against the clock."""

    def __init__(self, preferences: PreferencesStore, tracker: DismissalTracker,
                 activation: ActivationSink, presenter=None, config=None,
                 clock: Callable[[], datetime] = datetime.now,
                 platform: Optional[str] = None):
        self.preferences = preferences
        self.tracker = tracker
        self.activation = activation
        self.presenter = presenter
        self.config = config
        self.clock = clock
        self.platform = platform
        self.logger = get_logger(__name__, config)

    def grace_window(self, preferences: dict) -> timedelta:
        """How long after the leave time a reminder fires without repetition.

        Taken from notifications.grace_minutes in config, else the
        notifications-interval preference, else 5 minutes.
        """
        raw = self.config.get("notifications.grace_minutes") if self.config else None
        if raw is None:
            raw = preferences.get("notifications-interval", DEFAULT_GRACE_MINUTES)
        minutes = _whole_minutes(raw)
        if minutes is None:
            self.logger.warning(f"Invalid grace window {raw!r}, using {DEFAULT_GRACE_MINUTES} minutes")
            minutes = DEFAULT_GRACE_MINUTES
        return timedelta(minutes=minutes)

    def create_leave_notification(self, leave_time,
                                  now: Optional[datetime] = None) -> Union[NotificationDescriptor, bool]:
        """Return a wired reminder if one is due, otherwise False."""
        preferences = self.preferences.get_preferences()
        if not preferences.get("notification"):
            self.logger.debug("Leave reminder skipped: notifications disabled")
            return False

        parsed = parse_time(leave_time)
        if parsed is None:
            self.logger.debug(f"Leave reminder skipped: invalid leave time {leave_time!r}")
            return False

        now = now or self.clock()
        today = get_date_str(now)
        if self.tracker.get_dismiss() == today:
            self.logger.debug(f"Leave reminder skipped: already dismissed on {today}")
            return False

        target = time_on_day(now, *parsed)
        if now < target:
            self.logger.debug(f"Leave reminder skipped: {leave_time} not reached yet")
            return False

        elapsed = now - target
        if elapsed > self.grace_window(preferences) and not preferences.get("repetition"):
            self.logger.debug(
                f"Leave reminder skipped: {leave_time} passed {int(elapsed.total_seconds() // 60)} "
                f"minutes ago and repetition is off"
            )
            return False

        notification = create_notification(
            LEAVE_MESSAGE, title=APP_TITLE,
            actions=[(DISMISS_ACTION, "Dismiss")],
            presenter=self.presenter, platform=self.platform, config=self.config,
        )
        self._wire(notification, today)
        self.logger.info(f"Leave reminder due (leave time {leave_time})")
        return notification

    def notify_leave(self, leave_time,
                     now: Optional[datetime] = None) -> Union[NotificationDescriptor, bool]:
        """Evaluate and, when a reminder is due, present it."""
        notification = self.create_leave_notification(leave_time, now)
        if notification is not False:
            notification.show()
        return notification

    def _wire(self, notification: NotificationDescriptor, today: str) -> None:
        def on_action(action):
            if action == DISMISS_ACTION:
                self.tracker.update_dismiss(today)

        def on_close():
            self.tracker.update_dismiss(today)

        def on_click():
            self.activation.activate(source="leave_notification")

        def on_show():
            self.logger.debug(f"Leave reminder shown: {notification.title}")

        notification.on(ACTION, on_action)
        notification.on(CLOSE, on_close)
        notification.on(CLICK, on_click)
        notification.on(SHOW, on_show)
