"""
Notifications

A NotificationDescriptor is a one-shot reminder: a title/body pair rendered
into the payload shape the platform expects, plus one continuation per
interaction kind (show, action, close, click).

Presenters put descriptors on screen:
    NotifySendPresenter: Linux desktops, via notify-send --wait
    LogPresenter: everywhere else, writes the reminder to the log
"""

import subprocess
import sys
import threading
from typing import Callable, Dict, List, Optional, Sequence, Tuple
from xml.sax.saxutils import escape, quoteattr

from leavetime.events import Event, EventType
from leavetime.logger import get_logger


APP_TITLE = "Time to Leave"
DISMISS_ACTION = "dismiss"

# (action key, button label)
Action = Tuple[str, str]

SHOW = "show"
ACTION = "action"
CLOSE = "close"
CLICK = "click"
KINDS = (SHOW, ACTION, CLOSE, CLICK)
TERMINAL_KINDS = (ACTION, CLOSE, CLICK)

_EVENT_TYPES = {
    SHOW: EventType.NOTIFICATION_SHOWN,
    ACTION: EventType.NOTIFICATION_ACTION,
    CLOSE: EventType.NOTIFICATION_CLOSED,
    CLICK: EventType.NOTIFICATION_CLICKED,
}


# ---------------------------------------------------------------------------
# Payloads
# ---------------------------------------------------------------------------

class NotificationPayload:
    """Platform rendering of one canonical (title, body) pair."""

    def __init__(self, title: str, body: str, actions: Sequence[Action] = ()):
        self.title = title
        self.body = body
        self.actions = list(actions)


class PlainPayload(NotificationPayload):
    """Plain title/body, used by freedesktop and macOS notifications."""


class ToastXmlPayload(NotificationPayload):
    """Windows toast template."""

    @property
    def toast_xml(self) -> str:
        buttons = "".join(
            f"<action content={quoteattr(label)} arguments={quoteattr(key)} activationType=\"foreground\"/>"
            for key, label in self.actions
        )
        actions_xml = f"<actions>{buttons}</actions>" if buttons else ""
        return (
            "<toast>"
            "<visual><binding template=\"ToastText02\">"
            f"<text id=\"1\">{escape(self.title)}</text>"
            f"<text id=\"2\">{escape(self.body)}</text>"
            "</binding></visual>"
            f"{actions_xml}"
            "</toast>"
        )


def payload_for_platform(title: str, body: str, actions: Sequence[Action] = (),
                         platform: Optional[str] = None) -> NotificationPayload:
    platform = platform or sys.platform
    if platform == "win32":
        return ToastXmlPayload(title, body, actions)
    return PlainPayload(title, body, actions)


# ---------------------------------------------------------------------------
# Descriptor
# ---------------------------------------------------------------------------

class NotificationDescriptor:
    """A single reminder and its interaction continuations.

    Each continuation fires at most once, and action/close/click are mutually
    exclusive: after one of them fires the others are ignored.
    """

    def __init__(self, payload: NotificationPayload, presenter=None, config=None):
        self.payload = payload
        self.presenter = presenter
        self.logger = get_logger(__name__, config)
        self.history: List[Event] = []
        self._continuations: Dict[str, Callable] = {}
        self._fired = set()
        self._lock = threading.Lock()

    @property
    def title(self) -> str:
        return self.payload.title

    @property
    def body(self) -> str:
        return self.payload.body

    @property
    def actions(self) -> List[Action]:
        return self.payload.actions

    @property
    def toast_xml(self) -> Optional[str]:
        if isinstance(self.payload, ToastXmlPayload):
            return self.payload.toast_xml
        return None

    @property
    def finished(self) -> bool:
        return any(kind in self._fired for kind in TERMINAL_KINDS)

    def on(self, kind: str, callback: Callable) -> None:
        """Register the continuation for ``kind``. Only one per kind."""
        if kind not in KINDS:
            raise ValueError(f"Unknown notification event: {kind!r}")
        if kind in self._continuations:
            raise ValueError(f"A {kind!r} handler is already registered")
        self._continuations[kind] = callback

    def listener_count(self, kind: str) -> int:
        return 1 if kind in self._continuations else 0

    def emit(self, kind: str, payload=None) -> bool:
        """Deliver an interaction. Returns True if a continuation ran."""
        if kind not in KINDS:
            raise ValueError(f"Unknown notification event: {kind!r}")
        with self._lock:
            if kind in self._fired or (kind in TERMINAL_KINDS and self.finished):
                self.logger.debug(f"Ignoring repeated '{kind}' on '{self.title}'")
                return False
            self._fired.add(kind)
            self.history.append(Event(_EVENT_TYPES[kind], data=payload, source="notification"))
            callback = self._continuations.get(kind)
        if callback is None:
            return False
        if kind == ACTION:
            callback(payload)
        else:
            callback()
        return True

    def show(self) -> bool:
        if self.presenter is None:
            self.logger.warning(f"No presenter for notification '{self.title}'")
            return False
        return self.presenter.present(self)

    def close(self) -> None:
        """Withdraw the notification and deliver 'close'."""
        if self.presenter is not None:
            self.presenter.withdraw(self)
        self.emit(CLOSE)

    def __repr__(self):
        return f"NotificationDescriptor(title={self.title!r}, body={self.body!r})"


def create_notification(body: str, title: str = APP_TITLE,
                        actions: Sequence[Action] = (), presenter=None,
                        platform: Optional[str] = None, config=None) -> NotificationDescriptor:
    """Build an unwired notification for the current platform."""
    payload = payload_for_platform(title, body, actions, platform)
    return NotificationDescriptor(payload, presenter=presenter, config=config)


# ---------------------------------------------------------------------------
# Presenters
# ---------------------------------------------------------------------------

class NotifySendPresenter:
    """Shows reminders with notify-send and maps the outcome back.

    notify-send --wait prints the key of the invoked action: our action keys
    become 'action', 'default' (body click) becomes 'click', and no output
    (closed or expired) becomes 'close'.
    """

    def __init__(self, config=None):
        self.logger = get_logger(__name__, config)
        urgency = config.get("notifications.urgency", "normal") if config else "normal"
        self.urgency = urgency if urgency in ("low", "normal", "critical") else "normal"
        self._procs: Dict[int, subprocess.Popen] = {}

    def build_command(self, descriptor: NotificationDescriptor) -> List[str]:
        cmd = ["notify-send", f"--app-name={APP_TITLE}", f"--urgency={self.urgency}",
               "--wait", "--action=default=Open"]
        for key, label in descriptor.actions:
            cmd.append(f"--action={key}={label}")
        cmd.append(descriptor.title)
        if descriptor.body:
            cmd.append(descriptor.body)
        return cmd

    def present(self, descriptor: NotificationDescriptor) -> bool:
        try:
            proc = subprocess.Popen(self.build_command(descriptor),
                                    stdout=subprocess.PIPE, stderr=subprocess.DEVNULL,
                                    text=True)
        except OSError as e:
            self.logger.warning(f"notify-send failed: {e}")
            return False

        self._procs[id(descriptor)] = proc
        descriptor.emit(SHOW)
        threading.Thread(target=self._wait, args=(descriptor, proc), daemon=True,
                         name="leave-notification").start()
        return True

    def _wait(self, descriptor: NotificationDescriptor, proc: subprocess.Popen) -> None:
        stdout, _ = proc.communicate()
        outcome = (stdout or "").strip()
        action_keys = {key for key, _ in descriptor.actions}
        # Stays open until the outcome has been applied.
        try:
            if outcome == "default":
                descriptor.emit(CLICK)
            elif outcome in action_keys:
                descriptor.emit(ACTION, outcome)
            else:
                descriptor.emit(CLOSE)
        except OSError as e:
            self.logger.warning(f"Could not record outcome '{outcome}' of '{descriptor.title}': {e}")
        finally:
            self._procs.pop(id(descriptor), None)

    def is_open(self, descriptor: NotificationDescriptor) -> bool:
        return id(descriptor) in self._procs

    def withdraw(self, descriptor: NotificationDescriptor) -> None:
        proc = self._procs.pop(id(descriptor), None)
        if proc is not None and proc.poll() is None:
            proc.terminate()


class LogPresenter:
    """Fallback presenter for platforms without a native backend."""

    def __init__(self, config=None):
        self.logger = get_logger(__name__, config)

    def present(self, descriptor: NotificationDescriptor) -> bool:
        self.logger.info(f"[{descriptor.title}] {descriptor.body}")
        descriptor.emit(SHOW)
        return True

    def withdraw(self, descriptor: NotificationDescriptor) -> None:
        pass

    def is_open(self, descriptor: NotificationDescriptor) -> bool:
        return False


def get_presenter(config=None):
    """Pick a presenter from ``notifications.presenter`` or the platform."""
    default = "notify-send" if sys.platform.startswith("linux") else "log"
    name = config.get("notifications.presenter", default) if config else default
    if name == "notify-send":
        return NotifySendPresenter(config)
    if name == "log":
        return LogPresenter(config)
    raise ValueError(f"Unknown notification presenter: {name!r}")
