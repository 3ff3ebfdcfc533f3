"""
Event types for the leave-time notifier.

Notification interactions and host signals are passed around as typed
events; the host drains them from a queue.Queue channel.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, List
import queue
import time


class EventType(Enum):
    """All event types the notifier produces."""

    # Notification lifecycle
    NOTIFICATION_SHOWN = auto()         # Presenter finished showing the reminder
    NOTIFICATION_ACTION = auto()        # Action button pressed (data: action key)
    NOTIFICATION_CLOSED = auto()        # Reminder closed by the user or the system
    NOTIFICATION_CLICKED = auto()       # Reminder body clicked

    # Host
    HOST_ACTIVATE = auto()              # Bring the host's main window to the front


@dataclass
class Event:
    """A typed event."""

    type: EventType
    data: Any = None
    timestamp: float = field(default_factory=time.monotonic)
    source: str = ""

    def __repr__(self):
        data_repr = repr(self.data)
        if len(data_repr) > 80:
            data_repr = data_repr[:77] + "..."
        return f"Event({self.type.name}, data={data_repr}, source={self.source!r})"


class ActivationSink:
    """Channel through which the notifier asks the host to activate itself."""

    def __init__(self, channel: "queue.Queue[Event]" = None):
        self.channel = channel if channel is not None else queue.Queue()

    def activate(self, source: str = "") -> None:
        self.channel.put(Event(EventType.HOST_ACTIVATE, data="activate", source=source))

    def drain(self) -> List[Event]:
        """Return and remove every queued event."""
        events = []
        while True:
            try:
                events.append(self.channel.get_nowait())
            except queue.Empty:
                return events
