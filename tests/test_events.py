import queue

from leavetime.events import ActivationSink, Event, EventType


def test_activate_queues_one_event():
    channel = queue.Queue()
    sink = ActivationSink(channel)
    sink.activate(source="test")
    event = channel.get_nowait()
    assert event.type == EventType.HOST_ACTIVATE
    assert event.data == "activate"
    assert event.source == "test"
    assert channel.empty()


def test_drain_empties_channel():
    sink = ActivationSink()
    sink.activate()
    sink.activate()
    assert len(sink.drain()) == 2
    assert sink.drain() == []


def test_repr_truncates_data():
    event = Event(EventType.NOTIFICATION_ACTION, data="x" * 200)
    assert "..." in repr(event)
    assert len(repr(event)) < 150
