from datetime import datetime

import pytest

from leavetime.config import Config
from leavetime.dismissal import DismissalTracker
from leavetime.events import ActivationSink
from leavetime.leave_notifier import LeaveTimeEvaluator
from leavetime.notification import SHOW
from leavetime.preferences import PreferencesStore


NOW = datetime(2026, 10, 19, 17, 30, 20)
TODAY = "2026-10-19"


class FakeProc:
    """Stands in for a finished notify-send process."""

    def __init__(self, stdout=""):
        self.stdout = stdout
        self.terminated = False

    def communicate(self):
        return self.stdout, None

    def poll(self):
        return 0 if not self.terminated else -15

    def terminate(self):
        self.terminated = True


class RecordingPresenter:
    """Presenter that records what it was asked to show."""

    def __init__(self):
        self.presented = []
        self.withdrawn = []

    def present(self, descriptor):
        self.presented.append(descriptor)
        descriptor.emit(SHOW)
        return True

    def withdraw(self, descriptor):
        self.withdrawn.append(descriptor)


def build_time_string(moment):
    return moment.strftime("%H:%M")


@pytest.fixture
def config():
    return Config({"logging": {"console": False}})


@pytest.fixture
def preferences(tmp_path, config):
    return PreferencesStore(tmp_path / "preferences.json", config)


@pytest.fixture
def tracker(tmp_path, config):
    return DismissalTracker(tmp_path / "dismissal.json", config)


@pytest.fixture
def sink():
    return ActivationSink()


@pytest.fixture
def presenter():
    return RecordingPresenter()


@pytest.fixture
def evaluator(preferences, tracker, sink, presenter, config):
    return LeaveTimeEvaluator(preferences, tracker, sink, presenter=presenter,
                              config=config, clock=lambda: NOW, platform="linux")
