import importlib.util
import sys
from pathlib import Path

import pytest

from leavetime import dismissal, leave_notifier, preferences

SCRIPT = Path(__file__).parent.parent / "scripts" / "leave_notify.py"


@pytest.fixture
def run_script(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "logging:\n  console: false\n"
        f"preferences:\n  path: {tmp_path / 'preferences.json'}\n"
        f"dismissal:\n  path: {tmp_path / 'dismissal.json'}\n"
        "notifications:\n  presenter: log\n"
    )
    for module in (dismissal, leave_notifier, preferences):
        monkeypatch.setattr(module, "_instance", None)

    spec = importlib.util.spec_from_file_location("leave_notify", SCRIPT)
    script = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(script)

    def run(*args):
        monkeypatch.setattr(sys, "argv", ["leave_notify.py", "--config", str(config_path), *args])
        return script.main()
    return run


def test_no_reminder_due_is_not_an_error(run_script, capsys):
    assert run_script("--leave-by", "33:90") == 0
    assert "No reminder due." in capsys.readouterr().out


def test_due_reminder(run_script, capsys):
    # Midnight has always passed today and repetition is on by default.
    assert run_script("--leave-by", "00:00") == 0
    assert "Time to Leave: Hey there! I think it's time to leave." in capsys.readouterr().out


def test_reset_dismiss_only(run_script, tmp_path):
    assert run_script("--reset-dismiss") == 0
    assert (tmp_path / "dismissal.json").read_text() == '{"dismissed": null}'


def test_missing_leave_time_is_a_usage_error(run_script):
    with pytest.raises(SystemExit) as exc:
        run_script()
    assert exc.value.code == 2
