import pytest

from leavetime.config import Config, load_config


def test_dotted_get():
    config = Config({"notifications": {"grace_minutes": 7, "presenter": "log"}})
    assert config.get("notifications.grace_minutes") == 7
    assert config.get("notifications.urgency", "normal") == "normal"
    assert config.get("notifications.grace_minutes.extra") is None
    assert config.get("missing.key", 3) == 3


def test_load_from_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("host:\n  poll_interval_seconds: 30\n")
    config = load_config(path)
    assert config.get("host.poll_interval_seconds") == 30
    assert config.path == path


def test_missing_file_is_empty(tmp_path):
    config = load_config(tmp_path / "nope.yaml")
    assert config.get("host.poll_interval_seconds", 60) == 60
    assert config.path is None


def test_env_var(tmp_path, monkeypatch):
    path = tmp_path / "custom.yaml"
    path.write_text("logging:\n  level: DEBUG\n")
    monkeypatch.setenv("LEAVETIME_CONFIG", str(path))
    assert load_config().get("logging.level") == "DEBUG"


def test_non_mapping_is_rejected(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(ValueError):
        load_config(path)
