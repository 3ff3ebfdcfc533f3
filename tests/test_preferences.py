import json

from leavetime.preferences import DEFAULT_PREFERENCES, PreferencesStore


def test_defaults(preferences):
    prefs = preferences.get_preferences()
    assert prefs["notification"] is True
    assert prefs["repetition"] is True
    assert prefs["notifications-interval"] == "5"


def test_get_returns_a_copy(preferences):
    prefs = preferences.get_preferences()
    prefs["notification"] = False
    assert preferences.get_preferences()["notification"] is True


def test_save_keeps_unknown_keys_and_fills_defaults(tmp_path, config):
    path = tmp_path / "preferences.json"
    store = PreferencesStore(path, config)
    store.save_preferences({"repetition": False, "theme": "dark"})

    reloaded = PreferencesStore(path, config).get_preferences()
    assert reloaded["repetition"] is False
    assert reloaded["theme"] == "dark"
    assert reloaded["notification"] is True
    assert json.loads(path.read_text())["theme"] == "dark"


def test_reset(preferences):
    preferences.save_preferences({"notification": False})
    preferences.reset_preferences()
    assert preferences.get_preferences() == DEFAULT_PREFERENCES


def test_malformed_file_uses_defaults(tmp_path, config):
    path = tmp_path / "preferences.json"
    path.write_text("not json at all")
    assert PreferencesStore(path, config).get_preferences() == DEFAULT_PREFERENCES
