from __future__ import annotations

import json

import pytest

from rebootBot.config.behaviour import (
    DEFAULT_BEHAVIOUR,
    BehaviourSettings,
    get_behaviour_settings,
    load_behaviour_settings,
    set_behaviour_settings,
)


def test_defaults_when_no_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    settings = load_behaviour_settings()

    assert settings is DEFAULT_BEHAVIOUR
    assert settings.settle_delay == 3.0
    assert settings.exit_delay == 3.0


def test_yaml_overrides(tmp_path):
    path = tmp_path / "behaviour.yaml"
    path.write_text("settle_delay: 5\nelement_timeout: 20.5\nunknown: 1\n", encoding="utf-8")

    settings = load_behaviour_settings(path)

    assert settings.settle_delay == 5.0
    assert settings.element_timeout == 20.5
    assert settings.navigation_timeout == DEFAULT_BEHAVIOUR.navigation_timeout


def test_json_overrides_and_bad_values_fall_back(tmp_path):
    path = tmp_path / "behaviour.json"
    path.write_text(json.dumps({"navigation_timeout": 45, "exit_delay": "soon", "poll_interval": -1}), encoding="utf-8")

    settings = load_behaviour_settings(path)

    assert settings.navigation_timeout == 45.0
    assert settings.exit_delay == DEFAULT_BEHAVIOUR.exit_delay
    assert settings.poll_interval == DEFAULT_BEHAVIOUR.poll_interval


def test_discovers_default_location(tmp_path, monkeypatch):
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "behavior.yaml").write_text("settle_delay: 7\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    assert load_behaviour_settings().settle_delay == 7.0


def test_non_mapping_is_an_error(tmp_path):
    path = tmp_path / "behaviour.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")

    with pytest.raises(RuntimeError, match="Failed to load behaviour configuration"):
        load_behaviour_settings(path)


def test_set_and_get_active_settings():
    custom = BehaviourSettings(settle_delay=1.0)

    set_behaviour_settings(custom)

    assert get_behaviour_settings() is custom


def test_explicit_missing_file_is_an_error(tmp_path):
    with pytest.raises(RuntimeError, match="Failed to load behaviour configuration"):
        load_behaviour_settings(tmp_path / "absent.yaml")
