"""Timing configuration management."""
from __future__ import annotations

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict, Optional

import yaml


@dataclass(frozen=True)
class BehaviourSettings:
    """Waits and delays used by the workflow and the CLI."""

    settle_delay: float = 3.0
    element_timeout: float = 10.0
    navigation_timeout: float = 30.0
    exit_delay: float = 3.0
    poll_interval: float = 0.5


DEFAULT_BEHAVIOUR = BehaviourSettings()
_CURRENT_SETTINGS: BehaviourSettings = DEFAULT_BEHAVIOUR


def get_behaviour_settings() -> BehaviourSettings:
    """Return the active behaviour configuration."""

    return _CURRENT_SETTINGS


def set_behaviour_settings(settings: BehaviourSettings) -> None:
    """Replace the active behaviour configuration."""

    global _CURRENT_SETTINGS
    _CURRENT_SETTINGS = settings


DEFAULT_CONFIG_PATHS = (Path("config/behavior.yaml"), Path("config/behaviour.yaml"))


def load_behaviour_settings(path: Optional[Path] = None) -> BehaviourSettings:
    """Load behaviour settings from a YAML or JSON file.

    Without ``path`` the first of ``DEFAULT_CONFIG_PATHS`` that exists is used;
    when none exists the defaults are returned.
    """

    if path is None:
        path = next((candidate for candidate in DEFAULT_CONFIG_PATHS if candidate.is_file()), None)
        if path is None:
            return DEFAULT_BEHAVIOUR

    file_path = Path(path).expanduser().absolute()
    try:
        data = _read_config_file(file_path)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        raise RuntimeError(f"Failed to load behaviour configuration from {file_path}: {exc}") from exc
    return _parse_behaviour_settings(data)


def _read_config_file(path: Path) -> Dict[str, object]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}

    if path.suffix.lower() in {".yaml", ".yml"}:
        loaded = yaml.safe_load(text) or {}
    else:
        loaded = json.loads(text)

    if not isinstance(loaded, dict):
        raise ValueError("Behaviour configuration must be a mapping at the top level")
    return loaded


def _parse_behaviour_settings(raw: Dict[str, object]) -> BehaviourSettings:
    values = {
        item.name: _coerce_number(raw.get(item.name), getattr(DEFAULT_BEHAVIOUR, item.name))
        for item in fields(BehaviourSettings)
    }
    return BehaviourSettings(**values)


def _coerce_number(value: object, default: float) -> float:
    if isinstance(value, bool):
        return default
    try:
        number = float(value) if value is not None else default
    except (TypeError, ValueError):
        return default
    return number if number >= 0 else default
