from __future__ import annotations

import pytest

from rebootBot.config.behaviour import DEFAULT_BEHAVIOUR, BehaviourSettings, set_behaviour_settings
from rebootBot.config.settings import RouterSettings

from fakes import FakeBrowserFactory, FakeSite


@pytest.fixture(autouse=True)
def _reset_behaviour():
    yield
    set_behaviour_settings(DEFAULT_BEHAVIOUR)


@pytest.fixture
def router_settings() -> RouterSettings:
    return RouterSettings(username="ubnt", password="s3cret-pass", gateway_url="https://192.168.1.20/")


@pytest.fixture
def fast_behaviour() -> BehaviourSettings:
    return BehaviourSettings(settle_delay=3.0, element_timeout=0.1, navigation_timeout=0.1, exit_delay=3.0)


@pytest.fixture
def site() -> FakeSite:
    return FakeSite()


@pytest.fixture
def browser_factory(site: FakeSite) -> FakeBrowserFactory:
    return FakeBrowserFactory(site)


@pytest.fixture
def sleeps() -> list:
    return []


@pytest.fixture
def fake_sleep(sleeps: list):
    return sleeps.append


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run with no credentials in the environment and no .env file in reach."""
    for name in ("USERNAME", "PASSWORD", "DEFAULT_GATEWAY"):
        # setenv first so values loaded from .env files are undone too
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return tmp_path
