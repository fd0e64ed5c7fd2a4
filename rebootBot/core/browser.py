"""Minimal browser capability interface used by the workflows.

Workflows only talk to these protocols, so the sequencing logic can run
against the Selenium implementation in :mod:`rebootBot.core.driver` or an
in-memory fake.
"""
from __future__ import annotations

from typing import Callable, Protocol


class Element(Protocol):
    def click(self) -> None:
        ...


class Tab(Protocol):
    def navigate_to(self, url: str) -> None:
        ...

    def wait_until_navigated(self, timeout: float) -> None:
        ...

    def wait_for_element(self, selector: str, timeout: float) -> Element:
        ...

    def type_str(self, text: str) -> "Tab":
        """Type ``text`` into the focused element."""
        ...

    def press_key(self, key: str) -> "Tab":
        ...


class Browser(Protocol):
    def new_tab(self) -> Tab:
        ...

    def close(self) -> None:
        ...


BrowserFactory = Callable[[], Browser]
