"""Selenium-backed browser session management."""
from __future__ import annotations

import logging
import shutil
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from selenium import webdriver
from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.common.by import By
from selenium.webdriver.common.keys import Keys
from selenium.webdriver.remote.webelement import WebElement
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait
from webdriver_manager.chrome import ChromeDriverManager

from .state import BrowserProtocolError, ElementNotFoundError, LaunchError, NavigationError


logger = logging.getLogger(__name__)


@dataclass
class DriverConfig:
    """Runtime configuration for a Selenium Chrome session."""

    window_size: str = "1280,900"
    headless: bool = True
    ignore_certificate_errors: bool = True
    poll_interval: float = 0.5


def wait_for(driver, condition, timeout: float = 10, poll_interval: float = 0.5):
    return WebDriverWait(driver, timeout, poll_frequency=poll_interval).until(condition)


@contextmanager
def _protocol_errors(action: str) -> Iterator[None]:
    try:
        yield
    except WebDriverException as exc:
        raise BrowserProtocolError(f"{action} failed: {exc.msg or exc}") from exc


class DriverManager:
    """Factory responsible for creating and disposing Selenium drivers."""

    def __init__(self, config: Optional[DriverConfig] = None):
        self.config = config or DriverConfig()
        self._driver: Optional[webdriver.Chrome] = None
        self._profile_path: Optional[Path] = None

    @property
    def driver(self) -> webdriver.Chrome:
        if self._driver is None:
            raise RuntimeError("Driver has not been created yet. Call create() first.")
        return self._driver

    @property
    def profile_path(self) -> Optional[Path]:
        return self._profile_path

    def create(self) -> webdriver.Chrome:
        if self._driver:
            return self._driver

        options = webdriver.ChromeOptions()
        if self.config.window_size:
            options.add_argument(f"--window-size={self.config.window_size}")
        if self.config.headless:
            options.add_argument("--headless=new")
        if self.config.ignore_certificate_errors:
            # Router admin pages are served with self-signed certificates
            options.add_argument("--ignore-certificate-errors")
            options.accept_insecure_certs = True

        # Baseline stability flags for unattended usage
        for flag in (
            "--no-sandbox",
            "--disable-dev-shm-usage",
            "--disable-extensions",
            "--disable-gpu",
            "--disable-notifications",
            "--disable-infobars",
            "--disable-background-networking",
            "--disable-sync",
            "--log-level=3",
        ):
            options.add_argument(flag)

        # Fresh profile per run so no browser state survives between runs
        self._profile_path = Path(tempfile.mkdtemp(prefix="rebootbot-chrome-"))
        options.add_argument(f"--user-data-dir={self._profile_path}")

        try:
            self._driver = webdriver.Chrome(
                service=Service(ChromeDriverManager().install()),
                options=options,
            )
        except (WebDriverException, OSError, ValueError) as exc:
            self._remove_profile()
            raise LaunchError(f"Could not start Chrome: {exc}") from exc

        logger.debug("Chrome started (headless=%s, profile=%s)", self.config.headless, self._profile_path)
        return self._driver

    def quit(self) -> None:
        if self._driver:
            try:
                self._driver.quit()
            except WebDriverException as exc:  # pragma: no cover - dependent on Chrome
                logger.warning("Chrome did not shut down cleanly: %s", exc)
            self._driver = None
        self._remove_profile()

    def _remove_profile(self) -> None:
        if self._profile_path and self._profile_path.exists():
            shutil.rmtree(self._profile_path, ignore_errors=True)
        self._profile_path = None


class SeleniumElement:
    """Element handle returned by :meth:`SeleniumTab.wait_for_element`."""

    def __init__(self, element: WebElement, selector: str):
        self._element = element
        self.selector = selector

    def click(self) -> None:
        with _protocol_errors(f"Clicking '{self.selector}'"):
            self._element.click()


class SeleniumTab:
    """Single browsing context driven through a Chrome window handle."""

    def __init__(self, driver: webdriver.Chrome, handle: str, *, poll_interval: float = 0.5):
        self._driver = driver
        self.handle = handle
        self.poll_interval = poll_interval

    def _activate(self) -> None:
        if self._driver.current_window_handle != self.handle:
            self._driver.switch_to.window(self.handle)

    def navigate_to(self, url: str) -> None:
        try:
            self._activate()
            self._driver.get(url)
        except WebDriverException as exc:
            raise NavigationError(f"Could not open {url}: {exc.msg or exc}") from exc

    def wait_until_navigated(self, timeout: float) -> None:
        def _loaded(driver) -> bool:
            return driver.execute_script("return document.readyState") == "complete"

        try:
            self._activate()
            wait_for(self._driver, _loaded, timeout, self.poll_interval)
        except TimeoutException as exc:
            raise NavigationError(f"Navigation did not complete within {timeout:g} seconds") from exc
        except WebDriverException as exc:
            raise NavigationError(f"Navigation failed: {exc.msg or exc}") from exc

    def wait_for_element(self, selector: str, timeout: float) -> SeleniumElement:
        try:
            self._activate()
            element = wait_for(
                self._driver,
                EC.presence_of_element_located((By.CSS_SELECTOR, selector)),
                timeout,
                self.poll_interval,
            )
        except TimeoutException as exc:
            raise ElementNotFoundError(selector, timeout) from exc
        except WebDriverException as exc:
            raise BrowserProtocolError(f"Looking up '{selector}' failed: {exc.msg or exc}") from exc
        return SeleniumElement(element, selector)

    def type_str(self, text: str) -> "SeleniumTab":
        with _protocol_errors("Typing"):
            self._activate()
            self._driver.switch_to.active_element.send_keys(text)
        return self

    def press_key(self, key: str) -> "SeleniumTab":
        with _protocol_errors(f"Pressing {key}"):
            self._activate()
            self._driver.switch_to.active_element.send_keys(getattr(Keys, key.upper(), key))
        return self


class SeleniumBrowser:
    """Chrome instance owned by a :class:`DriverManager`."""

    def __init__(self, manager: DriverManager):
        self.manager = manager
        self._tabs: list[SeleniumTab] = []

    @classmethod
    def launch(cls, config: Optional[DriverConfig] = None) -> "SeleniumBrowser":
        manager = DriverManager(config)
        manager.create()
        return cls(manager)

    def new_tab(self) -> SeleniumTab:
        driver = self.manager.driver
        with _protocol_errors("Opening a tab"):
            if self._tabs:
                driver.switch_to.new_window("tab")
            handle = driver.current_window_handle
        tab = SeleniumTab(driver, handle, poll_interval=self.manager.config.poll_interval)
        self._tabs.append(tab)
        return tab

    def close(self) -> None:
        self._tabs.clear()
        self.manager.quit()
