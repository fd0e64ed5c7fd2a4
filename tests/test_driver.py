from __future__ import annotations

from unittest import mock

import pytest
from selenium.common.exceptions import NoSuchElementException, WebDriverException
from selenium.webdriver.common.by import By
from selenium.webdriver.common.keys import Keys

from rebootBot.core import driver as driver_module
from rebootBot.core.driver import DriverConfig, DriverManager, SeleniumBrowser, SeleniumTab
from rebootBot.core.state import BrowserProtocolError, ElementNotFoundError, LaunchError, NavigationError


@pytest.fixture
def web_driver():
    fake = mock.MagicMock()
    fake.current_window_handle = "tab-1"
    return fake


@pytest.fixture
def tab(web_driver):
    return SeleniumTab(web_driver, "tab-1", poll_interval=0.01)


def test_navigate_failure_becomes_navigation_error(tab, web_driver):
    web_driver.get.side_effect = WebDriverException("net::ERR_NAME_NOT_RESOLVED")

    with pytest.raises(NavigationError, match="ERR_NAME_NOT_RESOLVED"):
        tab.navigate_to("https://router.invalid")


def test_wait_until_navigated_times_out(tab, web_driver):
    web_driver.execute_script.return_value = "loading"

    with pytest.raises(NavigationError, match="did not complete"):
        tab.wait_until_navigated(0.05)


def test_wait_until_navigated_returns_when_complete(tab, web_driver):
    web_driver.execute_script.return_value = "complete"

    tab.wait_until_navigated(1)

    web_driver.execute_script.assert_called_with("return document.readyState")


def test_missing_element_names_selector(tab, web_driver):
    web_driver.find_element.side_effect = NoSuchElementException("nope")

    with pytest.raises(ElementNotFoundError) as excinfo:
        tab.wait_for_element("#loginform-username", 0.05)

    assert excinfo.value.selector == "#loginform-username"
    web_driver.find_element.assert_called_with(By.CSS_SELECTOR, "#loginform-username")


def test_found_element_can_be_clicked(tab, web_driver):
    element = tab.wait_for_element(".ubnt-icon--refresh", 1)
    element.click()

    web_driver.find_element.return_value.click.assert_called_once_with()


def test_click_failure_is_protocol_error(tab, web_driver):
    web_driver.find_element.return_value.click.side_effect = WebDriverException("detached")

    element = tab.wait_for_element(".ubnt-icon--refresh", 1)
    with pytest.raises(BrowserProtocolError, match="ubnt-icon--refresh"):
        element.click()


def test_typing_targets_focused_element(tab, web_driver):
    tab.type_str("ubnt").press_key("Enter")

    active = web_driver.switch_to.active_element
    assert active.send_keys.call_args_list == [mock.call("ubnt"), mock.call(Keys.ENTER)]


def test_tab_switches_window_when_inactive(web_driver):
    tab = SeleniumTab(web_driver, "tab-2")

    tab.navigate_to("https://192.168.1.20")

    web_driver.switch_to.window.assert_called_once_with("tab-2")


def test_launch_error_when_chrome_missing(monkeypatch):
    monkeypatch.setattr(driver_module, "ChromeDriverManager", mock.MagicMock())
    monkeypatch.setattr(driver_module, "Service", mock.MagicMock())
    monkeypatch.setattr(
        driver_module.webdriver,
        "Chrome",
        mock.MagicMock(side_effect=WebDriverException("cannot find Chrome binary")),
    )
    manager = DriverManager(DriverConfig())

    with pytest.raises(LaunchError, match="Could not start Chrome"):
        manager.create()

    assert manager.profile_path is None


def test_options_are_headless_and_ignore_certificates(monkeypatch):
    chrome = mock.MagicMock()
    monkeypatch.setattr(driver_module, "ChromeDriverManager", mock.MagicMock())
    monkeypatch.setattr(driver_module, "Service", mock.MagicMock())
    monkeypatch.setattr(driver_module.webdriver, "Chrome", chrome)

    browser = SeleniumBrowser.launch(DriverConfig())
    options = chrome.call_args.kwargs["options"]
    profile = browser.manager.profile_path
    browser.close()

    assert "--headless=new" in options.arguments
    assert "--ignore-certificate-errors" in options.arguments
    assert options.accept_insecure_certs is True
    assert profile is not None and not profile.exists()
    chrome.return_value.quit.assert_called_once_with()


def test_each_launch_gets_its_own_profile(monkeypatch):
    chrome = mock.MagicMock()
    monkeypatch.setattr(driver_module, "ChromeDriverManager", mock.MagicMock())
    monkeypatch.setattr(driver_module, "Service", mock.MagicMock())
    monkeypatch.setattr(driver_module.webdriver, "Chrome", chrome)

    first = SeleniumBrowser.launch(DriverConfig())
    second = SeleniumBrowser.launch(DriverConfig())
    profiles = [first.manager.profile_path, second.manager.profile_path]
    arguments = [call.kwargs["options"].arguments for call in chrome.call_args_list]
    first.close()
    second.close()

    assert profiles[0] != profiles[1]
    for profile, args in zip(profiles, arguments):
        assert f"--user-data-dir={profile}" in args
