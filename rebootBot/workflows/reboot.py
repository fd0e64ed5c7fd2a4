"""Login-and-reboot workflow for the router's web administration page."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from ..config.behaviour import BehaviourSettings, get_behaviour_settings
from ..config.settings import RouterSettings
from ..core.browser import BrowserFactory
from ..core.workflow_engine import Step, WorkflowContext, WorkflowEngine


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RouterSelectors:
    username: str = "#loginform-username"
    password: str = "#loginform-password"
    reboot: str = ".ubnt-icon--refresh"


DEFAULT_SELECTORS = RouterSelectors()

STEP_NAMES = (
    "launch",
    "open_page",
    "enter_username",
    "enter_password",
    "confirm_login",
    "settle",
    "reboot",
)


def launch_browser(context: WorkflowContext) -> str:
    context.browser = context.browser_factory()
    return "Browser launched"


def open_page(context: WorkflowContext) -> str:
    logger.debug("[1/5] Opening page ...")
    tab = context.require_browser().new_tab()
    context.tab = tab
    tab.navigate_to(context.settings.gateway_url)
    tab.wait_until_navigated(context.behaviour.navigation_timeout)
    return f"Opened {context.settings.gateway_url}"


def _fill_field(context: WorkflowContext, selector: str, value: str) -> None:
    tab = context.require_tab()
    tab.wait_for_element(selector, context.behaviour.element_timeout).click()
    tab.type_str(value).press_key("Enter")


def make_enter_username(selectors: RouterSelectors) -> Callable[[WorkflowContext], str]:
    def enter_username(context: WorkflowContext) -> str:
        logger.debug("[2/5] Logging in ...")
        _fill_field(context, selectors.username, context.settings.username)
        return "Username submitted"

    return enter_username


def make_enter_password(selectors: RouterSelectors) -> Callable[[WorkflowContext], str]:
    def enter_password(context: WorkflowContext) -> str:
        _fill_field(context, selectors.password, context.settings.password)
        return "Password submitted"

    return enter_password


def confirm_login(context: WorkflowContext) -> str:
    logger.debug("[3/5] Confirming login ...")
    context.require_tab().wait_until_navigated(context.behaviour.navigation_timeout)
    return "Login confirmed"


def make_settle(sleep: Callable[[float], None]) -> Callable[[WorkflowContext], str]:
    def settle(context: WorkflowContext) -> str:
        logger.debug("[4/5] Rebooting connection ...")
        # Minimum pause the router UI needs before the toolbar is usable
        sleep(context.behaviour.settle_delay)
        return f"Waited {context.behaviour.settle_delay:g} seconds"

    return settle


def make_reboot(selectors: RouterSelectors) -> Callable[[WorkflowContext], str]:
    def reboot(context: WorkflowContext) -> str:
        tab = context.require_tab()
        tab.wait_for_element(selectors.reboot, context.behaviour.element_timeout).click()
        logger.debug("[5/5] Done!")
        return "Reboot requested"

    return reboot


def build_reboot_workflow(
    settings: RouterSettings,
    browser_factory: BrowserFactory,
    *,
    behaviour: Optional[BehaviourSettings] = None,
    selectors: RouterSelectors = DEFAULT_SELECTORS,
    sleep: Callable[[float], None] = time.sleep,
) -> WorkflowEngine:
    """Assemble the seven login-and-reboot steps for one run."""

    context = WorkflowContext(
        settings=settings,
        browser_factory=browser_factory,
        behaviour=behaviour or get_behaviour_settings(),
    )
    handlers = (
        launch_browser,
        open_page,
        make_enter_username(selectors),
        make_enter_password(selectors),
        confirm_login,
        make_settle(sleep),
        make_reboot(selectors),
    )
    steps = [Step(name, handler) for name, handler in zip(STEP_NAMES, handlers)]
    return WorkflowEngine(steps=steps, context=context)
