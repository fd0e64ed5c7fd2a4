"""High-level controller wiring configuration, browser and workflow together."""
from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable, Optional

from .config.behaviour import BehaviourSettings, get_behaviour_settings
from .config.settings import RouterSettings, load_router_settings
from .core.browser import BrowserFactory
from .core.driver import DriverConfig, SeleniumBrowser
from .core.state import WorkflowReport
from .workflows.reboot import DEFAULT_SELECTORS, RouterSelectors, build_reboot_workflow


logger = logging.getLogger(__name__)


class RebootController:
    """Entry point for rebooting the router through its web UI."""

    def __init__(
        self,
        *,
        env_file: Optional[Path] = None,
        driver_config: Optional[DriverConfig] = None,
        browser_factory: Optional[BrowserFactory] = None,
        behaviour: Optional[BehaviourSettings] = None,
        selectors: RouterSelectors = DEFAULT_SELECTORS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.env_file = env_file
        self.behaviour = behaviour or get_behaviour_settings()
        self.driver_config = driver_config or DriverConfig(poll_interval=self.behaviour.poll_interval)
        self.browser_factory = browser_factory or self._launch_chrome
        self.selectors = selectors
        self._sleep = sleep

    def _launch_chrome(self) -> SeleniumBrowser:
        return SeleniumBrowser.launch(self.driver_config)

    def load_settings(self) -> RouterSettings:
        return load_router_settings(self.env_file)

    def run_workflow(self, settings: RouterSettings) -> WorkflowReport:
        workflow = build_reboot_workflow(
            settings,
            self.browser_factory,
            behaviour=self.behaviour,
            selectors=self.selectors,
            sleep=self._sleep,
        )
        report = workflow.run()
        for step in report.steps:
            if step.success:
                logger.debug("step=%s ok: %s", step.name, step.message)
            else:
                logger.debug("step=%s failed: %s", step.name, step.message)
        return report

    def reboot_router(self, settings: Optional[RouterSettings] = None) -> WorkflowReport:
        """Load fresh credentials (unless given) and run one reboot cycle.

        Raises :class:`~rebootBot.core.state.ConfigurationError` before any
        browser is launched when a credential is missing, and
        :class:`~rebootBot.core.state.WorkflowError` when a step fails.
        """
        settings = settings or self.load_settings()
        report = self.run_workflow(settings)
        report.raise_for_failure()
        logger.info("Reboot requested on %s", settings.gateway_url)
        return report

    def on_cron(self, name: str) -> None:
        logger.info("Running cron job: %s", name)
        self.reboot_router()

    def run_once(self) -> WorkflowReport:
        report = self.reboot_router()
        logger.info("Closing in %g seconds ...", self.behaviour.exit_delay)
        self._sleep(self.behaviour.exit_delay)
        return report
