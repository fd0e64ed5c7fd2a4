"""Generic workflow engine that runs an ordered list of named steps."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from ..config.behaviour import BehaviourSettings, get_behaviour_settings
from ..config.settings import RouterSettings
from .browser import Browser, BrowserFactory, Tab
from .state import RebootError, StepResult, WorkflowReport


logger = logging.getLogger(__name__)


@dataclass
class WorkflowContext:
    """Per-run state shared by the steps of a single workflow invocation."""

    settings: RouterSettings
    browser_factory: BrowserFactory
    behaviour: BehaviourSettings = field(default_factory=get_behaviour_settings)
    browser: Optional[Browser] = None
    tab: Optional[Tab] = None

    def require_browser(self) -> Browser:
        if self.browser is None:
            raise RuntimeError("No browser is running. The launch step must run first.")
        return self.browser

    def require_tab(self) -> Tab:
        if self.tab is None:
            raise RuntimeError("No tab is open. The open_page step must run first.")
        return self.tab


StepHandler = Callable[[WorkflowContext], Optional[str]]


@dataclass(frozen=True)
class Step:
    name: str
    handler: StepHandler


@dataclass
class WorkflowEngine:
    steps: Sequence[Step]
    context: WorkflowContext

    def run(self) -> WorkflowReport:
        """Run every step in order, stopping at the first failure.

        The browser registered on the context is closed on every exit path.
        """
        report = WorkflowReport()
        try:
            for step in self.steps:
                result = self._run_step(step)
                report.steps.append(result)
                if not result.success:
                    logger.debug("Halting workflow after failed step %s", step.name)
                    break
        finally:
            self._dispose()
        return report

    def _run_step(self, step: Step) -> StepResult:
        try:
            message = step.handler(self.context)
        except RebootError as exc:
            return StepResult(step.name, False, message=str(exc), error=exc)
        return StepResult(step.name, True, message=message)

    def _dispose(self) -> None:
        browser = self.context.browser
        self.context.tab = None
        self.context.browser = None
        if browser is not None:
            browser.close()
            logger.debug("Browser closed")
