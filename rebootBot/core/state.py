"""Shared result and error definitions for workflows and browser actions."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class StepResult:
    """Return value for a single workflow step."""

    name: str
    success: bool
    message: Optional[str] = None
    error: Optional[BaseException] = None


@dataclass
class WorkflowReport:
    """Outcome of a workflow run, one entry per attempted step."""

    steps: List[StepResult] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return bool(self.steps) and all(step.success for step in self.steps)

    @property
    def completed_steps(self) -> List[str]:
        return [step.name for step in self.steps if step.success]

    @property
    def failed_step(self) -> Optional[StepResult]:
        for step in self.steps:
            if not step.success:
                return step
        return None

    def raise_for_failure(self) -> None:
        failed = self.failed_step
        if failed is None:
            return
        raise WorkflowError(failed.name, failed.error, failed.message) from failed.error


class RebootError(RuntimeError):
    """Base class for every failure raised by rebootBot."""


class ConfigurationError(RebootError):
    """Raised when a required credential or the gateway URL is missing."""


class LaunchError(RebootError):
    """Raised when the browser or its driver cannot be started."""


class NavigationError(RebootError):
    """Raised when a page fails to load or a navigation never completes."""


class ElementNotFoundError(RebootError):
    """Raised when a selector does not appear in the DOM before the timeout."""

    def __init__(self, selector: str, timeout: float):
        super().__init__(f"Element '{selector}' not found after {timeout:g} seconds")
        self.selector = selector
        self.timeout = timeout


class BrowserProtocolError(RebootError):
    """Raised for unexpected failures reported by the automation layer."""


class WorkflowError(RebootError):
    """Raised when a workflow halts; ``step`` names the step that failed."""

    def __init__(self, step: str, cause: Optional[BaseException] = None, message: Optional[str] = None):
        detail = message or (str(cause) if cause else "unknown error")
        super().__init__(f"Step '{step}' failed: {detail}")
        self.step = step
        self.cause = cause
