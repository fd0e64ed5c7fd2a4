"""Cron-style scheduling of recurring reboot runs."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from croniter import croniter


logger = logging.getLogger(__name__)

TickCallback = Callable[[str], None]


@dataclass(frozen=True)
class CronSchedule:
    """Seconds, minutes and hours fields in cron syntax (``*``, ``*/5``, ``0,30``)."""

    seconds: str = "*"
    minutes: str = "*"
    hours: str = "*"

    @property
    def expression(self) -> str:
        # croniter takes seconds as the optional sixth field
        return f"{self.minutes} {self.hours} * * * {self.seconds}"

    def validate(self) -> "CronSchedule":
        for label, value in (("seconds", self.seconds), ("minutes", self.minutes), ("hours", self.hours)):
            if not value or not value.strip():
                raise ValueError(f"Cron {label} field cannot be empty")
        if not croniter.is_valid(self.expression):
            raise ValueError(f"Invalid cron schedule: {self.describe()}")
        return self

    def next_after(self, moment: datetime) -> datetime:
        return croniter(self.expression, moment).get_next(datetime)

    def describe(self) -> str:
        return f"seconds={self.seconds} minutes={self.minutes} hours={self.hours}"


class CronJob:
    """Invoke ``callback`` on every match of ``schedule`` until stopped.

    Ticks run one at a time on the calling thread. A tick that raises is
    logged and the job waits for the next match; matches that elapse while a
    tick is still running are skipped.
    """

    def __init__(
        self,
        name: str,
        callback: TickCallback,
        schedule: Optional[CronSchedule] = None,
        *,
        clock: Callable[[], datetime] = datetime.now,
        wait: Optional[Callable[[float], bool]] = None,
    ) -> None:
        self.name = name
        self.callback = callback
        self.schedule = (schedule or CronSchedule()).validate()
        self._clock = clock
        self._stop_event = threading.Event()
        self._wait = wait or self._stop_event.wait
        self.ticks = 0
        self.failures = 0

    def stop(self) -> None:
        self._stop_event.set()

    def is_stopped(self) -> bool:
        return self._stop_event.is_set()

    def start_job(self, *, max_ticks: Optional[int] = None) -> None:
        logger.info("Starting %s (%s)", self.name, self.schedule.describe())
        while not self._stop_event.is_set():
            now = self._clock()
            next_run = self.schedule.next_after(now)
            logger.debug("Next run at %s", next_run.isoformat(timespec="seconds"))
            if self._wait(max((next_run - now).total_seconds(), 0.0)):
                break
            if self._stop_event.is_set():
                break

            self._tick()

            finished = self._clock()
            following = self.schedule.next_after(next_run)
            if finished > following:
                logger.warning(
                    "Run started at %s overran the next scheduled time %s; skipping missed runs",
                    next_run.isoformat(timespec="seconds"),
                    following.isoformat(timespec="seconds"),
                )

            if max_ticks is not None and self.ticks >= max_ticks:
                break
        logger.info("%s stopped after %s run(s), %s failed", self.name, self.ticks, self.failures)

    def _tick(self) -> None:
        self.ticks += 1
        try:
            self.callback(self.name)
        except Exception as exc:
            # A failed run never stops the schedule
            self.failures += 1
            logger.exception("Scheduled run failed: %s", exc)
