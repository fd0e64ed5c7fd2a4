"""CLI entrypoint for rebooting the router through its web interface."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, List

from .bot import RebootController
from .config.behaviour import load_behaviour_settings, set_behaviour_settings
from .core.driver import DriverConfig
from .core.state import RebootError
from .scheduler import CronJob, CronSchedule


JOB_NAME = "Reboot Ubiquiti Nano Beam Cron Job"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
QUIET_LOGGERS = ("selenium", "urllib3", "WDM")
CRON_ALIASES = {"-c", "--cronjob"}
VALUE_OPTIONS = {"-l", "--logfile", "--env-file", "--behavior-config"}

logger = logging.getLogger("rebootbot")


def _normalise_argv(argv: Iterable[str]) -> List[str]:
    """Rewrite a ``-c``/``--cronjob`` flag into the ``cron`` sub-command.

    Only the leading global options are scanned; scanning stops at the first
    positional argument, so option values and sub-command arguments are kept.
    """
    tokens = list(argv)
    index = 0
    while index < len(tokens):
        token = tokens[index]
        if token in CRON_ALIASES:
            tokens[index] = "cron"
            break
        if token in VALUE_OPTIONS:
            index += 2
            continue
        if not token.startswith("-") or token == "--":
            break
        index += 1
    return tokens


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rebootbot",
        description="Reboot Ubiquiti Nano Beam through its web interface",
    )
    parser.add_argument("-d", "--debug", action="store_true", help="Turn debugging information on")
    parser.add_argument("-l", "--logfile", type=Path, help="Path to the file containing the logs")
    parser.add_argument("--env-file", dest="env_file", type=Path, help="Read credentials from this .env file")
    parser.add_argument(
        "--behavior-config",
        dest="behavior_config",
        help="Path to YAML or JSON file overriding timing defaults",
    )
    parser.add_argument(
        "--show-browser",
        dest="show_browser",
        action="store_true",
        help="Run Chrome with a visible window instead of headless",
    )

    subparsers = parser.add_subparsers(dest="command")
    cron = subparsers.add_parser(
        "cron",
        aliases=["cronjob"],
        help="Runs the application as a cron job",
        description="Runs the application as a cron job",
    )
    cron.add_argument("-s", "--seconds", help="Cron seconds field, e.g. '0' or '*/30'")
    cron.add_argument("-m", "--minutes", help="Cron minutes field, e.g. '*/5'")
    cron.add_argument("--hours", help="Cron hours field, e.g. '3' or '*/6'")
    return parser


def _init_logging(debug: bool, logfile: Path | None) -> logging.Handler:
    if logfile:
        logfile = logfile.expanduser()
        logfile.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(logfile, mode="w", encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.setLevel(logging.DEBUG if debug else logging.INFO)
    root.addHandler(handler)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler


def _teardown_logging(handler: logging.Handler) -> None:
    handler.close()
    logging.getLogger().removeHandler(handler)


def _build_schedule(args: argparse.Namespace) -> CronSchedule:
    fields = {
        name: value
        for name, value in (("seconds", args.seconds), ("minutes", args.minutes), ("hours", args.hours))
        if value is not None
    }
    return CronSchedule(**fields).validate()


def main(argv: list[str] | None = None) -> int:
    argv_list = _normalise_argv(argv if argv is not None else sys.argv[1:])
    parser = _build_parser()
    args = parser.parse_args(argv_list)

    behaviour_config_path: Path | None = None
    if args.behavior_config:
        behaviour_config_path = Path(args.behavior_config).expanduser()
        if not behaviour_config_path.is_file():
            parser.error(f"Behaviour config not found: {behaviour_config_path}")

    schedule: CronSchedule | None = None
    if args.command in {"cron", "cronjob"}:
        try:
            schedule = _build_schedule(args)
        except ValueError as exc:
            parser.error(str(exc))

    handler = _init_logging(args.debug, args.logfile)
    try:
        try:
            behaviour = load_behaviour_settings(behaviour_config_path)
        except RuntimeError as exc:
            logger.error("%s", exc)
            return 1
        set_behaviour_settings(behaviour)

        controller = RebootController(
            env_file=args.env_file,
            behaviour=behaviour,
            driver_config=DriverConfig(
                headless=not args.show_browser,
                poll_interval=behaviour.poll_interval,
            ),
        )

        if schedule is not None:
            logger.info("Running as a cron job")
            job = CronJob(JOB_NAME, controller.on_cron, schedule)
            try:
                job.start_job()
            except KeyboardInterrupt:  # pragma: no cover - interactive convenience
                job.stop()
                logger.info("Interrupted, stopping cron job")
            return 0

        try:
            controller.run_once()
        except RebootError as exc:
            logger.error("%s", exc)
            return 1
        return 0
    finally:
        _teardown_logging(handler)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
