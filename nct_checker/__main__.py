"""
Command-line entrypoint: one availability check, then exit.

Запуск: python -m nct_checker (или nct-checker). Расписание задаётся снаружи
(GitHub Actions cron), сам скрипт делает ровно один прогон.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

from pydantic import ValidationError

from .browser import FormStepError
from .checker import run
from .config import ConfigError, Settings, load_settings
from .utils import setup_logging


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="nct-checker",
        description="Check NCT test centres for appointments within a date window.",
    )
    parser.add_argument("--headed", action="store_true", help="show the browser window")
    parser.add_argument("--window-days", type=int, default=None, help="override WINDOW_DAYS")
    return parser.parse_args(argv)


def apply_args(settings: Settings, args: argparse.Namespace) -> Settings:
    if args.headed:
        settings = settings.model_copy(
            update={"browser": settings.browser.model_copy(update={"headless": False})}
        )
    if args.window_days is not None:
        if args.window_days < 0:
            raise ConfigError("--window-days must be zero or positive")
        settings = settings.model_copy(
            update={"monitor": settings.monitor.model_copy(update={"window_days": args.window_days})}
        )
    return settings


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for running a single check."""
    args = parse_args(argv)
    try:
        settings = apply_args(load_settings(), args)
    except (ConfigError, ValidationError) as e:
        setup_logging()
        logger.error("Configuration error: %s", e)
        return EXIT_CONFIG

    setup_logging(settings.logging)
    try:
        asyncio.run(run(settings))
    except FormStepError as e:
        logger.error("Booking form flow aborted at step %s: %s", e.step, e.cause)
        return EXIT_FAILED
    except asyncio.TimeoutError:
        logger.error("Run exceeded %.0f seconds, aborting", settings.browser.run_timeout)
        return EXIT_FAILED
    logger.info("Check complete")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
