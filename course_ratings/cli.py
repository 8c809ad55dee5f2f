#!/usr/bin/env python3
"""Command line entry point: course-ratings ADMIN_URL QUERY [--out report.xlsx]"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from playwright.sync_api import Error as PWError

from .config import load_config
from .driver import PlaywrightDriver
from .errors import ConfigError, FatalNavigationError
from .report import FORMATS
from .runner import run

logger = logging.getLogger("course_ratings")

EXIT_OK = 0
EXIT_NO_RATINGS = 1
EXIT_FATAL = 2


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="course-ratings",
        description="Search an admin course catalog and write per-version course ratings to a report.",
    )
    p.add_argument("admin_url", help="Admin courses URL, e.g. https://www.coursera.org/admin-v2/<org>/home/courses")
    p.add_argument("query", help="Course name to search for (all words must appear in the title).")
    p.add_argument("--out", type=Path, default=Path("coursera_course_ratings.xlsx"),
                   help="Report path (.xlsx, .csv or .jsonl).")
    p.add_argument("--config", type=Path, default=None, help="JSON config file (timeouts, selectors, ...).")
    p.add_argument("--timeout", type=float, default=None, help="Seconds to wait for each page element.")
    p.add_argument("--max-pages", type=int, default=None, help="Maximum number of search result pages.")
    p.add_argument("--screenshot-dir", type=Path, default=None, help="Where failure screenshots go.")
    p.add_argument("--storage-state", type=Path, default=None,
                   help="Playwright storage state file holding a logged-in admin session.")
    p.add_argument("--headful", action="store_true", help="Run headed (helpful to watch).")
    p.add_argument("--log-level", default="INFO", help="DEBUG also dumps page sources.")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        config = load_config(
            args.config,
            step_timeout=args.timeout,
            max_pages=args.max_pages,
            screenshot_dir=args.screenshot_dir,
            storage_state=args.storage_state,
            headless=False if args.headful else None,
        )
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        return EXIT_FATAL
    if args.out.suffix.lower() not in FORMATS:
        logger.error("Unsupported report format: %s (use one of %s)", args.out, ", ".join(FORMATS))
        return EXIT_FATAL

    try:
        with PlaywrightDriver.launch(config) as driver:
            result = run(driver, args.admin_url, args.query, config,
                         output=args.out, on_failure=driver.capture_diagnostic)
    except FatalNavigationError as e:
        logger.error("Run aborted: %s", e)
        return EXIT_FATAL
    except OSError as e:
        logger.error("Could not write report %s: %s", args.out, e)
        return EXIT_FATAL
    except PWError as e:
        logger.error("Browser failed: %s", e)
        return EXIT_FATAL

    if not result.succeeded:
        logger.error("No ratings found for '%s'. Report written to %s", args.query, result.output_path)
        return EXIT_NO_RATINGS
    logger.info("Report written to %s", result.output_path)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
