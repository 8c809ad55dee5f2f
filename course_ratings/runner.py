import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

from .admin_courses import AdminCoursesPage
from .config import ScraperConfig
from .driver import FailureHook, PageDriver
from .models import RatingRecord
from .ratings import CourseRatingsScraper
from .report import write_report
from .results import ResultAggregator

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    records: Tuple[RatingRecord, ...]
    output_path: Optional[Path]
    succeeded: bool                 # at least one version has a real rating


def run(
    driver: PageDriver,
    admin_url: str,
    query: str,
    config: Optional[ScraperConfig] = None,
    output: Optional[Union[str, Path]] = None,
    on_failure: Optional[FailureHook] = None,
) -> RunResult:
    """
    Search the admin catalog for `query`, collect the rating of every version
    of every matching course and write the report to `output` (if given).

    FatalNavigationError propagates and no report is written. Every other
    failure ends up as a "Not found" row, so the report is always complete.
    """
    config = config or ScraperConfig()
    results = ResultAggregator()

    admin_page = AdminCoursesPage(driver, config, on_failure=on_failure)
    admin_page.navigate_to_admin_courses(admin_url)
    courses = admin_page.search(query)
    if not courses:
        logger.warning("No courses found for: %s. Check the course name, logs, and screenshots for details.", query)

    scraper = CourseRatingsScraper(driver, config, results, on_failure=on_failure)
    scraper.process_courses(courses)

    records = results.all_records()
    for record in records:
        logger.info("Course Version: %s, Rating: %s, Stats: %s",
                    record.course_version, record.rating, record.rating_stats)

    output_path = write_report(records, output) if output is not None else None
    succeeded = results.has_rating()
    summary = results.summary()
    if succeeded:
        logger.info("Run completed: %d records, %d rated, %d not found",
                    summary["records"], summary["rated"], summary["not_found"])
    else:
        logger.error("No ratings found for any version of course: %s", query)
    return RunResult(records=records, output_path=output_path, succeeded=succeeded)
