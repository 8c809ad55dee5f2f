"""
Per-course rating extraction.

For every course found by the search we open its admin page, list the
versions offered by the version switcher and read the star rating of each
version from its analytics "Ratings" tab. A version that fails yields a
"Not found" record; a course whose page cannot be loaded yields a single
"Unknown Version" record so it still shows up in the report.
"""

import logging
import re
from typing import List, Optional, Tuple

from bs4 import BeautifulSoup

from .config import ScraperConfig
from .driver import FailureHook, PageDriver, notify_failure
from .errors import EntityResolutionError, VariantExtractionError
from .models import DEFAULT_VERSION, UNKNOWN_VERSION, CourseRef, CourseVersion, RatingRecord
from .results import ResultAggregator

logger = logging.getLogger(__name__)


def _clean_text(s: Optional[str]) -> str:
    return re.sub(r"\s+", " ", s or "").strip()


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")[:60] or "course"


def parse_rating_stats(html: str) -> str:
    """
    Flatten the ratings breakdown widget into "5 stars: 80%; 4 stars: 15%".
    Rows are <li> or <tr> elements; without rows the widget text is returned.
    """
    soup = BeautifulSoup(html or "", "lxml")
    rows = []
    for row in soup.find_all(["li", "tr"]):
        cells = [_clean_text(s) for s in row.stripped_strings]
        cells = [c for c in cells if c]
        if not cells:
            continue
        rows.append(f"{cells[0]}: {' '.join(cells[1:])}" if len(cells) > 1 else cells[0])
    if rows:
        return "; ".join(rows)
    return _clean_text(soup.get_text(" ", strip=True))


class CoursePage:
    def __init__(self, driver: PageDriver, config: ScraperConfig):
        self.driver = driver
        self.selectors = config.selectors
        self.switcher_timeout = config.switcher_timeout

    def _open_switcher(self) -> bool:
        # the switcher is rendered after the load event; courses without versions never show it
        self.driver.wait_for(self.selectors.version_switcher, timeout=self.switcher_timeout)
        switchers = self.driver.find_all(self.selectors.version_switcher)
        if not switchers:
            return False
        self.driver.click(switchers[0])
        self.driver.wait_for(self.selectors.version_option)
        return True

    def get_versions(self) -> List[CourseVersion]:
        if not self._open_switcher():
            return []
        labels = [_clean_text(self.driver.element_text(o)) for o in self.driver.find_all(self.selectors.version_option)]
        return [CourseVersion(label) for label in labels if label]

    def select_version(self, version: CourseVersion) -> None:
        if not self._open_switcher():
            raise VariantExtractionError("Version switcher not found")
        for option in self.driver.find_all(self.selectors.version_option):
            if _clean_text(self.driver.element_text(option)) == version.label:
                self.driver.click(option)
                self.driver.wait_for_ready()
                return
        raise VariantExtractionError(f"Version '{version.label}' is not offered")


class AnalyticsPage:
    def __init__(self, driver: PageDriver, config: ScraperConfig):
        self.driver = driver
        self.selectors = config.selectors

    def _follow(self, selector: str, what: str) -> None:
        if not self.driver.wait_for(selector):
            raise VariantExtractionError(f"No {what} link on {self.driver.current_location()}")
        links = self.driver.find_all(selector)
        if not links:
            raise VariantExtractionError(f"No {what} link on {self.driver.current_location()}")
        self.driver.click(links[0])
        self.driver.wait_for_ready()

    def go_to_analytics(self) -> None:
        self._follow(self.selectors.analytics_link, "analytics")

    def go_to_rating_section(self) -> None:
        self._follow(self.selectors.ratings_tab, "ratings")
        if not self.driver.wait_for(self.selectors.rating_value):
            raise VariantExtractionError("Rating value never became visible")

    def get_rating(self) -> str:
        values = self.driver.find_all(self.selectors.rating_value)
        if not values:
            raise VariantExtractionError("Rating element not found")
        rating = _clean_text(self.driver.element_text(values[0]))
        if not rating:
            raise VariantExtractionError("Rating element is empty")
        return rating

    def get_rating_stats(self) -> str:
        widgets = self.driver.find_all(self.selectors.rating_stats)
        if not widgets:
            return ""
        return parse_rating_stats(self.driver.element_html(widgets[0]))


class CourseRatingsScraper:
    def __init__(
        self,
        driver: PageDriver,
        config: ScraperConfig,
        results: Optional[ResultAggregator] = None,
        on_failure: Optional[FailureHook] = None,
    ):
        self.driver = driver
        self.results = results if results is not None else ResultAggregator()
        self.on_failure = on_failure
        self.course_page = CoursePage(driver, config)
        self.analytics_page = AnalyticsPage(driver, config)

    def _location(self) -> str:
        try:
            return self.driver.current_location()
        except Exception:
            return "<unknown>"

    def _add(self, record: RatingRecord, records: List[RatingRecord]) -> None:
        self.results.append(record)
        records.append(record)

    def process_courses(self, courses: List[CourseRef]) -> List[RatingRecord]:
        records = []
        for i, course in enumerate(courses, start=1):
            logger.info("[%d/%d] %s", i, len(courses), course.title)
            records.extend(self.process_course(course))
        return records

    def process_course(self, course: CourseRef) -> List[RatingRecord]:
        """Return (and record) one rating record per version of `course`."""
        logger.info("Processing course: %s with link: %s", course.title, course.link)
        records: List[RatingRecord] = []
        try:
            versions = self._open_course(course)
        except EntityResolutionError as e:
            logger.error("Error processing course %s: %s. Current URL: %s", course.title, e, self._location())
            notify_failure(self.on_failure, f"course-failure-{_slug(course.title)}")
            self._add(RatingRecord.placeholder(course, UNKNOWN_VERSION), records)
            return records

        if not versions:
            logger.warning("No versions found for course: %s. Treating as a single version.", course.title)
            self._add(self._process_version(course, CourseVersion(DEFAULT_VERSION), select=False), records)
            return records

        for version in versions:
            self._add(self._process_version(course, version, select=True), records)
        return records

    def _open_course(self, course: CourseRef) -> List[CourseVersion]:
        try:
            self.driver.navigate(course.link)
            if not self.driver.wait_for_ready():
                raise EntityResolutionError(f"Course page never finished loading: {course.link}")
            return self.course_page.get_versions()
        except EntityResolutionError:
            raise
        except Exception as e:
            raise EntityResolutionError(f"Cannot read versions: {e}") from e

    def _process_version(self, course: CourseRef, version: CourseVersion, select: bool) -> RatingRecord:
        logger.info("Processing version: %s for course: %s", version.label, course.title)
        try:
            if select:
                # reset to the course page before every version
                self.driver.navigate(course.link)
                self.driver.wait_for_ready()
                self.course_page.select_version(version)
            rating, stats = self.extract_rating()
        except Exception as e:
            logger.error("Error processing version %s for course %s: %s. Current URL: %s",
                         version.label, course.title, e, self._location())
            notify_failure(self.on_failure, f"version-failure-{_slug(course.title + ' ' + version.label)}")
            return RatingRecord.placeholder(course, version.label)
        logger.info("Course Version: %s - %s, Rating: %s, Stats: %s", course.title, version.label, rating, stats)
        return RatingRecord.for_version(course, version.label, rating, stats)

    def extract_rating(self) -> Tuple[str, str]:
        """Open analytics, switch to the ratings tab and read (rating, stats) for the current version."""
        self.analytics_page.go_to_analytics()
        self.analytics_page.go_to_rating_section()
        rating = self.analytics_page.get_rating()
        try:
            stats = self.analytics_page.get_rating_stats()
        except Exception as e:
            logger.warning("Could not read rating stats: %s", e)
            stats = ""
        return rating, stats
