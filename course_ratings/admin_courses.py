"""
Admin "Courses" page: open the catalog, search it and walk every result page.

Result pages are read one at a time in DOM order. A page that cannot be read
contributes no courses but does not end the search; anything that goes wrong
while paging ends the walk and the courses collected so far are returned.
"""

import enum
import logging
from typing import List, Optional, Tuple

from .config import ScraperConfig
from .driver import FailureHook, PageDriver, notify_failure
from .errors import FatalNavigationError, PageReadError
from .matching import KeywordMatcher
from .models import CourseRef

logger = logging.getLogger(__name__)


class CrawlState(enum.Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    READING_PAGE = "reading_page"
    DONE = "done"
    FAILED = "failed"


class AdminCoursesPage:
    def __init__(self, driver: PageDriver, config: ScraperConfig, on_failure: Optional[FailureHook] = None):
        self.driver = driver
        self.config = config
        self.selectors = config.selectors
        self.on_failure = on_failure
        self.state = CrawlState.IDLE
        self.pages_read = 0

    def _location(self) -> str:
        try:
            return self.driver.current_location()
        except Exception:
            return "<unknown>"

    def _fail(self, label: str, message: str) -> None:
        self.state = CrawlState.FAILED
        logger.error("%s Current URL: %s", message, self._location())
        notify_failure(self.on_failure, label)

    def navigate_to_admin_courses(self, admin_url: str) -> None:
        logger.info("Navigating to Admin Courses page: %s", admin_url)
        try:
            self.driver.navigate(admin_url)
            if not self.driver.wait_for_ready():
                raise FatalNavigationError("Admin Courses page never finished loading")

            current_url = self.driver.current_location()
            logger.info("Current URL after navigation: %s", current_url)
            if any(marker in current_url.lower() for marker in self.config.login_markers):
                raise FatalNavigationError(f"Authentication failed. Redirected to login page: {current_url}")

            logger.info("Page title: %s", self.driver.title())
            logger.debug("Page source after navigation: %s", self.driver.page_source())

            if not self.driver.wait_for(self.selectors.app_root, state="attached"):
                logger.warning("App root element not found. The page structure might have changed.")
            if not self.driver.wait_for(self.selectors.search_field):
                raise FatalNavigationError("Search field never became visible")
        except FatalNavigationError as e:
            self._fail("admin-navigation-failure", f"Failed to navigate to Admin Courses page: {e}.")
            raise
        except Exception as e:
            self._fail("admin-navigation-failure", f"Failed to navigate to Admin Courses page: {e}.")
            raise FatalNavigationError(f"Failed to navigate to Admin Courses page: {e}") from e
        logger.info("Successfully navigated to Admin Courses page: %s", self._location())

    def search(self, query: str) -> List[CourseRef]:
        """Submit `query` and return every matching course across all result pages."""
        matcher = KeywordMatcher(query)
        self.state = CrawlState.SEARCHING
        self.pages_read = 0
        logger.info("Searching for course: %s", query)
        try:
            if not self.driver.wait_for(self.selectors.search_field):
                raise FatalNavigationError("Search field is not visible")
            listing = self.driver.find_all(self.selectors.results_table)
            self.driver.fill(self.selectors.search_field, query, submit=True)
        except FatalNavigationError as e:
            self._fail("search-failure", f"Error searching for course '{query}': {e}.")
            raise
        except Exception as e:
            self._fail("search-failure", f"Error searching for course '{query}': {e}.")
            raise FatalNavigationError(f"Failed to search for course: {query}") from e
        logger.info("Search submitted for course: %s", query)

        # the listing shown before the search must be replaced before page 1 is read
        if listing and not self.driver.wait_for_stale(listing[0]):
            logger.warning("Results table did not refresh after the search was submitted.")
        if self.driver.wait_for(self.selectors.results_table):
            logger.info("Search results table found.")
        else:
            logger.warning("Search results table not found. The search might have returned no results.")
        logger.info("Keywords for matching: %s", matcher.keywords)

        courses: List[CourseRef] = []
        previous_links: Optional[Tuple[str, ...]] = None
        page_number = 1
        while True:
            self.state = CrawlState.READING_PAGE
            try:
                page_links, matched = self._read_page(page_number, matcher)
            except PageReadError as e:
                logger.error("Could not read search results %s. Current URL: %s", e, self._location())
                notify_failure(self.on_failure, f"search-page-{page_number}")
                page_links, matched = None, []

            if page_links and page_links == previous_links:
                logger.warning("Page %d repeats the courses of page %d. Stopping pagination.",
                               page_number, page_number - 1)
                break
            previous_links = page_links
            courses.extend(matched)
            self.pages_read = page_number

            if page_number >= self.config.max_pages:
                logger.warning("Reached the limit of %d result pages. Stopping pagination.", self.config.max_pages)
                break
            if not self._next_page(page_number):
                break
            page_number += 1

        self.state = CrawlState.DONE
        logger.info("Found %d courses for '%s' across %d pages", len(courses), query, self.pages_read)
        if not courses:
            logger.warning("No courses matched '%s'. The course name might be incorrect or not present.", query)
            notify_failure(self.on_failure, "final-no-versions")
        return courses

    def _read_page(self, page_number: int, matcher: KeywordMatcher) -> Tuple[Tuple[str, ...], List[CourseRef]]:
        logger.info("Processing page %d of search results.", page_number)
        try:
            elements = self.driver.find_all(self.selectors.course_links)
            items = [(self.driver.element_text(el), self.driver.element_href(el)) for el in elements]
        except Exception as e:
            raise PageReadError(page_number, str(e)) from e

        logger.info("Number of course links found on page %d: %d", page_number, len(items))
        if not items:
            logger.info("No course links found on page %d.", page_number)
            notify_failure(self.on_failure, f"no-course-links-page-{page_number}")

        matched = []
        for title, href in items:
            logger.debug("Course link - Text: %s, Href: %s", title, href)
            if not matcher(title):
                continue
            if not href:
                logger.warning("Skipping matching course without a link: %s", title)
                continue
            matched.append(CourseRef(title, href))
            logger.info("Added course: %s with link: %s", title, href)
        return tuple(href for _, href in items), matched

    def _next_page(self, page_number: int) -> bool:
        try:
            buttons = self.driver.find_all(self.selectors.next_page)
            if not buttons:
                logger.info("No next page button found. Stopping pagination.")
                return False
            if not self.driver.is_enabled(buttons[0]):
                logger.info("Next page button is not enabled. Stopping pagination.")
                return False

            tables = self.driver.find_all(self.selectors.results_table)
            logger.info("Navigating to page %d of search results.", page_number + 1)
            self.driver.click(buttons[0])
            if tables and not self.driver.wait_for_stale(tables[0]):
                logger.warning("Results table did not refresh after page %d. Stopping pagination.", page_number)
                return False
            if not self.driver.wait_for(self.selectors.results_table):
                logger.warning("Results table of page %d never became visible. Stopping pagination.",
                               page_number + 1)
                return False
            return True
        except Exception as e:
            logger.error("Pagination failed after page %d: %s", page_number, e)
            notify_failure(self.on_failure, f"pagination-page-{page_number}")
            return False
