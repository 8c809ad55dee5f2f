"""Error kinds raised while scraping the admin catalog."""


class CourseRatingsError(Exception):
    """Base class for everything this package raises on purpose."""


class ConfigError(CourseRatingsError):
    """Configuration file or overrides failed validation."""


class FatalNavigationError(CourseRatingsError):
    """The catalog could not be reached (or we landed on a login page). Aborts the run."""


class PageReadError(CourseRatingsError):
    """A search result page could not be read; the page yields no matches."""

    def __init__(self, page_number: int, message: str):
        super().__init__(f"page {page_number}: {message}")
        self.page_number = page_number


class EntityResolutionError(CourseRatingsError):
    """A course page or its version list could not be loaded."""


class VariantExtractionError(CourseRatingsError):
    """Selecting a version or reading its rating failed."""
