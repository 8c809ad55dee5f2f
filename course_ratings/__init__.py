"""
Course ratings scraper.
Searches an admin course catalog, resolves every matching course to its
versions and collects each version's rating into a tabular report.
"""

from .config import ScraperConfig, load_config
from .errors import (
    ConfigError,
    CourseRatingsError,
    EntityResolutionError,
    FatalNavigationError,
    PageReadError,
    VariantExtractionError,
)
from .matching import KeywordMatcher, matches, tokenize
from .models import (
    DEFAULT_VERSION,
    NOT_FOUND,
    REPORT_COLUMNS,
    UNKNOWN_VERSION,
    CourseRef,
    CourseVersion,
    RatingRecord,
)
from .results import ResultAggregator
from .runner import RunResult, run

__all__ = [
    "ScraperConfig",
    "load_config",
    "ConfigError",
    "CourseRatingsError",
    "EntityResolutionError",
    "FatalNavigationError",
    "PageReadError",
    "VariantExtractionError",
    "KeywordMatcher",
    "matches",
    "tokenize",
    "DEFAULT_VERSION",
    "NOT_FOUND",
    "REPORT_COLUMNS",
    "UNKNOWN_VERSION",
    "CourseRef",
    "CourseVersion",
    "RatingRecord",
    "ResultAggregator",
    "RunResult",
    "run",
]
