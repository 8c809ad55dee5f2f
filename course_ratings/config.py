"""
Scraper configuration.

Everything that used to be a hard-coded constant of the admin page objects
(element bindings, the 30 second wait budget, where screenshots go) lives in
one validated model so it can be overridden from a JSON file or the CLI.
"""

import json
from pathlib import Path
from typing import Any, Optional, Tuple

from pydantic import BaseModel, Field, FilePath, ValidationError

from .errors import ConfigError


class Selectors(BaseModel):
    # Admin courses page
    search_field: str = "xpath=//input[@placeholder='Search']"
    results_table: str = "xpath=//table[contains(@class, 'css-1vzbk0')]"
    course_links: str = "xpath=//td[contains(@class, 'css-1vekh47')]//a[contains(@href, '/teach/')]"
    next_page: str = "xpath=//button[@aria-label='Next page']"
    app_root: str = "xpath=//div[contains(@class, 'rc-')]"
    # Course page
    version_switcher: str = "button[aria-label='Select course version']"
    version_option: str = "[role='option']"
    # Analytics
    analytics_link: str = "a[href*='/analytics']"
    ratings_tab: str = "a[href*='/analytics/ratings']"
    rating_value: str = "[data-e2e='course-rating-value']"
    rating_stats: str = "[data-e2e='course-rating-distribution']"


class ScraperConfig(BaseModel):
    step_timeout: float = Field(default=30.0, gt=0)      # seconds, applied to every wait
    max_pages: int = Field(default=50, ge=1)             # hard ceiling on result pages
    switcher_timeout: float = Field(default=10.0, gt=0)  # seconds to wait for the version switcher
    headless: bool = True
    screenshot_dir: Path = Path(".")
    storage_state: Optional[FilePath] = None             # existing Playwright session file with admin login
    login_markers: Tuple[str, ...] = ("login", "signin")
    selectors: Selectors = Field(default_factory=Selectors)


def load_config(path: Optional[Path] = None, **overrides: Any) -> ScraperConfig:
    """Read an optional JSON config file and apply non-None keyword overrides."""
    data = {}
    if path is not None:
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Cannot read config {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config {path} must contain a JSON object")
    data.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return ScraperConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(str(e)) from e
