"""
Browser driver used by the page objects.

The page objects only talk to the `PageDriver` protocol; `PlaywrightDriver`
is the real implementation on top of Playwright's sync API. Waits never raise
on timeout, they return False and leave the decision to the caller.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Iterator, List, Optional, Protocol
from urllib.parse import urljoin

from playwright.sync_api import Error as PWError
from playwright.sync_api import Page, sync_playwright
from playwright.sync_api import TimeoutError as PWTimeoutError

from .config import ScraperConfig

logger = logging.getLogger(__name__)

# on_failure(label) -> path of the saved artifact, if any
FailureHook = Callable[[str], Optional[Path]]


class PageDriver(Protocol):
    def navigate(self, target: str) -> None: ...
    def current_location(self) -> str: ...
    def title(self) -> str: ...
    def page_source(self) -> str: ...
    def wait_for_ready(self, timeout: Optional[float] = None) -> bool: ...
    def wait_for(self, selector: str, timeout: Optional[float] = None, state: str = "visible") -> bool: ...
    def wait_for_stale(self, element: Any, timeout: Optional[float] = None) -> bool: ...
    def find_all(self, selector: str) -> List[Any]: ...
    def element_text(self, element: Any) -> str: ...
    def element_href(self, element: Any) -> str: ...
    def element_html(self, element: Any) -> str: ...
    def click(self, element: Any) -> None: ...
    def is_enabled(self, element: Any) -> bool: ...
    def fill(self, selector: str, text: str, submit: bool = True) -> None: ...
    def capture_diagnostic(self, label: str) -> Optional[Path]: ...


def notify_failure(hook: Optional[FailureHook], label: str) -> Optional[Path]:
    """Run the caller's failure hook; a broken hook is logged, never raised."""
    if hook is None:
        return None
    try:
        return hook(label)
    except Exception as e:
        logger.error("Failure hook for %s raised: %s", label, e)
        return None


class PlaywrightDriver:
    def __init__(self, page: Page, config: ScraperConfig):
        self.page = page
        self.config = config

    @classmethod
    @contextmanager
    def launch(cls, config: ScraperConfig) -> Iterator["PlaywrightDriver"]:
        with sync_playwright() as p:
            browser = p.chromium.launch(headless=config.headless)
            storage_state = str(config.storage_state) if config.storage_state else None
            context = browser.new_context(storage_state=storage_state)
            page = context.new_page()
            page.set_default_timeout(config.step_timeout * 1000)
            try:
                yield cls(page, config)
            finally:
                context.close()
                browser.close()

    def _ms(self, timeout: Optional[float]) -> float:
        return (self.config.step_timeout if timeout is None else timeout) * 1000

    def navigate(self, target: str) -> None:
        self.page.goto(target, wait_until="domcontentloaded", timeout=self._ms(None))

    def current_location(self) -> str:
        return self.page.url

    def title(self) -> str:
        return self.page.title()

    def page_source(self) -> str:
        return self.page.content()

    def wait_for_ready(self, timeout: Optional[float] = None) -> bool:
        try:
            self.page.wait_for_load_state("load", timeout=self._ms(timeout))
            return True
        except PWTimeoutError:
            return False

    def wait_for(self, selector: str, timeout: Optional[float] = None, state: str = "visible") -> bool:
        try:
            self.page.locator(selector).first.wait_for(state=state, timeout=self._ms(timeout))
            return True
        except PWTimeoutError:
            return False

    def wait_for_stale(self, element: Any, timeout: Optional[float] = None) -> bool:
        try:
            self.page.wait_for_function("el => !el.isConnected", arg=element, timeout=self._ms(timeout))
            return True
        except PWTimeoutError:
            return False
        except PWError:
            # handle was disposed together with its document
            return True

    def find_all(self, selector: str) -> List[Any]:
        return self.page.query_selector_all(selector)

    def element_text(self, element: Any) -> str:
        return (element.inner_text() or "").strip()

    def element_href(self, element: Any) -> str:
        href = element.get_attribute("href") or ""
        return urljoin(self.page.url, href) if href else ""

    def element_html(self, element: Any) -> str:
        return element.inner_html()

    def click(self, element: Any) -> None:
        element.click(timeout=self._ms(None))

    def is_enabled(self, element: Any) -> bool:
        return element.is_enabled()

    def fill(self, selector: str, text: str, submit: bool = True) -> None:
        field = self.page.locator(selector).first
        field.fill(text, timeout=self._ms(None))
        if submit:
            field.press("Enter")

    def capture_diagnostic(self, label: str) -> Optional[Path]:
        out_dir = Path(self.config.screenshot_dir)
        path = out_dir / f"{label}-screenshot.png"
        try:
            out_dir.mkdir(parents=True, exist_ok=True)
            self.page.screenshot(path=str(path), full_page=True)
        except (PWError, OSError) as e:
            logger.error("Failed to save screenshot %s: %s", path, e)
            return None
        logger.info("Screenshot saved as %s", path)
        return path
