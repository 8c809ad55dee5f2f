"""Pytest configuration and shared fixtures for all tests."""

import pytest

from course_ratings.config import ScraperConfig
from fakes import FakeDriver


@pytest.fixture
def config(tmp_path):
    return ScraperConfig(screenshot_dir=tmp_path / "screenshots")


@pytest.fixture
def make_driver(config):
    """Factory building a FakeDriver on the shared config."""
    def _make(result_pages=None, courses=None):
        return FakeDriver(config, result_pages=result_pages, courses=courses)
    return _make
