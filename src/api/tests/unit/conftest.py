"""Unit test fixtures.

Settings are cached process-wide; clearing the caches keeps environment
changes made by one test from leaking into the next.
"""

import pytest

from infrastructure.settings import (
    get_database_settings,
    get_directory_settings,
    get_settings,
)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Reset cached settings around each test."""
    for getter in (get_settings, get_database_settings, get_directory_settings):
        getter.cache_clear()
    yield
    for getter in (get_settings, get_database_settings, get_directory_settings):
        getter.cache_clear()
