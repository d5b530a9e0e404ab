"""
Tests for settings loading and logging setup.
"""

import logging

import pytest

from wozny.config import configure_logging, get_settings


@pytest.fixture
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    def test_defaults(self, fresh_settings):
        settings = get_settings()
        assert settings.MISSING_SENTINEL == "[MISSING]"
        assert settings.INDEX_FIELD == "__wozny_index"
        assert settings.ADDRESS_MAX_LENGTH == 200

    def test_env_override(self, fresh_settings, monkeypatch):
        monkeypatch.setenv("WOZNY_SPLIT_SAMPLE_SIZE", "10")
        assert get_settings().SPLIT_SAMPLE_SIZE == 10

    def test_cached(self, fresh_settings):
        assert get_settings() is get_settings()


class TestConfigureLogging:
    def test_sets_package_level(self):
        logger = logging.getLogger("wozny")
        previous = logger.level
        try:
            configure_logging("debug")
            assert logger.level == logging.DEBUG
        finally:
            logger.setLevel(previous)
