"""
Tests for the store's own configuration (StoreSettings).

Environment variables are set with monkeypatch so nothing leaks into
other tests; the singleton is reset by the autouse fixture in conftest.
"""

import logging

import pytest

from src.config.settings import StoreSettings, get_settings, reset_settings
from src.utils.logging_setup import PACKAGE_LOGGER_NAME, get_logger, setup_logger


ENV_VARS = (
    "SETTINGS_STORE_DEFAULT_FILENAME",
    "SETTINGS_STORE_ENCODING",
    "SETTINGS_STORE_LABEL_WIDTH",
    "SETTINGS_STORE_LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults():
    settings = StoreSettings()
    assert settings.default_filename == "appsettings.hjson"
    assert settings.encoding == "utf-8"
    assert settings.label_width == 50
    assert settings.log_level == "WARNING"


def test_from_env_uses_defaults_when_unset(clean_env):
    assert StoreSettings.from_env() == StoreSettings()


def test_from_env_reads_variables(clean_env):
    clean_env.setenv("SETTINGS_STORE_DEFAULT_FILENAME", "myapp.json")
    clean_env.setenv("SETTINGS_STORE_ENCODING", "latin-1")
    clean_env.setenv("SETTINGS_STORE_LABEL_WIDTH", "20")
    clean_env.setenv("SETTINGS_STORE_LOG_LEVEL", "debug")

    settings = StoreSettings.from_env()

    assert settings.default_filename == "myapp.json"
    assert settings.encoding == "latin-1"
    assert settings.label_width == 20
    assert settings.logging_level == logging.DEBUG


def test_from_env_rejects_non_integer_width(clean_env):
    clean_env.setenv("SETTINGS_STORE_LABEL_WIDTH", "wide")
    with pytest.raises(ValueError) as exc_info:
        StoreSettings.from_env()
    assert "SETTINGS_STORE_LABEL_WIDTH" in str(exc_info.value)


@pytest.mark.parametrize("kwargs", [
    {"default_filename": ""},
    {"default_filename": "   "},
    {"encoding": ""},
    {"label_width": 0},
    {"log_level": "LOUD"},
])
def test_invalid_settings_raise(kwargs):
    with pytest.raises(ValueError):
        StoreSettings(**kwargs)


def test_get_settings_is_cached_until_reset(clean_env):
    first = get_settings()
    assert get_settings() is first

    clean_env.setenv("SETTINGS_STORE_LABEL_WIDTH", "30")
    assert get_settings().label_width == first.label_width

    reset_settings()
    assert get_settings().label_width == 30


def test_module_loggers_share_package_handler():
    package_logger = setup_logger("INFO")
    logger = get_logger("src.settings_store.store")

    assert package_logger.name == PACKAGE_LOGGER_NAME
    assert package_logger.level == logging.INFO
    assert len(package_logger.handlers) == 1
    assert logger.name.startswith(PACKAGE_LOGGER_NAME + ".")
