import logging

import pytest

from funpaintball.logging_config import ENV_LOG_LEVEL, PLUGIN_LOGGER, configure_logging, parse_level


@pytest.fixture()
def restore_level():
    logger = logging.getLogger(PLUGIN_LOGGER)
    level = logger.level
    yield logger
    logger.setLevel(level)


def test_env_level_is_respected(monkeypatch: pytest.MonkeyPatch, restore_level):
    monkeypatch.setenv(ENV_LOG_LEVEL, "debug")
    assert configure_logging() == logging.DEBUG
    assert restore_level.level == logging.DEBUG


def test_unknown_env_level_falls_back(monkeypatch: pytest.MonkeyPatch, restore_level):
    monkeypatch.setenv(ENV_LOG_LEVEL, "chatty")
    configure_logging(default_level=logging.WARNING)
    assert restore_level.level == logging.WARNING


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, logging.INFO),
        ("", logging.INFO),
        (" warning ", logging.WARNING),
        ("15", 15),
        ("Level 99", logging.INFO),
    ],
)
def test_parse_level(value, expected):
    assert parse_level(value) == expected
