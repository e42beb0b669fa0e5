"""Tests for logging configuration."""

import logging

from fastapi.testclient import TestClient

from food_diary.api.app import create_app
from food_diary.app_logging import LOGGER_NAME, configure_logging


def test_configure_logging_keeps_single_handler() -> None:
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()

    configure_logging()
    configure_logging("debug")

    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG
    assert logger.propagate is False


def test_create_app_applies_configured_level(container) -> None:
    container.settings = container.settings.model_copy(update={"log_level": "WARNING"})

    client = TestClient(create_app(container))

    assert client.get("/health").status_code == 200
    assert logging.getLogger(LOGGER_NAME).level == logging.WARNING
    assert logging.getLogger("food_diary.api.resources").getEffectiveLevel() == logging.WARNING
