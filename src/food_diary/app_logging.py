"""Logging configuration helpers."""

import logging

LOGGER_NAME = "food_diary"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach one stream handler to the app logger and apply ``level``.

    Calling it again only updates the level, so app factories used in tests
    do not stack handlers.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
        logger.addHandler(handler)
        logger.propagate = False
    return logger
