"""Logging configuration for the deployer service."""

import logging
import sys

LOGGER_NAME = "rep_deployer"
LOG_FORMAT = "[%(asctime)s] %(levelname)s - %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Attach a stdout handler to the package logger.

    Calling this more than once only updates the level, so repeated app
    factories (tests, reloads) do not duplicate log lines.
    """

    logger = logging.getLogger(LOGGER_NAME)
    resolved_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(resolved_level)

    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    return logger


__all__ = ["LOGGER_NAME", "setup_logging"]
