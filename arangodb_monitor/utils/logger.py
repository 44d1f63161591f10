"""Structured JSON logging configuration."""

import logging
import sys
from typing import IO, Optional
from pythonjsonlogger import jsonlogger


METRICS_LOGGER_SUFFIX = "metrics"


def setup_logger(
    name: str = "arangodb_monitor",
    level: str = "INFO",
    stream: Optional[IO[str]] = None
) -> logging.Logger:
    """
    Configure structured JSON logging.

    Extra attributes passed to a log call (e.g. the measurement, tags and
    fields of a metric record) become keys of the emitted JSON object.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        stream: Output stream, stdout when omitted

    Returns:
        logging.Logger: Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers to avoid duplicates
    logger.handlers = []

    handler = logging.StreamHandler(stream or sys.stdout)
    formatter = jsonlogger.JsonFormatter(
        '%(asctime)s %(name)s %(levelname)s %(message)s',
        timestamp=True
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    logger.propagate = False

    return logger


def metrics_logger(parent: logging.Logger) -> logging.Logger:
    """
    Child logger carrying metric records.

    Records are the monitor's output rather than diagnostics, so this logger
    stays at INFO even when the parent is raised to WARNING or above. It
    writes through the parent's JSON handler.

    Args:
        parent: Logger configured by setup_logger

    Returns:
        logging.Logger: "<parent>.metrics" logger
    """
    logger = parent.getChild(METRICS_LOGGER_SUFFIX)
    logger.setLevel(logging.INFO)
    return logger
