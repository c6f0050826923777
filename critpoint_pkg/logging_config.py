"""Logging for Critpoint.

All module loggers hang off the ``critpoint`` logger (``critpoint.api``,
``critpoint.solver``, ``critpoint.sampler`` ...), so the CLI's
``--log-level``/``--log-file`` flags configure the whole engine at once.
Nothing is emitted until ``setup_logging`` attaches handlers.
"""

import logging
import sys
from datetime import datetime
from typing import Optional

ROOT_LOGGER = "critpoint"


class StructuredFormatter(logging.Formatter):
    """One line per record: ISO timestamp, level, logger name, message.

    Tracebacks (``exc_info=True``, used for unexpected analysis failures)
    follow on the next lines.
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).isoformat()
        line = f"{timestamp} [{record.levelname}] {record.name}: {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(
    level: str = "WARNING", log_file: Optional[str] = None
) -> logging.Logger:
    """Attach stderr (and optionally file) handlers to the ``critpoint`` logger.

    WARNING is the default so one-shot CLI output stays clean; DEBUG shows
    solver roots, degenerate short-circuits and missing-cell counts.
    Calling it again replaces the previous handlers.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL (unknown names fall
            back to WARNING)
        log_file: Optional path that also receives every record

    Returns:
        The configured ``critpoint`` logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    logger.handlers.clear()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    for handler in handlers:
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for one engine component, e.g. ``get_logger("solver")``."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
