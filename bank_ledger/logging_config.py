"""
Logging setup.

Configured once when the application starts. Every module
gets its own logger through logging.getLogger(__name__) and
inherits the root handler installed here.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries that log every query or request at INFO
NOISY_LOGGERS = [
    "sqlalchemy.engine",
    "httpx",
    "uvicorn.access",
]


def setup_logging(level: str | int = logging.INFO) -> logging.Logger:
    """
    Install a single stdout handler on the root logger.

    Safe to call more than once: existing root handlers are
    replaced, so log lines are never duplicated.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    root_logger.addHandler(handler)

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    root_logger.info(
        "Logging initialised (level=%s)", logging.getLevelName(level)
    )
    return root_logger
