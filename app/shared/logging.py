"""
Logging setup for the memo service.

Call setup_logging() once at application startup; modules grab named loggers
with logging.getLogger("...").
"""

import logging


class SuppressHealthLogsFilter(logging.Filter):
    """Drop uvicorn access lines for the health check."""

    def filter(self, record):
        return "/healthz" not in record.getMessage()


def setup_logging(level: str | int = "INFO") -> None:
    """
    Configure the root logger.

    Args:
        level: level name ("DEBUG", "INFO", ...) or a logging constant
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    logging.getLogger("uvicorn.access").addFilter(SuppressHealthLogsFilter())

    logging.getLogger("Logging").info(f"Logging configured with level: {logging.getLevelName(level)}")
