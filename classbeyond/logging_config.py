"""
Logging Configuration for ClassBeyond

This module sets up centralized logging configuration for the entire application.
It should be imported and initialized early in the application lifecycle, before
any other modules that create loggers.
"""

import logging
import sys

from classbeyond.config import settings


def setup_logging(log_level: str | None = None) -> None:
    """
    Configure logging for the entire application.

    Args:
        log_level: Optional override for log level. If not provided, uses settings.LOG_LEVEL

    """
    level = log_level or settings.LOG_LEVEL
    level_upper = level.upper()
    numeric_level = getattr(logging, level_upper, logging.INFO)

    root_logger = logging.getLogger()

    # Clear any existing handlers to avoid duplicates
    root_logger.handlers.clear()
    root_logger.setLevel(numeric_level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)
    root_logger.info(
        "Logging configured: level=%s, handler=console",
        level_upper,
    )

    _configure_third_party_loggers(numeric_level)


def _configure_third_party_loggers(app_level: int) -> None:
    """
    Configure logging levels for third-party libraries.

    uvicorn and sqlalchemy are very verbose at DEBUG level, so they are
    held back while application loggers stay detailed.

    Args:
        app_level: The application's log level (used as reference)

    """

    # Keep uvicorn at INFO even if app is at DEBUG to avoid request spam
    logging.getLogger("uvicorn").setLevel(max(app_level, logging.INFO))
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)
    logging.getLogger("uvicorn.error").setLevel(logging.WARNING)

    # SQLAlchemy's DEBUG shows every SQL query
    if settings.DB_ECHO:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
    else:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
        logging.getLogger("sqlalchemy.engine.Engine").setLevel(logging.WARNING)

    logging.getLogger("sqlalchemy.pool").setLevel(
        logging.INFO if app_level == logging.DEBUG else logging.WARNING
    )
    logging.getLogger("sqlalchemy.dialects").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.orm").setLevel(logging.WARNING)

    logging.getLogger("fastapi").setLevel(logging.INFO)
    logging.getLogger("starlette").setLevel(logging.WARNING)

    # HTTP client libraries used by the email provider
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

