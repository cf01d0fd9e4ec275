"""Logging configuration."""

import logging
import sys

from pydantic import BaseModel

SERVICE_LOGGER = "patient_service"

QUIET_LOGGERS = ("httpx", "sqlalchemy.engine", "uvicorn.access")


class LogConfig(BaseModel):
    """Logging configuration, built from ``Settings.log_level`` at startup."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"


def setup_logging(config: LogConfig | None = None) -> None:
    """Configure the root handler and the service's own log level.

    Module loggers carry no level of their own, so everything under
    ``patient_service`` follows ``config.level``.
    """
    if config is None:
        config = LogConfig()

    level = getattr(logging, config.level.upper())
    logging.basicConfig(
        level=level,
        format=config.format,
        datefmt=config.date_format,
        stream=sys.stdout,
        force=True,
    )
    logging.getLogger(SERVICE_LOGGER).setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger; its level is inherited from the service logger."""
    return logging.getLogger(name)
