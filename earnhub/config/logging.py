"""
Logging configuration.

Configures loguru logger for every entrypoint (API, scheduler,
worker, scripts). Sets up log rotation and retention policies.
"""

from loguru import logger

from earnhub.config.settings import settings


def setup_logging(name: str = "earnhub") -> None:
    """
    Configure logger with file rotation.

    Args:
        name: Log file name without extension
    """
    logger.add(
        f"logs/{name}.log",
        rotation="1 day",
        retention="7 days",
        level=settings.log_level,
        encoding="utf-8",
    )

    logger.info(f"Starting earnhub {name}...")
