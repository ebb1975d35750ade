"""
Carebook logger: console + rotating JSON file.

Usage:
    from carebook.core.logger import configure, get_logger, LoggerConfig

    configure(LoggerConfig(level="DEBUG", log_dir="/var/log/carebook"))
    # or from env: LOG_LEVEL, LOG_DIR, LOG_FILE_BASENAME, LOG_MAX_BYTES, ...
    configure()

    logger = get_logger(__name__)
    logger.info("Series expanded", extra={"series_id": str(series.id), "event_count": 52})
"""
from carebook.core.logger.config import LoggerConfig
from carebook.core.logger.formatters import JsonFormatter, PlainConsoleFormatter
from carebook.core.logger.setup import (
    build_console_handler,
    build_rotating_file_handler,
    configure,
    get_logger,
)

__all__ = [
    "LoggerConfig",
    "JsonFormatter",
    "PlainConsoleFormatter",
    "configure",
    "get_logger",
    "build_rotating_file_handler",
    "build_console_handler",
]
