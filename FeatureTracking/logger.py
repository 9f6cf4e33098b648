"""
Logging for FeatureTracking

Library modules only ask for child loggers of the package logger; the
application (e.g. the demo) attaches handlers once through
configure_root_logger.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

ROOT_LOGGER_NAME = "FeatureTracking"

# [2026-10-19 10:15:30] [DEBUG] [FeatureTracking.windowed_matcher] Matched 412/500 keypoints
LOG_FORMAT = '[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _parse_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown logging level: {level}")
    return value


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    level: Union[str, int] = "INFO",
    log_file: Optional[str] = None,
    console: bool = True,
    force: bool = False
) -> logging.Logger:
    """
    Attach console and/or file handlers to a logger

    An already configured logger is returned unchanged unless force is set.

    Args:
        name: Logger name
        level: Level name ('DEBUG', 'INFO', ...) or logging constant
        log_file: Optional path to a log file, parent directories are created
        console: Log to stdout
        force: Replace existing handlers

    Returns:
        Configured logger

    Raises:
        ValueError: If level is not a known logging level
    """
    logger = logging.getLogger(name)
    if logger.handlers and not force:
        return logger

    logger.setLevel(_parse_level(level))
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode='a')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Child logger of the package logger, e.g. get_logger("gyro_tracker")"""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_root_logger(level: Union[str, int] = "INFO",
                          log_file: Optional[str] = None) -> logging.Logger:
    """Configure the package logger; call once from the application"""
    return setup_logger(ROOT_LOGGER_NAME, level=level, log_file=log_file, force=True)
