"""Logging configuration for ipwatch.

Logging is set up in two steps because the log settings live in the
config file, and loading that file can itself fail:

1. ``setup_logging()`` attaches the console handler as soon as the
   command starts, so even a config error is logged in the usual format.
2. ``apply_config(config)`` applies the configured level and adds the
   log file once the config has been loaded.
"""

import logging
from pathlib import Path

from ipwatch.config import Config
from ipwatch.errors import ConfigError

LOGGER_NAME = "ipwatch"

# Log format: 2025-01-27 10:30:45 [INFO] message
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_logger: logging.Logger | None = None
_file_handler: logging.FileHandler | None = None


def _parse_level(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)


def _formatter() -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Attach the console handler to the ipwatch logger.

    Idempotent: later calls return the same logger untouched.

    Args:
        level: Initial level, used until the config is applied.

    Returns:
        The ipwatch logger.
    """
    global _logger

    if _logger is not None:
        return _logger

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(_parse_level(level))
    logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(_formatter())
    logger.addHandler(console_handler)

    logger.propagate = False

    _logger = logger
    return logger


def apply_config(config: Config) -> logging.Logger:
    """Apply the configured level and log file.

    Sets up the console handler first if that has not happened yet.

    Raises:
        ConfigError: If the log file cannot be opened.
    """
    global _file_handler

    logger = setup_logging()
    logger.setLevel(_parse_level(config.log_level))

    if config.log_file and _file_handler is None:
        log_path = Path(config.log_file).expanduser()
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path)
        except OSError as e:
            raise ConfigError(f"Can not open log file '{log_path}': {e}") from e
        file_handler.setFormatter(_formatter())
        logger.addHandler(file_handler)
        _file_handler = file_handler

    return logger


def reset_logging() -> None:
    """Reset logging state. Used for testing."""
    global _logger, _file_handler
    if _logger is not None:
        for handler in _logger.handlers:
            handler.close()
        _logger.handlers.clear()
        _logger.propagate = True
        _logger = None
    _file_handler = None
