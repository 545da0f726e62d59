"""
Logging module for skool-loom-dl.

Provides standardized logging functionality across the application.
"""
import logging
import os
import sys
from datetime import datetime

# Log levels
DEBUG = logging.DEBUG
INFO = logging.INFO
WARNING = logging.WARNING
ERROR = logging.ERROR
CRITICAL = logging.CRITICAL

LOGGER_NAME = "skool_loom_dl"
LOG_DIR = "logs"

# Global logger instance
_logger = None


def setup_logger(level=logging.INFO, log_to_file=True, console_level=None):
    """
    Set up the logger with the specified configuration.

    Args:
        level (int): The logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file (bool): Whether to log to a file in addition to console
        console_level (int, optional): Separate logging level for console output.
                                      If None, uses the same level as specified in 'level'.

    Returns:
        logging.Logger: Configured logger instance
    """
    global _logger

    if _logger is not None:
        return _logger

    _logger = logging.getLogger(LOGGER_NAME)
    # The logger itself must let through whatever the most verbose handler wants
    effective_console = console_level if console_level is not None else level
    _logger.setLevel(min(level, effective_console))
    _logger.handlers = []

    formatter = logging.Formatter(
        "%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(effective_console)
    console_handler.setFormatter(formatter)
    _logger.addHandler(console_handler)

    if log_to_file:
        os.makedirs(LOG_DIR, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = os.path.join(LOG_DIR, f"skool_loom_dl_{timestamp}.log")

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        _logger.addHandler(file_handler)

    return _logger


def get_logger():
    """
    Get the configured logger instance.

    If the logger hasn't been set up yet, it will be initialized with default
    settings and without a log file.

    Returns:
        logging.Logger: Logger instance
    """
    global _logger
    if _logger is None:
        setup_logger(log_to_file=False)
    return _logger


def reset_logger():
    """Drop the configured logger so the next setup_logger call starts fresh."""
    global _logger
    if _logger is not None:
        for handler in _logger.handlers[:]:
            handler.close()
            _logger.removeHandler(handler)
    _logger = None


# Convenience functions
def debug(msg, *args, **kwargs):
    """Log a debug message."""
    get_logger().debug(msg, *args, **kwargs)


def info(msg, *args, **kwargs):
    """Log an info message."""
    get_logger().info(msg, *args, **kwargs)


def warning(msg, *args, **kwargs):
    """Log a warning message."""
    get_logger().warning(msg, *args, **kwargs)


def error(msg, *args, **kwargs):
    """Log an error message."""
    get_logger().error(msg, *args, **kwargs)


def critical(msg, *args, **kwargs):
    """Log a critical message."""
    get_logger().critical(msg, *args, **kwargs)
