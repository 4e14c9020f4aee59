"""
Logging Configuration Module.

This module provides centralized logging configuration for the debug assistant.
Operator-facing output goes through the console operator; the log file keeps the
full record of a session, including provider request and response bodies.

Features:
- Configurable log levels per module
- Per-session log file plus optional console logging
- Simple, detailed and JSON line formats
"""

import logging
from pathlib import Path
from typing import Optional

# Define log formats
SIMPLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"

DETAILED_FORMAT = "[%(asctime)s] %(levelname)s - %(name)s - %(message)s"

JSON_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"module": "%(filename)s", "function": "%(funcName)s", "line": %(lineno)d, '
    '"message": "%(message)s"}'
)

DEFAULT_LOG_LEVEL = "DEBUG"
DEFAULT_LOG_FORMAT = "detailed"

# Module-specific log levels
MODULE_LOG_LEVELS = {
    "debug_assistant": "DEBUG",
    "debug_assistant.providers": "DEBUG",
    "debug_assistant.dispatcher": "DEBUG",
    "debug_assistant.session": "DEBUG",
    "debug_assistant.prompts": "INFO",
    # Third-party libraries (reduce noise)
    "httpx": "WARNING",
    "httpcore": "WARNING",
}

_FORMATS = {
    "json": JSON_FORMAT,
    "simple": SIMPLE_FORMAT,
    "detailed": DETAILED_FORMAT,
}


def resolve_format(log_format: Optional[str]) -> str:
    """Map a format name to its format string, defaulting to the detailed format."""
    return _FORMATS.get((log_format or DEFAULT_LOG_FORMAT).lower(), DETAILED_FORMAT)


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    log_file: Optional[Path] = None,
    enable_console: bool = False,
) -> None:
    """
    Configure logging for a debug session.

    Args:
        log_level: Level for the file handler (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Format name (simple, detailed, json)
        log_file: Session log file; parent directories are created when missing
        enable_console: Whether to also log to stderr
    """
    level = (log_level or DEFAULT_LOG_LEVEL).upper()
    fmt = (log_format or DEFAULT_LOG_FORMAT).lower()

    formatter = logging.Formatter(resolve_format(fmt), datefmt="%Y-%m-%d %H:%M:%S")

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture all levels, filter at handler level

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    if enable_console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if log_file is not None:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    if not root_logger.handlers:
        root_logger.addHandler(logging.NullHandler())

    # Configure module-specific log levels
    for module_name, module_level in MODULE_LOG_LEVELS.items():
        logging.getLogger(module_name).setLevel(module_level)

    root_logger.debug(f"Logging configured: level={level}, format={fmt}, log_file={log_file}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The module name (typically __name__)

    Returns:
        A configured logger instance
    """
    return logging.getLogger(name)
