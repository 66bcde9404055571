"""
Logging utilities for assetkit.

Provides a centralized logging configuration for the host runtime and for
the messages extension scripts emit through the host bridge.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

# Package root logger
_root_logger = logging.getLogger("assetkit")

PLUGIN_LOGGER_PREFIX = "plugin"

# Level to restore on enable()
_saved_level: int | None = None


def setup_logging(
    level: str | int = "INFO",
    format: str | None = None,
    stream: TextIO | None = None,
    file: str | None = None,
) -> None:
    """
    Configure logging for assetkit.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL) or int
        format: Custom log format string
        stream: Output stream (defaults to stderr)
        file: Optional file path to write logs

    Example:
        from assetkit.logging import setup_logging

        setup_logging("DEBUG")
        setup_logging("INFO", file="assetkit.log")
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    _root_logger.setLevel(level)
    _root_logger.handlers.clear()

    if format is None:
        format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

    formatter = logging.Formatter(format)

    stream_handler = logging.StreamHandler(stream or sys.stderr)
    stream_handler.setFormatter(formatter)
    stream_handler.setLevel(level)
    _root_logger.addHandler(stream_handler)

    if file:
        file_handler = logging.FileHandler(file)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        _root_logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a child logger for a submodule.

    Args:
        name: Submodule name (e.g., "registry", "dispatcher")

    Returns:
        Logger instance
    """
    if name.startswith("assetkit."):
        return logging.getLogger(name)
    return logging.getLogger(f"assetkit.{name}")


def get_plugin_logger(extension_id: str) -> logging.Logger:
    """Logger that receives ``log()`` and ``print()`` output of one extension."""
    return get_logger(f"{PLUGIN_LOGGER_PREFIX}.{extension_id}")


def set_level(level: str | int) -> None:
    """
    Set the log level for assetkit.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL) or int
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    _root_logger.setLevel(level)


def disable() -> None:
    """Disable all assetkit logging, including child loggers."""
    global _saved_level
    if _saved_level is None:
        _saved_level = _root_logger.level
    _root_logger.setLevel(logging.CRITICAL + 1)


def enable() -> None:
    """Re-enable assetkit logging at the level it had before ``disable()``."""
    global _saved_level
    if _saved_level is not None:
        _root_logger.setLevel(_saved_level)
        _saved_level = None
