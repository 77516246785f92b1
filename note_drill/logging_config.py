"""Centralized logging configuration for Note Drill.

This module provides a consistent way to configure logging across the application.
"""

import logging
import sys
from typing import Optional

# Log levels for different modules
MODULE_LOG_LEVELS = {
    # Core modules
    "note_drill": logging.INFO,
    "note_drill.main": logging.INFO,
    # Pitch model and mappers
    "note_drill.note_utils": logging.INFO,
    "note_drill.note_matcher": logging.INFO,  # Set to DEBUG for detailed matching info
    "note_drill.staff": logging.INFO,
    "note_drill.fretboard": logging.INFO,
    # Drill engine
    "note_drill.random_source": logging.INFO,
    "note_drill.drill_session": logging.INFO,
    "note_drill.trainers": logging.INFO,
    "note_drill.core": logging.INFO,
    "note_drill.stats": logging.INFO,
    "note_drill.logger": logging.WARNING,  # Logger module itself should be quiet
    # Root logger
    "": logging.ERROR,
}

PACKAGE_PREFIX = "note_drill"

# Shared console handler
_console_handler: Optional[logging.Handler] = None


def setup_logging(level: Optional[str] = None) -> None:
    """Set up logging configuration for the application.

    Args:
        level: If provided, override all 'note_drill' log levels with this level (e.g., "DEBUG").
    """
    global _console_handler

    # Create a single, shared console handler if it doesn't exist
    if _console_handler is None:
        _console_handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        _console_handler.setFormatter(formatter)

    # Determine log levels
    log_levels = MODULE_LOG_LEVELS.copy()
    if level:
        numeric_level = logging.getLevelName(level.upper())
        if isinstance(numeric_level, int):
            for module_name in log_levels:
                if module_name.startswith(PACKAGE_PREFIX):
                    log_levels[module_name] = numeric_level
        else:
            logging.getLogger(__name__).error("Invalid log level: %s", level)

    # Only the package logger and the root logger get the handler; module
    # loggers propagate up to it.
    for module_name, module_level in log_levels.items():
        logger = logging.getLogger(module_name)
        logger.setLevel(module_level)

        if module_name in (PACKAGE_PREFIX, ""):
            for handler in logger.handlers[:]:
                logger.removeHandler(handler)
            logger.addHandler(_console_handler)

    logging.getLogger(PACKAGE_PREFIX).propagate = False

    # Confirm setup complete
    logging.getLogger(PACKAGE_PREFIX).debug("Logging configuration complete")
