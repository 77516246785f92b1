"""Lazy logger lookup for Note Drill modules."""
import logging
from typing import Dict

# Module-level cache for loggers
_logger_cache: Dict[str, logging.Logger] = {}


def get_logger(name: str) -> logging.Logger:
    """
    Get a lazily created logger for a Note Drill module.

    Levels and handlers are applied later by
    :func:`note_drill.logging_config.setup_logging`, so importing a module
    never configures logging as a side effect.

    Args:
        name: The full module name (e.g., 'note_drill.drill_session')

    Returns:
        The logger for that name
    """
    logger = _logger_cache.get(name)
    if logger is None:
        logger = logging.getLogger(name)
        _logger_cache[name] = logger
    return logger
