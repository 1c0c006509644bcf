"""Minimal logging utilities for Gotita.

Provides a simple get_logger function that wraps the standard library logging.
Gotita never installs handlers; applications decide where records go.

Example:
    >>> from gotita.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Scanning %d lines", 12)
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "gotita." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("resolver")
        >>> logger.name
        'gotita.resolver'
    """
    if not (name == "gotita" or name.startswith("gotita.")):
        name = f"gotita.{name}"
    return logging.getLogger(name)
