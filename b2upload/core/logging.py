"""Logging utilities for b2upload modules."""

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger that automatically inherits from root logger.

    This ensures that loggers work with basicConfig() without needing
    explicit setup_logging() calls, even when basicConfig() runs after
    the modules were imported. The logger will:
    - Propagate to root logger (default behavior)
    - Keep level NOTSET, so the effective level comes from its parents

    With no handlers configured anywhere, Python's last-resort handler
    still only shows warnings and errors.

    Args:
        name: Logger name (e.g. 'b2upload.upload.pool')

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.propagate = True
    return logger
