"""
Logging utility for TokenSniff.

Logs go to STDERR so STDOUT stays reserved for reports (text or JSON
that other tools may parse).

The CLI calls configure_logging() once at startup; library code just
imports ``logger``.
"""

import os
import sys

from loguru import logger as loguru_logger

# ============================================================================
# Logger Configuration
# ============================================================================

LOG_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level>"
)


def is_debug_enabled() -> bool:
    """Check if debug mode is enabled."""
    return os.environ.get("DEBUG", "").lower() == "true"


def configure_logging(verbose: bool = False) -> None:
    """Install the single STDERR sink.

    Args:
        verbose: Log at DEBUG level. ``DEBUG=true`` in the environment
            has the same effect.
    """
    level = "DEBUG" if verbose or is_debug_enabled() else "WARNING"
    loguru_logger.remove()
    loguru_logger.add(sys.stderr, level=level, format=LOG_FORMAT)


# Export loguru logger for direct use
logger = loguru_logger
