"""Observability module for levelforge.

Provides structured logging for the build and resolution layers.
"""

from levelforge.observability.logging import (
    close_file_logging,
    configure_logging,
    get_logger,
)

__all__ = [
    "close_file_logging",
    "configure_logging",
    "get_logger",
]
