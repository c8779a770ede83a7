"""
Flame graph error handling module

This module provides:
1. The exception hierarchy raised by the engine
2. A consistent error reporting pattern throughout the application
"""

import traceback
import logging

logger = logging.getLogger("flamegraph.error_handler")


class FlameGraphError(Exception):
    """Base class for flame graph errors."""


class SurfaceUnavailableError(FlameGraphError):
    """The drawing surface is missing or lacks a required primitive."""


class InvalidFlameDataError(FlameGraphError):
    """A dataset handed to set_data did not validate."""


class ErrorHandler:
    """Centralized error handling for the flame graph viewer."""

    @staticmethod
    def log_exception(e: Exception, context: str = "") -> str:
        """Log an exception with stack trace."""
        error_type = type(e).__name__
        error_msg = str(e)

        if context:
            logger.error("%s: %s: %s", context, error_type, error_msg)
        else:
            logger.error("%s: %s", error_type, error_msg)

        logger.debug("%s", traceback.format_exc())

        return f"{error_type}: {error_msg}"

