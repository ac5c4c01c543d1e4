"""
hostctl custom exceptions and error handling utilities.

This module provides the exception hierarchy used across hostctl and a small
handler that logs an error before raising it, so every failure reaching the
CLI carries a descriptive message and structured details.
"""

from __future__ import annotations

import logging
import traceback
from typing import Optional, Any, Dict, NoReturn


class HostctlError(Exception):
    """Base exception for all hostctl-related errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class HostctlConfigError(HostctlError):
    """Raised when the configuration store or settings cannot be used."""

    pass


class HostctlHostsFileError(HostctlError):
    """Raised when reading, writing or backing up the hosts file fails."""

    pass


class HostctlValidationError(HostctlError):
    """Raised when an IP address or hostname fails validation."""

    pass


class HostctlNotFoundError(HostctlError):
    """Raised when a named environment or entry does not exist."""

    pass


class ErrorHandler:
    """Centralized error handling utilities."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def log_and_raise(
        self,
        exception_class: type[HostctlError],
        message: str,
        original_error: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> NoReturn:
        """Log an error and raise a hostctl exception."""
        error_details = details or {}

        if original_error:
            error_details["original_error"] = str(original_error)
            error_details["original_type"] = type(original_error).__name__

        self.logger.error(f"❌ {message}")
        if original_error:
            self.logger.debug(f"Original error: {original_error}")
            self.logger.debug(f"Traceback: {traceback.format_exc()}")

        raise exception_class(message, error_details) from original_error


def format_error_message(error: Exception, include_traceback: bool = False) -> str:
    """Format error messages consistently."""
    if isinstance(error, HostctlError):
        message = error.message
        original = error.details.get("original_error")
        if original:
            message += f" ({original})"
    else:
        message = f"{type(error).__name__}: {str(error)}"

    if include_traceback:
        message += f"\n{traceback.format_exc()}"

    return message
