"""
Web boundary logger.

Provides logging interface for the Flask app with automatic [web] prefix.
"""

from loguru import logger

CONTEXT_PREFIX = "[web]"


def _log_info(message: str) -> None:
    """Log info message with [web] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [web] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [web] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def log_request_error(method: str, path: str, status: int, error: Exception) -> None:
    """Log an error translated into an HTTP response."""
    line = f"{method} {path} -> {status}: {error}"
    if status >= 500:
        _log_error(line)
    else:
        _log_warning(line)
