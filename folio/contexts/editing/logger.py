"""
Editing context logger.

Provides logging interface for the editing context with automatic [edit] prefix.
"""

from loguru import logger

CONTEXT_PREFIX = "[edit]"


def _log_info(message: str) -> None:
    """Log info message with [edit] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [edit] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [edit] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [edit] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


_NOTIFY_LEVELS = {
    "success": _log_success,
    "error": _log_error,
    "info": _log_info,
}


def log_notification(level: str, message: str) -> None:
    """Default EditSession notifier: user-facing feedback goes to the log."""
    _NOTIFY_LEVELS.get(level, _log_info)(message)


def log_state_change(old_state, new_state, version: int) -> None:
    if old_state != new_state:
        _log_debug(f"Session {old_state.value} -> {new_state.value} (v{version})")
