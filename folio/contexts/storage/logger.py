"""
Storage context logger.

Provides logging interface for the storage context with automatic [store] prefix.
"""

from loguru import logger

CONTEXT_PREFIX = "[store]"


def _log_info(message: str) -> None:
    """Log info message with [store] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [store] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [store] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [store] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_store_opened(db_path, count: int) -> None:
    _log_info(f"Opened resume store: {db_path} ({count} records)")


def log_record_change(action: str, record) -> None:
    """Log a record lifecycle change (created, updated, deleted, ...)."""
    _log_info(f"{action.capitalize()} resume '{record.slug}' ({record.id})")
    _log_debug(f"  title={record.title!r} public={record.is_public} featured={record.is_featured}")
