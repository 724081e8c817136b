"""
Schema context logger.

Provides logging interface for the schema context with automatic [schema] prefix.
All schema modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

CONTEXT_PREFIX = "[schema]"


def _log_info(message: str) -> None:
    """Log info message with [schema] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [schema] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_document_loaded(path: Path, document) -> None:
    """Log a document read from disk with a short content summary."""
    _log_info(f"Loaded resume document: {path}")
    _log_debug(
        f"  {len(document.work)} work, {len(document.education)} education, "
        f"{len(document.skills)} skill groups, {len(document.projects)} projects"
    )
