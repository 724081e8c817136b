"""
Scoring context logger.

Provides logging interface for the scoring context with automatic [score] prefix.
The scorer itself never logs; callers log results through these helpers.
"""

from loguru import logger

CONTEXT_PREFIX = "[score]"


def _log_info(message: str) -> None:
    """Log info message with [score] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [score] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_score_result(resume_name: str, result) -> None:
    """Log an ATSScore summary and its per-category breakdown."""
    _log_info(f"{resume_name}: ATS score {result.total}/100 ({result.band.label})")
    for category in result.categories:
        _log_debug(f"  {category.name}: {category.score}/{category.max_points}")
        for suggestion in category.suggestions:
            _log_debug(f"    - {suggestion}")
