"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from utils.logger directly.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from folio.utils.logger import setup_logger as _setup_logger

load_dotenv()

CONTEXT_PREFIX = "[render]"


def setup_rendering_logger(log_dir: Path) -> Path:
    """
    Setup logger for rendering context.

    Args:
        log_dir: Directory for this rendering session

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="render",
        log_dir=log_dir,
        extra_provenance={"Image fetch timeout": os.getenv("IMAGE_FETCH_TIMEOUT_S", "5")},
    )


# Wrapper functions with automatic [render] prefix


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [render] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [render] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [render] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_render_start(resume_name: str, output: str, layout) -> None:
    """Log start of a render with the visible sections."""
    _log_info(f"Rendering {output}: {resume_name or '(unnamed)'}")
    _log_debug(f"  Left column: {', '.join(s.key for s in layout.left) or '-'}")
    _log_debug(f"  Main column: {', '.join(s.key for s in layout.main) or '-'}")


def log_render_result(resume_name: str, result, elapsed_time: float) -> None:
    """
    Log a PDF render result.

    Args:
        resume_name: Resume identifier
        result: PdfRenderResult from render_pdf()
        elapsed_time: Time taken to render
    """
    _log_success(
        f"{resume_name or '(unnamed)'}: {result.page_count} page(s), "
        f"{len(result.pdf_bytes)} bytes ({elapsed_time:.2f}s)"
    )
    if result.omitted:
        _log_warning(f"{len(result.omitted)} element(s) omitted")
        for item in result.omitted:
            _log_debug(f"  Omitted: {item}")


def log_element_omitted(element: str, error: Exception) -> None:
    """Log a single element dropped from the output."""
    _log_warning(f"Omitting {element}: {error}")
