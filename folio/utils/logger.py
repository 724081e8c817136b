"""
Tier 1 (detailed) session logging.

One log directory per CLI or server session, holding a DEBUG-level file next to an
INFO-level console stream. Each session starts with a provenance header: the command
line, the folio version, where lifecycle events go, and which folio settings were
overridden through the environment. Context wrappers live in contexts/{context}/logger.py.
"""

import os
import sys
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv
from loguru import logger

from folio import __version__
from folio.utils import event_logging

load_dotenv()

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"

# Environment variables that change folio behaviour, in provenance order
SETTINGS_ENV_VARS = (
    "FOLIO_DB_PATH",
    "ATS_RUBRIC_PATH",
    "PIPELINE_EVENTS_FILE",
    "AUTOSAVE_DELAY_S",
    "IMAGE_FETCH_TIMEOUT_S",
    "DEFAULT_OWNER_ID",
)


def setup_logger(context_name: str, log_dir: Path, extra_provenance: Optional[dict] = None) -> Path:
    """
    Send loguru output to a session log file and the console, then write provenance.

    Args:
        context_name: Context identifier, used as the log file name ("render", "web")
        log_dir: Directory for this logging session (created if missing)
        extra_provenance: Session details for the header (e.g. {"Database": path})

    Returns:
        Path to the log file
    """
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()
    logger.level("WARNING", color="<white>")
    logger.add(log_file, format=FILE_FORMAT, level="DEBUG")
    logger.add(sys.stdout, format=CONSOLE_FORMAT, level="INFO", colorize=True)

    log_provenance(extra_provenance)
    return log_file


def settings_overrides() -> Dict[str, str]:
    """Folio settings set in the environment (including .env), by variable name."""
    return {name: os.environ[name] for name in SETTINGS_ENV_VARS if os.environ.get(name)}


def log_provenance(extra_context: Optional[dict] = None) -> None:
    """Write the session header: command, folio version, event log and settings."""
    logger.info("=" * 80)
    logger.info(f"Command: {' '.join(sys.argv)}")
    logger.info(f"Working directory: {Path.cwd()}")
    logger.info(f"folio {__version__} on Python {sys.version.split()[0]}")
    logger.info(f"Lifecycle events: {event_logging.PIPELINE_EVENTS_FILE}")

    overrides = settings_overrides()
    if overrides:
        for name, value in overrides.items():
            logger.info(f"Setting {name}={value}")
    else:
        logger.info("Settings: defaults")

    for key, value in (extra_context or {}).items():
        logger.info(f"{key}: {value}")

    logger.info("=" * 80)
