"""
Resume lifecycle event logging (Tier 2 logging).

Appends one JSON object per line to the events log whenever a resume record changes
state (created, updated, published, featured, deleted, rendered, autosaved, ...).
For detailed within-context logging (Tier 1), use folio.utils.logger instead.

Usage:
    from folio.utils.event_logging import log_resume_event

    log_resume_event(
        event_type="featured",
        slug="jane-doe",
        source="storage",
        resume_id="3f2a..."
    )
"""

import json
import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from folio.utils.timestamp import now_exact

load_dotenv()
PIPELINE_EVENTS_FILE = Path(os.getenv("PIPELINE_EVENTS_FILE", "outs/logs/resume_events.log"))

EVENT_TYPES = {
    "created",
    "updated",
    "deleted",
    "duplicated",
    "published",
    "unpublished",
    "featured",
    "rendered",
    "render_failed",
    "autosaved",
    "autosave_failed",
}


def log_resume_event(
    event_type: str,
    slug: str,
    source: str,
    events_file: Optional[Path] = None,
    **extra_fields,
) -> None:
    """
    Log an event to the resume event log.

    Events are appended in JSON Lines format, which allows streaming reads and
    filtering by event_type, slug, or source.

    Args:
        event_type: One of EVENT_TYPES
        slug: Slug of the resume record the event concerns
        source: Event source (e.g., "storage", "rendering", "editing", "web", "cli")
        events_file: Override the log location (default: PIPELINE_EVENTS_FILE)
        **extra_fields: Additional event-specific fields

    Raises:
        ValueError: If event_type is unknown
    """
    if event_type not in EVENT_TYPES:
        raise ValueError(f"Unknown event type: {event_type}")

    events_file = events_file or PIPELINE_EVENTS_FILE
    events_file.parent.mkdir(parents=True, exist_ok=True)

    event = {
        "timestamp": now_exact(),
        "event_type": event_type,
        "slug": slug,
        "source": source,
        **extra_fields,
    }

    with open(events_file, "a", encoding="utf-8") as f:
        f.write(json.dumps(event) + "\n")


def get_recent_events(
    n: int = 10,
    slug: Optional[str] = None,
    event_type: Optional[str] = None,
    events_file: Optional[Path] = None,
) -> List[dict]:
    """
    Get the last n events from the event log, optionally filtered.

    Args:
        n: Number of recent events to return (default: 10)
        slug: Only events for this resume slug (optional)
        event_type: Only events of this type (optional)
        events_file: Override the log location (default: PIPELINE_EVENTS_FILE)

    Returns:
        List of event dicts (most recent last)
    """
    events_file = events_file or PIPELINE_EVENTS_FILE
    if not events_file.exists():
        return []

    events = []
    with open(events_file, "r", encoding="utf-8") as f:
        for line in f:
            try:
                events.append(json.loads(line.strip()))
            except json.JSONDecodeError:
                # Skip malformed lines
                continue

    if slug:
        events = [e for e in events if e.get("slug") == slug]

    if event_type:
        events = [e for e in events if e.get("event_type") == event_type]

    return events[-n:] if len(events) > n else events
