"""
Editing Context

Responsibilities:
- Holds the working copy of a resume during an edit session
- Debounces autosave and keeps persistence single-flight
- Reports save state and failures to the UI

Owns: EditSession, SaveState, scheduler seam
Never: Talks to storage directly (persist is injected)
"""

from folio.contexts.editing.scheduler import Scheduler, ThreadingScheduler, TimerHandle
from folio.contexts.editing.session import (
    AUTOSAVE_DELAY_S,
    EditSession,
    SavePayload,
    SaveState,
)

__all__ = [
    "AUTOSAVE_DELAY_S",
    "EditSession",
    "SavePayload",
    "SaveState",
    "Scheduler",
    "ThreadingScheduler",
    "TimerHandle",
]
