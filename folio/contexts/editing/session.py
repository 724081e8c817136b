"""
Edit Session Controller

Holds the working copy of one resume while it is being edited and keeps it saved.

State machine:
    Clean  --any mutation-->          Dirty   (debounce timer re-armed)
    Dirty  --timer fires / save()-->  Saving
    Saving --persist ok-->            Clean   (or Dirty if a mutation arrived meanwhile)
    Saving --persist failed-->        Dirty   (no automatic retry)

Rules:
- Rapid mutations within the debounce window produce one persist call carrying the
  latest state.
- At most one persist call is in flight. A save requested while one is running waits
  for it, then persists the newest state.
- A mutation that arrives mid-save re-arms the timer, which yields exactly one
  follow-up save with the newest state.
- A failed save leaves the session Dirty with last_error set; the next mutation or an
  explicit save() tries again.
"""

import os
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from dotenv import load_dotenv

from folio.contexts.editing.logger import _log_debug, log_notification, log_state_change
from folio.contexts.editing.scheduler import Scheduler, ThreadingScheduler
from folio.contexts.schema import ResumeDocument, reducers
from folio.exceptions import FolioError, SaveError
from folio.utils.event_logging import log_resume_event

load_dotenv()
AUTOSAVE_DELAY_S = float(os.getenv("AUTOSAVE_DELAY_S", "1.5"))


class SaveState(str, Enum):
    CLEAN = "clean"
    DIRTY = "dirty"
    SAVING = "saving"


@dataclass(frozen=True)
class SavePayload:
    """
    What one persist call receives.

    Attributes:
        document: Newest document snapshot
        title: Record title (None if the session was opened without one)
        is_public: Record visibility
    """

    document: ResumeDocument
    title: Optional[str]
    is_public: bool


Persist = Callable[[SavePayload], Any]
Notifier = Callable[[str, str], None]


class EditSession:
    """Debounced, single-flight autosave around a ResumeDocument."""

    def __init__(
        self,
        document: ResumeDocument,
        persist: Persist,
        *,
        title: Optional[str] = None,
        is_public: bool = False,
        delay: float = AUTOSAVE_DELAY_S,
        scheduler: Optional[Scheduler] = None,
        notifier: Optional[Notifier] = None,
    ):
        """
        Start a session on an already-persisted document.

        Args:
            document: Document as last stored
            persist: Called with a SavePayload; raises a FolioError on failure
            title: Record title as last stored
            is_public: Record visibility as last stored
            delay: Debounce window in seconds
            scheduler: Timer source (default: ThreadingScheduler)
            notifier: Receives (level, message) user feedback (default: the log)
        """
        self._document = document
        self._title = title
        self._is_public = is_public
        self._persist = persist
        self._delay = delay
        self._scheduler = scheduler or ThreadingScheduler()
        self._notify = notifier or log_notification

        # _lock guards session fields; _save_lock keeps persist calls single-flight
        self._lock = threading.RLock()
        self._save_lock = threading.Lock()

        self._state = SaveState.CLEAN
        self._timer = None
        self._version = 0
        self._saved_version = 0
        self._save_count = 0
        self._last_error: Optional[Exception] = None
        self._closed = False

    @classmethod
    def for_record(cls, store, record, **kwargs) -> "EditSession":
        """
        Session whose persist call is a partial store.update of the record.

        Successful and failed autosaves are written to the lifecycle event log.
        """

        def persist(payload: SavePayload) -> None:
            try:
                store.update(
                    record.id,
                    title=payload.title,
                    document=payload.document,
                    is_public=payload.is_public,
                )
            except FolioError as e:
                log_resume_event(
                    "autosave_failed", record.slug, "editing", store.events_file, error=str(e)
                )
                raise
            log_resume_event("autosaved", record.slug, "editing", store.events_file)

        return cls(
            record.document,
            persist,
            title=record.title,
            is_public=record.is_public,
            **kwargs,
        )

    # Observables

    @property
    def state(self) -> SaveState:
        return self._state

    @property
    def document(self) -> ResumeDocument:
        return self._document

    @property
    def title(self) -> Optional[str]:
        return self._title

    @property
    def is_public(self) -> bool:
        return self._is_public

    @property
    def has_changes(self) -> bool:
        return self._version != self._saved_version

    @property
    def last_error(self) -> Optional[Exception]:
        return self._last_error

    @property
    def save_count(self) -> int:
        return self._save_count

    @property
    def closed(self) -> bool:
        return self._closed

    # Mutations

    def update_field(self, key: str, value: Any) -> ResumeDocument:
        """Replace one top-level document field (copy-on-write) and schedule a save."""
        return self.apply(reducers.update_field, key, value)

    def update_basics(self, **changes: Any) -> ResumeDocument:
        return self.apply(reducers.update_basics, **changes)

    def apply(self, reducer: Callable[..., ResumeDocument], *args, **kwargs) -> ResumeDocument:
        """
        Apply any schema reducer to the working document.

        Example:
            session.apply(add_item, "work", {"name": "Acme"})

        Raises:
            DocumentValidationError / IndexError: From the reducer; state is unchanged
        """
        with self._lock:
            self._check_open()
            document = reducer(self._document, *args, **kwargs)
            self._document = document
            self._mark_dirty()
            return document

    def set_title(self, title: str) -> None:
        with self._lock:
            self._check_open()
            self._title = title
            self._mark_dirty()

    def set_public(self, is_public: bool) -> None:
        with self._lock:
            self._check_open()
            self._is_public = bool(is_public)
            self._mark_dirty()

    # Saving

    def save(self, show_feedback: bool = True) -> bool:
        """
        Persist the newest state now, regardless of the debounce timer.

        Waits for an in-flight save first. Returns True when the stored state is
        current, False if this persist failed (see last_error).
        """
        with self._lock:
            self._cancel_timer()
        return self._run_save(show_feedback)

    def finish(self) -> None:
        """
        Terminal save ("Save & Finish"), then close the session.

        Raises:
            SaveError: If the final persist failed; the session stays open and Dirty
        """
        if not self.save(show_feedback=True):
            raise SaveError("Could not save resume", self._last_error)
        self.close()

    def close(self) -> None:
        """Stop scheduling saves. Unsaved changes are not persisted."""
        with self._lock:
            self._closed = True
            self._cancel_timer()
        _log_debug("Session closed")

    # Internals

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("Edit session is closed")

    def _set_state(self, state: SaveState) -> None:
        log_state_change(self._state, state, self._version)
        self._state = state

    def _mark_dirty(self) -> None:
        self._version += 1
        self._set_state(SaveState.DIRTY)
        self._cancel_timer()
        self._timer = self._scheduler.schedule(self._delay, self._on_timer)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer(self) -> None:
        with self._lock:
            self._timer = None
            if self._closed:
                return
        self._run_save(show_feedback=False)

    def _run_save(self, show_feedback: bool) -> bool:
        with self._save_lock:
            with self._lock:
                if self._version == self._saved_version:
                    if self._state != SaveState.CLEAN:
                        self._set_state(SaveState.CLEAN)
                    return True
                version = self._version
                payload = SavePayload(
                    document=self._document, title=self._title, is_public=self._is_public
                )
                self._set_state(SaveState.SAVING)

            try:
                self._persist(payload)
            except FolioError as e:
                with self._lock:
                    self._last_error = e
                    self._set_state(SaveState.DIRTY)
                self._notify("error", f"Failed to save: {e}")
                return False
            except Exception:
                with self._lock:
                    self._set_state(SaveState.DIRTY)
                raise

            with self._lock:
                self._saved_version = version
                self._save_count += 1
                self._last_error = None
                # A mutation during the save has already re-armed the timer
                self._set_state(SaveState.CLEAN if self._version == version else SaveState.DIRTY)

        if show_feedback:
            self._notify("success", "Saved")
        return True
