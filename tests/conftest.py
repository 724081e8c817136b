"""Shared fixtures: sample documents, temporary stores, a hand-driven scheduler."""

from typing import Callable, List

import pytest

from folio.contexts.schema import ResumeDocument, sample_document
from folio.contexts.storage import ResumeStore
from folio.utils import event_logging


class ManualTimer:
    def __init__(self, scheduler: "ManualScheduler", delay: float, callback: Callable[[], None]):
        self.scheduler = scheduler
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler whose timers fire only when the test says so."""

    def __init__(self):
        self.timers: List[ManualTimer] = []

    def schedule(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(self, delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> List[ManualTimer]:
        return [t for t in self.timers if not t.cancelled]

    def fire_all(self) -> int:
        """Fire every pending timer (including ones armed while firing). Returns count fired."""
        fired = 0
        while self.pending:
            timer = self.pending[0]
            timer.cancelled = True
            timer.callback()
            fired += 1
        return fired


@pytest.fixture(autouse=True)
def isolated_event_log(tmp_path, monkeypatch):
    """Keep lifecycle events out of the real outs/ directory."""
    events_file = tmp_path / "events" / "resume_events.log"
    monkeypatch.setattr(event_logging, "PIPELINE_EVENTS_FILE", events_file)
    return events_file


@pytest.fixture
def sample_doc() -> ResumeDocument:
    return sample_document()


@pytest.fixture
def empty_doc() -> ResumeDocument:
    return ResumeDocument.empty()


@pytest.fixture
def store(tmp_path) -> ResumeStore:
    store = ResumeStore(tmp_path / "folio.db")
    yield store
    store.close()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()
