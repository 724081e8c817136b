"""Unit tests for the debounced, single-flight autosave session."""

import threading

import pytest

from folio.contexts.editing import EditSession, SavePayload, SaveState, ThreadingScheduler
from folio.contexts.schema import add_item
from folio.exceptions import DocumentValidationError, PersistenceError, SaveError
from folio.utils.event_logging import get_recent_events


class RecordingPersist:
    """Persist callable that records payloads and can be told to fail."""

    def __init__(self):
        self.payloads = []
        self.fail_with = None
        self.during = None

    def __call__(self, payload: SavePayload):
        if self.during is not None:
            during, self.during = self.during, None
            during()
        if self.fail_with is not None:
            raise self.fail_with
        self.payloads.append(payload)


@pytest.fixture
def persist():
    return RecordingPersist()


@pytest.fixture
def notes():
    return []


@pytest.fixture
def session(sample_doc, persist, scheduler, notes):
    return EditSession(
        sample_doc,
        persist,
        title="Jane Doe - CV",
        scheduler=scheduler,
        notifier=lambda level, message: notes.append((level, message)),
    )


@pytest.mark.unit
def test_new_session_is_clean(session):
    assert session.state == SaveState.CLEAN
    assert not session.has_changes
    assert session.save_count == 0


@pytest.mark.unit
def test_rapid_mutations_produce_one_save_with_latest_state(session, persist, scheduler):
    """Test that edits within the debounce window collapse into one persist."""
    session.update_basics(name="J")
    session.update_basics(name="Ja")
    session.update_basics(name="Jan")

    assert session.state == SaveState.DIRTY
    assert len(scheduler.pending) == 1
    assert persist.payloads == []

    assert scheduler.fire_all() == 1
    assert len(persist.payloads) == 1
    assert persist.payloads[0].document.basics.name == "Jan"
    assert persist.payloads[0].title == "Jane Doe - CV"
    assert session.state == SaveState.CLEAN
    assert not session.has_changes


@pytest.mark.unit
def test_timer_rearmed_with_configured_delay(sample_doc, persist, scheduler):
    session = EditSession(sample_doc, persist, delay=0.25, scheduler=scheduler)
    session.set_title("New title")

    assert scheduler.pending[0].delay == 0.25


@pytest.mark.unit
def test_mutation_during_save_yields_one_follow_up_save(session, persist, scheduler):
    """Test that an edit arriving mid-save is saved by exactly one follow-up persist."""
    session.update_basics(name="First")
    persist.during = lambda: session.update_basics(name="Second")

    scheduler.fire_all()

    assert [p.document.basics.name for p in persist.payloads] == ["First", "Second"]
    assert session.state == SaveState.CLEAN
    assert session.save_count == 2


@pytest.mark.unit
def test_state_is_saving_while_persist_runs(session, persist, scheduler):
    seen = []
    persist.during = lambda: seen.append(session.state)
    session.update_basics(name="X")

    scheduler.fire_all()

    assert seen == [SaveState.SAVING]


@pytest.mark.unit
def test_failed_save_stays_dirty_without_retry(session, persist, scheduler, notes):
    session.update_basics(name="Offline")
    persist.fail_with = PersistenceError("database is locked")

    scheduler.fire_all()

    assert session.state == SaveState.DIRTY
    assert session.has_changes
    assert isinstance(session.last_error, PersistenceError)
    assert scheduler.pending == []
    assert notes[-1][0] == "error"


@pytest.mark.unit
def test_next_mutation_retries_after_failure(session, persist, scheduler):
    session.update_basics(name="Offline")
    persist.fail_with = PersistenceError("database is locked")
    scheduler.fire_all()

    persist.fail_with = None
    session.update_basics(name="Online")
    scheduler.fire_all()

    assert persist.payloads[-1].document.basics.name == "Online"
    assert session.state == SaveState.CLEAN
    assert session.last_error is None


@pytest.mark.unit
def test_manual_save_cancels_timer_and_notifies(session, persist, scheduler, notes):
    session.set_public(True)

    assert session.save() is True
    assert scheduler.pending == []
    assert persist.payloads[0].is_public is True
    assert notes == [("success", "Saved")]


@pytest.mark.unit
def test_autosave_is_silent(session, scheduler, notes):
    session.set_title("Quiet")
    scheduler.fire_all()
    assert notes == []


@pytest.mark.unit
def test_save_without_changes_does_not_persist(session, persist):
    assert session.save() is True
    assert persist.payloads == []


@pytest.mark.unit
def test_finish_saves_and_closes(session, persist):
    session.apply(add_item, "work", {"name": "Acme"})
    session.finish()

    assert session.closed
    assert persist.payloads[-1].document.work[-1].name == "Acme"
    with pytest.raises(RuntimeError):
        session.update_basics(name="late")


@pytest.mark.unit
def test_finish_raises_save_error_and_stays_open(session, persist):
    session.update_basics(name="X")
    persist.fail_with = PersistenceError("disk full")

    with pytest.raises(SaveError) as exc_info:
        session.finish()

    assert isinstance(exc_info.value.original_error, PersistenceError)
    assert not session.closed
    assert session.state == SaveState.DIRTY


@pytest.mark.unit
def test_close_drops_pending_timer(session, persist, scheduler):
    session.update_basics(name="Unsaved")
    session.close()

    assert scheduler.pending == []
    assert persist.payloads == []


@pytest.mark.unit
def test_invalid_mutation_leaves_state_unchanged(session, scheduler):
    with pytest.raises(DocumentValidationError):
        session.update_field("work", "not a list")

    assert session.state == SaveState.CLEAN
    assert scheduler.pending == []


@pytest.mark.unit
def test_unexpected_persist_error_propagates(session, persist):
    session.update_basics(name="X")
    persist.fail_with = KeyError("bug")

    with pytest.raises(KeyError):
        session.save()
    assert session.state == SaveState.DIRTY


@pytest.mark.unit
def test_concurrent_saves_are_single_flight(sample_doc):
    """Test that a save requested during a running persist waits for it."""
    release = threading.Event()
    entered = threading.Event()
    active = []
    overlaps = []

    def slow_persist(payload):
        if active:
            overlaps.append(payload)
        active.append(payload)
        entered.set()
        release.wait(timeout=5)
        active.pop()

    session = EditSession(sample_doc, slow_persist, scheduler=ThreadingScheduler(), delay=60)
    session.update_basics(name="One")
    first = threading.Thread(target=session.save)
    first.start()
    assert entered.wait(timeout=5)

    session.update_basics(name="Two")
    second = threading.Thread(target=session.save)
    second.start()
    release.set()
    first.join(timeout=5)
    second.join(timeout=5)
    session.close()

    assert overlaps == []
    assert session.state == SaveState.CLEAN
    assert session.save_count == 2


@pytest.mark.unit
def test_for_record_updates_store_and_logs_events(store, scheduler):
    record = store.create("Draft", "draft")
    session = EditSession.for_record(store, record, scheduler=scheduler)

    session.update_basics(name="Jane")
    session.set_public(True)
    scheduler.fire_all()

    stored = store.get(record.id)
    assert stored.document.basics.name == "Jane"
    assert stored.is_public
    assert [e["event_type"] for e in get_recent_events(slug="draft", event_type="autosaved")] == ["autosaved"]


@pytest.mark.unit
def test_for_record_failure_logs_event(store, scheduler):
    record = store.create("Draft", "draft")
    session = EditSession.for_record(store, record, scheduler=scheduler)
    store.delete(record.id)

    session.update_basics(name="Jane")
    scheduler.fire_all()

    assert session.state == SaveState.DIRTY
    assert get_recent_events(slug="draft", event_type="autosave_failed")
