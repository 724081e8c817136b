"""Unit tests for the SQLite resume store."""

import re
import threading

import pytest

from folio.contexts.schema import ResumeDocument, update_basics
from folio.contexts.schema.samples import SAMPLE_SLUG
from folio.contexts.storage import ResumeStore, seed_sample
from folio.exceptions import (
    DocumentValidationError,
    PersistenceError,
    RecordNotFoundError,
    RecordValidationError,
    SlugConflictError,
)
from folio.utils.event_logging import get_recent_events


@pytest.mark.unit
def test_create_defaults(store):
    """Test that a new record is a private, unfeatured, empty draft."""
    record = store.create("My CV", "my-cv")

    assert record.document == ResumeDocument.empty()
    assert not record.is_public
    assert not record.is_featured
    assert record.owner_id == "local"
    assert store.get(record.id) == record


@pytest.mark.unit
def test_create_with_document_mapping(store, sample_doc):
    record = store.create("Jane", "jane", document=sample_doc.to_dict(), is_public=True)

    assert store.get(record.id).document == sample_doc
    assert record.is_public


@pytest.mark.unit
@pytest.mark.parametrize(
    "title, slug, field",
    [
        ("", "ok", "title"),
        ("   ", "ok", "title"),
        (None, "ok", "title"),
        ("Title", "", "slug"),
        ("Title", "Not A Slug", "slug"),
        ("Title", "trailing-", "slug"),
    ],
)
def test_create_rejects_invalid_fields_before_writing(store, title, slug, field):
    with pytest.raises(RecordValidationError) as exc_info:
        store.create(title, slug)

    assert exc_info.value.field == field
    assert store.count() == 0


@pytest.mark.unit
def test_create_rejects_malformed_document(store):
    with pytest.raises(DocumentValidationError):
        store.create("Title", "title", document={"work": "nope"})
    assert store.count() == 0


@pytest.mark.unit
def test_create_rejects_non_boolean_visibility(store):
    with pytest.raises(RecordValidationError):
        store.create("Title", "title", is_public="yes")


@pytest.mark.unit
def test_slug_conflict(store):
    store.create("First", "same")

    with pytest.raises(SlugConflictError) as exc_info:
        store.create("Second", "same")

    assert exc_info.value.slug == "same"
    assert [r.title for r in store.list_by_owner()] == ["First"]


@pytest.mark.unit
def test_concurrent_creates_with_same_slug(tmp_path):
    """Test that of two racing creates with one slug, exactly one wins."""
    store = ResumeStore(tmp_path / "race.db")
    results = []
    barrier = threading.Barrier(2)

    def create(title):
        barrier.wait()
        try:
            results.append(store.create(title, "race"))
        except SlugConflictError as e:
            results.append(e)

    threads = [threading.Thread(target=create, args=(t,)) for t in ("A", "B")]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    store.close()

    assert sum(isinstance(r, SlugConflictError) for r in results) == 1
    assert len(results) == 2


@pytest.mark.unit
def test_update_is_partial(store, sample_doc):
    record = store.create("Jane", "jane", document=sample_doc)

    updated = store.update(record.id, title="Jane v2")

    assert updated.title == "Jane v2"
    assert updated.document == sample_doc
    assert updated.slug == "jane"
    assert updated.created_at == record.created_at


@pytest.mark.unit
def test_update_twice_gives_same_state(store, sample_doc):
    """Test that repeating an update (as an autosave retry does) is harmless."""
    record = store.create("Jane", "jane")
    doc = update_basics(sample_doc, name="Retry")

    first = store.update(record.id, document=doc, is_public=True)
    second = store.update(record.id, document=doc, is_public=True)

    assert first.document == second.document == doc
    assert first.is_public and second.is_public
    assert first.title == second.title


@pytest.mark.unit
def test_update_validation_error_writes_nothing(store):
    record = store.create("Jane", "jane")

    with pytest.raises(RecordValidationError):
        store.update(record.id, title="", is_public=True)
    assert not store.get(record.id).is_public


@pytest.mark.unit
def test_update_slug_conflict(store):
    store.create("One", "one")
    two = store.create("Two", "two")

    with pytest.raises(SlugConflictError):
        store.update(two.id, slug="one")
    assert store.get(two.id).slug == "two"


@pytest.mark.unit
def test_update_unknown_record(store):
    with pytest.raises(RecordNotFoundError):
        store.update("missing", title="X")


@pytest.mark.unit
def test_public_lookup_hides_private_records(store):
    record = store.create("Jane", "jane")

    with pytest.raises(RecordNotFoundError) as private:
        store.get_public_by_slug("jane")
    with pytest.raises(RecordNotFoundError) as missing:
        store.get_public_by_slug("nobody")
    assert str(private.value) == str(missing.value)

    store.update(record.id, is_public=True)
    assert store.get_public_by_slug("jane").id == record.id


@pytest.mark.unit
def test_resolve_by_id_or_slug(store):
    record = store.create("Jane", "jane")

    assert store.resolve(record.id).id == record.id
    assert store.resolve("jane").id == record.id
    with pytest.raises(RecordNotFoundError):
        store.resolve("nope")


@pytest.mark.unit
def test_list_by_owner_most_recent_first(store):
    first = store.create("First", "first")
    store.create("Second", "second")
    store.create("Other", "other", owner_id="someone-else")
    store.update(first.id, title="First (edited)")

    assert [r.title for r in store.list_by_owner()] == ["First (edited)", "Second"]
    assert [r.title for r in store.list_by_owner("someone-else")] == ["Other"]


@pytest.mark.unit
def test_set_featured_is_exclusive_per_owner(store):
    """Test that featuring one record unfeatures the owner's others."""
    a = store.create("A", "a", is_public=True)
    b = store.create("B", "b", is_public=True)
    other = store.create("C", "c", owner_id="other", is_public=True)
    store.set_featured(other.id)

    store.set_featured(a.id)
    store.set_featured(b.id)

    featured = [r.slug for r in store.list_by_owner() if r.is_featured]
    assert featured == ["b"]
    assert store.get(other.id).is_featured
    assert store.get_featured("local").id == b.id


@pytest.mark.unit
def test_get_featured_requires_public(store):
    record = store.create("A", "a")
    store.set_featured(record.id)

    with pytest.raises(RecordNotFoundError, match="No featured CV found"):
        store.get_featured()


@pytest.mark.unit
def test_set_featured_unknown_record(store):
    with pytest.raises(RecordNotFoundError):
        store.set_featured("missing")


@pytest.mark.unit
def test_delete(store):
    record = store.create("A", "a")
    store.delete(record.id)

    with pytest.raises(RecordNotFoundError):
        store.get(record.id)
    with pytest.raises(RecordNotFoundError):
        store.delete(record.id)


@pytest.mark.unit
def test_duplicate(store, sample_doc):
    source = store.create("Jane", "jane-2", document=sample_doc, is_public=True)
    store.set_featured(source.id)

    copy = store.duplicate(source.id)

    assert copy.id != source.id
    assert copy.title == "Jane (Copy)"
    assert re.fullmatch(r"jane-copy-\d+", copy.slug)
    assert copy.document == sample_doc
    assert not copy.is_public
    assert not copy.is_featured


@pytest.mark.unit
def test_events_are_logged(store):
    record = store.create("A", "a")
    store.update(record.id, is_public=True)
    store.set_featured(record.id)
    store.delete(record.id)

    events = [e["event_type"] for e in get_recent_events(n=20, slug="a")]
    assert events == ["created", "updated", "published", "featured", "deleted"]


@pytest.mark.unit
def test_store_persists_across_connections(tmp_path):
    path = tmp_path / "persist.db"
    first = ResumeStore(path)
    record = first.create("A", "a")
    first.close()

    second = ResumeStore(path)
    assert second.get(record.id).title == "A"
    second.close()


@pytest.mark.unit
def test_in_memory_store():
    store = ResumeStore(":memory:")
    store.create("A", "a")
    assert store.count() == 1
    store.close()


@pytest.mark.unit
def test_unopenable_store_raises_persistence_error(tmp_path):
    with pytest.raises(PersistenceError):
        ResumeStore(tmp_path)


@pytest.mark.unit
def test_seed_sample_is_idempotent(store):
    first = seed_sample(store)
    second = seed_sample(store)

    assert first.id == second.id
    assert store.count() == 1
    assert first.slug == SAMPLE_SLUG
    assert first.is_public and first.is_featured
    assert store.get_featured().id == first.id
