"""Seed a store with the sample resume."""

from folio.contexts.schema.samples import SAMPLE_SLUG, SAMPLE_TITLE, sample_document
from folio.contexts.storage.logger import _log_info
from folio.contexts.storage.record import ResumeRecord
from folio.contexts.storage.store import DEFAULT_OWNER_ID, ResumeStore
from folio.exceptions import RecordNotFoundError


def seed_sample(
    store: ResumeStore, owner_id: str = DEFAULT_OWNER_ID, featured: bool = True
) -> ResumeRecord:
    """
    Store the sample resume as a public record (featured by default).

    Idempotent: if the sample slug already exists, that record is returned unchanged.
    """
    try:
        existing = store.get_by_slug(SAMPLE_SLUG)
    except RecordNotFoundError:
        pass
    else:
        _log_info(f"Sample resume already present: {SAMPLE_SLUG}")
        return existing

    record = store.create(
        title=SAMPLE_TITLE,
        slug=SAMPLE_SLUG,
        document=sample_document(),
        owner_id=owner_id,
        is_public=True,
    )
    if featured:
        record = store.set_featured(record.id)
    return record
