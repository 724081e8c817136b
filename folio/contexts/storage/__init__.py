"""
Storage Context

Responsibilities:
- Persists resume records (document + title, slug, visibility, featured flag)
- Enforces slug uniqueness and per-owner feature exclusivity
- Hides private records from public lookups

Owns: ResumeRecord, the resumes SQLite table
Never: Scores or renders documents
"""

from folio.contexts.storage.record import ResumeRecord
from folio.contexts.storage.seeding import seed_sample
from folio.contexts.storage.store import DEFAULT_OWNER_ID, FOLIO_DB_PATH, ResumeStore

__all__ = [
    "ResumeRecord",
    "ResumeStore",
    "DEFAULT_OWNER_ID",
    "FOLIO_DB_PATH",
    "seed_sample",
]
