"""
Persistent SQLite store for resume records.

One row per ResumeRecord; the document is stored as a JSON blob. The slug column is
UNIQUE, so two concurrent creates with the same slug cannot both succeed. Every
operation runs under one lock, which makes a store safe to share between the web
server's request threads and autosave timer threads.
"""

import json
import os
import re
import sqlite3
import threading
import time
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Any, List, Mapping, Optional, Union

from dotenv import load_dotenv

from folio.contexts.schema import ResumeDocument
from folio.contexts.storage.logger import _log_debug, log_record_change, log_store_opened
from folio.contexts.storage.record import (
    ResumeRecord,
    coerce_document,
    validate_flag,
    validate_slug,
    validate_title,
)
from folio.exceptions import PersistenceError, RecordNotFoundError, SlugConflictError
from folio.utils.event_logging import log_resume_event
from folio.utils.timestamp import now_exact

load_dotenv()
FOLIO_DB_PATH = Path(os.getenv("FOLIO_DB_PATH", "outs/folio.db"))
DEFAULT_OWNER_ID = os.getenv("DEFAULT_OWNER_ID", "local")

IN_MEMORY = ":memory:"

_SCHEMA = """
    CREATE TABLE IF NOT EXISTS resumes (
        id TEXT PRIMARY KEY,
        owner_id TEXT NOT NULL,

        title TEXT NOT NULL,
        slug TEXT NOT NULL UNIQUE,
        content TEXT NOT NULL,

        is_public INTEGER NOT NULL DEFAULT 0,
        is_featured INTEGER NOT NULL DEFAULT 0,

        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
"""

_TRAILING_NUMBER = re.compile(r"-\d+$")


class ResumeStore:
    """
    SQLite-backed persistence collaborator for resume records.

    Raises RecordNotFoundError, SlugConflictError, RecordValidationError and
    DocumentValidationError for caller mistakes; any other storage failure
    surfaces as PersistenceError.
    """

    def __init__(self, db_path: Union[Path, str, None] = None, events_file: Optional[Path] = None):
        """
        Open (creating if needed) a resume store.

        Args:
            db_path: SQLite file, or ":memory:" (default: FOLIO_DB_PATH)
            events_file: Lifecycle event log override (default: PIPELINE_EVENTS_FILE)
        """
        db_path = db_path or FOLIO_DB_PATH
        if str(db_path) != IN_MEMORY:
            db_path = Path(db_path)
            db_path.parent.mkdir(parents=True, exist_ok=True)

        self.db_path = db_path
        self.events_file = events_file
        self._lock = threading.RLock()

        try:
            self.conn = sqlite3.connect(str(db_path), check_same_thread=False)
            self.conn.row_factory = sqlite3.Row
            with self.conn:
                self.conn.execute(_SCHEMA)
                self.conn.execute(
                    "CREATE INDEX IF NOT EXISTS idx_resumes_owner ON resumes(owner_id, updated_at)"
                )
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not open resume store at {db_path}", e) from e

        log_store_opened(db_path, self.count())

    def close(self) -> None:
        with self._lock:
            self.conn.close()

    @contextmanager
    def _transaction(self, action: str, slug: Optional[str] = None):
        """Run statements atomically, mapping sqlite errors to folio errors."""
        with self._lock:
            try:
                with self.conn:
                    yield self.conn
            except sqlite3.IntegrityError as e:
                if "resumes.slug" in str(e):
                    raise SlugConflictError(slug or "") from e
                raise PersistenceError(f"Failed to {action}", e) from e
            except sqlite3.Error as e:
                raise PersistenceError(f"Failed to {action}", e) from e

    def _query(self, sql: str, params: tuple = ()) -> List[sqlite3.Row]:
        with self._lock:
            try:
                return self.conn.execute(sql, params).fetchall()
            except sqlite3.Error as e:
                raise PersistenceError("Failed to read resumes", e) from e

    def _event(self, event_type: str, record: ResumeRecord, **extra_fields) -> None:
        log_resume_event(
            event_type,
            slug=record.slug,
            source="storage",
            events_file=self.events_file,
            resume_id=record.id,
            **extra_fields,
        )

    # Queries

    def count(self) -> int:
        return self._query("SELECT COUNT(*) AS n FROM resumes")[0]["n"]

    def get(self, record_id: str) -> ResumeRecord:
        """
        Get a record by id.

        Raises:
            RecordNotFoundError: If no record has this id
        """
        rows = self._query("SELECT * FROM resumes WHERE id = ?", (record_id,))
        if not rows:
            raise RecordNotFoundError()
        return ResumeRecord.from_row(rows[0])

    def get_by_slug(self, slug: str) -> ResumeRecord:
        """Get a record by slug regardless of visibility (owner-side lookup)."""
        rows = self._query("SELECT * FROM resumes WHERE slug = ?", (slug,))
        if not rows:
            raise RecordNotFoundError()
        return ResumeRecord.from_row(rows[0])

    def resolve(self, id_or_slug: str) -> ResumeRecord:
        """Get a record by id, falling back to slug."""
        try:
            return self.get(id_or_slug)
        except RecordNotFoundError:
            return self.get_by_slug(id_or_slug)

    def get_public_by_slug(self, slug: str) -> ResumeRecord:
        """
        Get a record for the public view.

        Raises:
            RecordNotFoundError: If the slug is unknown or the record is private;
                both cases are indistinguishable to the caller
        """
        rows = self._query("SELECT * FROM resumes WHERE slug = ? AND is_public = 1", (slug,))
        if not rows:
            raise RecordNotFoundError()
        return ResumeRecord.from_row(rows[0])

    def list_by_owner(self, owner_id: str = DEFAULT_OWNER_ID) -> List[ResumeRecord]:
        """List an owner's records, most recently updated first."""
        rows = self._query(
            "SELECT * FROM resumes WHERE owner_id = ? ORDER BY updated_at DESC, rowid DESC",
            (owner_id,),
        )
        return [ResumeRecord.from_row(row) for row in rows]

    def get_featured(self, owner_id: Optional[str] = None) -> ResumeRecord:
        """
        Get the featured public record (of one owner, or of any owner).

        Raises:
            RecordNotFoundError: If no public record is featured
        """
        sql = "SELECT * FROM resumes WHERE is_featured = 1 AND is_public = 1"
        params: tuple = ()
        if owner_id is not None:
            sql += " AND owner_id = ?"
            params = (owner_id,)
        rows = self._query(sql + " ORDER BY updated_at DESC LIMIT 1", params)
        if not rows:
            raise RecordNotFoundError("No featured CV found")
        return ResumeRecord.from_row(rows[0])

    # Commands

    def create(
        self,
        title: str,
        slug: str,
        document: Union[ResumeDocument, Mapping[str, Any], None] = None,
        owner_id: str = DEFAULT_OWNER_ID,
        is_public: bool = False,
    ) -> ResumeRecord:
        """
        Create a record.

        Args:
            title: Display title (required)
            slug: Unique URL-safe slug (required)
            document: Initial content (default: empty document with a blank name)
            owner_id: Owning account
            is_public: Enable the public view right away

        Returns:
            The stored ResumeRecord

        Raises:
            RecordValidationError: Missing or invalid title/slug (nothing is written)
            DocumentValidationError: Malformed document (nothing is written)
            SlugConflictError: Slug already taken
        """
        title = validate_title(title)
        slug = validate_slug(slug)
        is_public = validate_flag(is_public, "is_public")
        document = coerce_document(document)

        timestamp = now_exact()
        record = ResumeRecord(
            id=uuid.uuid4().hex,
            owner_id=owner_id,
            title=title,
            slug=slug,
            document=document,
            is_public=is_public,
            is_featured=False,
            created_at=timestamp,
            updated_at=timestamp,
        )

        with self._transaction("create resume", slug) as conn:
            conn.execute(
                """
                INSERT INTO resumes
                    (id, owner_id, title, slug, content, is_public, is_featured, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, 0, ?, ?)
                """,
                (
                    record.id,
                    record.owner_id,
                    record.title,
                    record.slug,
                    json.dumps(document.to_dict()),
                    int(record.is_public),
                    record.created_at,
                    record.updated_at,
                ),
            )

        log_record_change("created", record)
        self._event("created", record, title=record.title)
        return record

    def update(
        self,
        record_id: str,
        title: Optional[str] = None,
        document: Union[ResumeDocument, Mapping[str, Any], None] = None,
        is_public: Optional[bool] = None,
        slug: Optional[str] = None,
    ) -> ResumeRecord:
        """
        Apply a partial update; arguments left as None are unchanged.

        Applying the same update twice leaves the same stored state (apart from
        updated_at), so autosave retries are harmless.

        Raises:
            RecordNotFoundError: Unknown id
            RecordValidationError / DocumentValidationError: Invalid values (nothing is written)
            SlugConflictError: New slug already taken by another record
        """
        changes = {}
        if title is not None:
            changes["title"] = validate_title(title)
        if slug is not None:
            changes["slug"] = validate_slug(slug)
        if is_public is not None:
            changes["is_public"] = int(validate_flag(is_public, "is_public"))
        if document is not None:
            changes["content"] = json.dumps(coerce_document(document).to_dict())
        changes["updated_at"] = now_exact()

        assignments = ", ".join(f"{column} = ?" for column in changes)
        with self._lock:
            before = self.get(record_id)
            with self._transaction("update resume", changes.get("slug")) as conn:
                conn.execute(
                    f"UPDATE resumes SET {assignments} WHERE id = ?",
                    (*changes.values(), record_id),
                )
            record = self.get(record_id)

        log_record_change("updated", record)
        self._event("updated", record, fields=sorted(k for k in changes if k != "updated_at"))
        if record.is_public != before.is_public:
            self._event("published" if record.is_public else "unpublished", record)
        return record

    def delete(self, record_id: str) -> None:
        """
        Delete a record permanently.

        Raises:
            RecordNotFoundError: Unknown id
        """
        with self._lock:
            record = self.get(record_id)
            with self._transaction("delete resume") as conn:
                conn.execute("DELETE FROM resumes WHERE id = ?", (record_id,))

        log_record_change("deleted", record)
        self._event("deleted", record)

    def set_featured(self, record_id: str) -> ResumeRecord:
        """
        Make a record its owner's only featured record.

        Both steps (unset all of the owner's records, set this one) run in one
        transaction, so no reader ever sees zero or two featured records.

        Raises:
            RecordNotFoundError: Unknown id
        """
        timestamp = now_exact()
        with self._lock:
            owner_id = self.get(record_id).owner_id
            with self._transaction("set featured resume") as conn:
                conn.execute(
                    "UPDATE resumes SET is_featured = 0, updated_at = ? "
                    "WHERE owner_id = ? AND is_featured = 1 AND id != ?",
                    (timestamp, owner_id, record_id),
                )
                conn.execute(
                    "UPDATE resumes SET is_featured = 1, updated_at = ? WHERE id = ?",
                    (timestamp, record_id),
                )
            record = self.get(record_id)

        log_record_change("featured", record)
        self._event("featured", record)
        return record

    def duplicate(self, record_id: str) -> ResumeRecord:
        """
        Copy a record as a new private draft.

        The copy gets the title "<title> (Copy)" and the slug
        "<base>-copy-<milliseconds>", where base is the source slug without a
        trailing numeric suffix.

        Raises:
            RecordNotFoundError: Unknown id
            SlugConflictError: Generated slug already taken (retry)
        """
        source = self.get(record_id)
        base_slug = _TRAILING_NUMBER.sub("", source.slug)
        copy = self.create(
            title=f"{source.title} (Copy)",
            slug=f"{base_slug}-copy-{int(time.time() * 1000)}",
            document=source.document,
            owner_id=source.owner_id,
            is_public=False,
        )
        _log_debug(f"  Duplicated from {source.slug}")
        self._event("duplicated", copy, source_id=source.id, source_slug=source.slug)
        return copy
