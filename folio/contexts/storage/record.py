"""
Resume record: the persistence wrapper around one ResumeDocument.

The document travels as an opaque JSON blob ("content" on the wire); the record adds
identity, ownership, the public slug and the visibility and featured flags.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Union

from folio.contexts.schema import ResumeDocument
from folio.exceptions import RecordValidationError
from folio.utils.text_processing import is_valid_slug


@dataclass(frozen=True)
class ResumeRecord:
    """
    Stored resume with its metadata.

    Attributes:
        id: Record identifier (uuid4 hex)
        owner_id: Owning account
        title: Display title in the dashboard
        slug: Unique URL-safe identifier used by the public view
        document: The resume content
        is_public: Public view enabled
        is_featured: The owner's primary public resume (at most one per owner)
        created_at: ISO-8601 creation time
        updated_at: ISO-8601 time of the last change
    """

    id: str
    owner_id: str
    title: str
    slug: str
    document: ResumeDocument = field(default_factory=ResumeDocument)
    is_public: bool = False
    is_featured: bool = False
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ResumeRecord":
        """Build a record from a resumes table row."""
        return cls(
            id=row["id"],
            owner_id=row["owner_id"],
            title=row["title"],
            slug=row["slug"],
            document=ResumeDocument.from_dict(json.loads(row["content"])),
            is_public=bool(row["is_public"]),
            is_featured=bool(row["is_featured"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def to_dict(self, include_content: bool = True) -> Dict[str, Any]:
        """API representation; list views leave the content out."""
        result = {
            "id": self.id,
            "owner_id": self.owner_id,
            "title": self.title,
            "slug": self.slug,
            "is_public": self.is_public,
            "is_featured": self.is_featured,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
        if include_content:
            result["content"] = self.document.to_dict()
        return result


def validate_title(title: Any) -> str:
    if not isinstance(title, str) or not title.strip():
        raise RecordValidationError("Title is required", "title")
    return title.strip()


def validate_slug(slug: Any) -> str:
    if not isinstance(slug, str) or not slug.strip():
        raise RecordValidationError("Slug is required", "slug")
    slug = slug.strip()
    if not is_valid_slug(slug):
        raise RecordValidationError(
            "Slug may only contain lowercase letters, digits and single hyphens", "slug"
        )
    return slug


def validate_flag(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise RecordValidationError(f"{field_name} must be true or false", field_name)
    return value


def coerce_document(document: Union[ResumeDocument, Mapping[str, Any], None]) -> ResumeDocument:
    """
    Accept a document or a JSON Resume mapping.

    Raises:
        DocumentValidationError: If the mapping has a malformed shape
    """
    if document is None:
        return ResumeDocument.empty()
    if isinstance(document, ResumeDocument):
        return document
    return ResumeDocument.from_dict(document)
