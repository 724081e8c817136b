"""Exceptions raised across folio contexts."""

from typing import Optional


class FolioError(Exception):
    """Base class for all folio errors."""


class DocumentValidationError(FolioError, ValueError):
    """
    Raised when a resume document has a malformed shape.

    Attributes:
        message: Error description
        field: Dotted path of the offending field (e.g. "work[1].highlights[0]")
    """

    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(f"{field}: {message}" if field else message)


class RecordValidationError(FolioError, ValueError):
    """
    Raised when record-level fields (title, slug) are missing or invalid.

    Rejected before any persistence attempt.

    Attributes:
        message: Error description
        field: Name of the offending record field
    """

    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(message)


class SlugConflictError(FolioError):
    """
    Raised when a slug is already taken by another record.

    Attributes:
        slug: The conflicting slug
    """

    def __init__(self, slug: str):
        self.slug = slug
        self.message = "A resume with this slug already exists"
        super().__init__(f"{self.message}: {slug}")


class RecordNotFoundError(FolioError, LookupError):
    """
    Raised when a record does not exist, or is private and requested publicly.

    Both cases carry the same message so callers cannot tell them apart.
    """

    def __init__(self, message: str = "Resume not found"):
        self.message = message
        super().__init__(message)


class PersistenceError(FolioError):
    """
    Raised when the storage collaborator is unavailable or fails transiently.

    Attributes:
        message: Error description
        original_error: The underlying storage exception
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.message = message
        self.original_error = original_error

        parts = [message]
        if original_error:
            parts.append(f"Original error: {original_error}")

        super().__init__("\n".join(parts))


class RenderError(FolioError):
    """
    Raised when a whole document cannot be rendered.

    Failures of single elements (a broken photo, one bad paragraph) are omitted
    from the output instead and never raise this.

    Attributes:
        message: Error description
        output: "html" or "pdf"
        original_error: The underlying exception
    """

    def __init__(
        self,
        message: str,
        output: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.output = output
        self.original_error = original_error

        parts = [message]
        if output:
            parts.append(f"Output: {output}")
        if original_error:
            parts.append(f"Original error: {original_error}")

        super().__init__("\n".join(parts))


class ImageLoadError(FolioError):
    """
    Raised when a photo reference cannot be resolved to image bytes.

    Renderers catch it and omit the photo.

    Attributes:
        reference: The image reference that failed (truncated for data URIs)
    """

    def __init__(self, message: str, reference: Optional[str] = None):
        self.message = message
        self.reference = reference
        super().__init__(f"{message}: {reference}" if reference else message)


class SaveError(FolioError):
    """
    Raised when an explicit terminal save of an edit session fails.

    Attributes:
        message: Error description
        original_error: The persist failure that caused it
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.message = message
        self.original_error = original_error
        super().__init__(f"{message}: {original_error}" if original_error else message)
