"""
Centralized error handling for the web boundary.

Folio exceptions are raised where they are detected and translated to HTTP here,
once. Every API error body has the same shape:

    {"error": "<message>", "details": <string or null>, "field": "<path>"}

where "field" is present only for validation errors.
"""

from typing import Optional, Tuple

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from folio.exceptions import (
    DocumentValidationError,
    FolioError,
    PersistenceError,
    RecordNotFoundError,
    RecordValidationError,
    RenderError,
    SlugConflictError,
)
from folio.web.logger import log_request_error

# Exception type -> HTTP status, most specific first
STATUS_CODES = (
    (DocumentValidationError, 400),
    (RecordValidationError, 400),
    (RecordNotFoundError, 404),
    (SlugConflictError, 409),
    (RenderError, 500),
    (PersistenceError, 503),
)


def status_for(error: Exception) -> int:
    for error_type, status in STATUS_CODES:
        if isinstance(error, error_type):
            return status
    return 500


def error_response(
    message: str, status: int, details: Optional[str] = None, field: Optional[str] = None
) -> Tuple:
    """Build the standard JSON error response tuple."""
    body = {"error": message, "details": details}
    if field:
        body["field"] = field
    return jsonify(body), status


def _details(error: FolioError) -> Optional[str]:
    original = getattr(error, "original_error", None)
    if original is not None:
        return str(original)
    if isinstance(error, SlugConflictError):
        return error.slug
    return None


def handle_folio_error(error: FolioError):
    status = status_for(error)
    log_request_error(request.method, request.path, status, error)
    message = getattr(error, "message", None) or str(error)
    if status >= 500 and not isinstance(error, (RenderError, PersistenceError)):
        message = "Internal server error"
    return error_response(message, status, _details(error), getattr(error, "field", None))


def handle_http_error(error: HTTPException):
    log_request_error(request.method, request.path, error.code, error)
    return error_response(error.name, error.code, error.description)


def register_error_handlers(app: Flask) -> None:
    """Attach JSON error handlers for folio and HTTP errors to an app."""
    app.register_error_handler(FolioError, handle_folio_error)
    app.register_error_handler(HTTPException, handle_http_error)
