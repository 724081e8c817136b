"""
Flask application: the resume API, the PDF download endpoint and the public view.

Routes:
    GET    /api/cv                      list the owner's resumes (no content)
    POST   /api/cv                      create {title, slug, content?, is_public?}
    GET    /api/cv/<id>                 one resume with content
    PUT    /api/cv/<id>                 autosave: partial {title?, content?, is_public?, slug?}
    DELETE /api/cv/<id>                 delete
    POST   /api/cv/<id>/duplicate       private copy
    GET    /api/cv/featured             the featured public resume
    POST   /api/cv/featured             feature {resume_id}
    GET    /api/cv/<id>/score           ATS score with band
    GET    /api/cv/<id_or_slug>/pdf     PDF download
    GET    /api/cv/<id>/preview?scale=  editor preview HTML
    GET    /cv/<slug>                   public read view
"""

from typing import Any, Dict, Optional

from flask import Blueprint, Flask, Response, current_app, jsonify, request

from folio.contexts.rendering import pdf_filename, render_pdf, render_preview, render_public
from folio.contexts.rendering.html_renderer import DEFAULT_PREVIEW_SCALE
from folio.contexts.schema import is_displayable
from folio.contexts.scoring import score
from folio.contexts.scoring.logger import log_score_result
from folio.contexts.storage import DEFAULT_OWNER_ID, ResumeStore
from folio.exceptions import RecordNotFoundError, RecordValidationError, RenderError
from folio.utils.event_logging import log_resume_event
from folio.web.errors import error_response, register_error_handlers
from folio.web.logger import _log_info, _log_warning

STORE_KEY = "folio_store"

NOT_FOUND_PAGE = """<!DOCTYPE html>
<html lang="en">
<head><meta charset="utf-8"><title>Resume not found</title></head>
<body><h1>Resume not found</h1><p>This resume does not exist or is not public.</p></body>
</html>
"""

api = Blueprint("cv_api", __name__, url_prefix="/api/cv")
public = Blueprint("public", __name__)


def get_store() -> ResumeStore:
    return current_app.extensions[STORE_KEY]


def _json_body() -> Dict[str, Any]:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise RecordValidationError("Request body must be a JSON object")
    return body


def _owner_id() -> str:
    return request.args.get("owner_id") or DEFAULT_OWNER_ID


# API


@api.get("")
def list_resumes():
    records = get_store().list_by_owner(_owner_id())
    return jsonify([record.to_dict(include_content=False) for record in records])


@api.post("")
def create_resume():
    body = _json_body()
    record = get_store().create(
        title=body.get("title"),
        slug=body.get("slug"),
        document=body.get("content"),
        owner_id=body.get("owner_id") or DEFAULT_OWNER_ID,
        is_public=body.get("is_public", False),
    )
    return jsonify(record.to_dict()), 201


@api.get("/featured")
def get_featured():
    return jsonify(get_store().get_featured(request.args.get("owner_id")).to_dict())


@api.post("/featured")
def set_featured():
    resume_id = _json_body().get("resume_id")
    if not resume_id:
        return error_response("Resume ID is required", 400, field="resume_id")
    return jsonify(get_store().set_featured(resume_id).to_dict())


@api.get("/<record_id>")
def get_resume(record_id: str):
    return jsonify(get_store().get(record_id).to_dict())


@api.put("/<record_id>")
def update_resume(record_id: str):
    body = _json_body()
    record = get_store().update(
        record_id,
        title=body.get("title"),
        document=body.get("content"),
        is_public=body.get("is_public"),
        slug=body.get("slug"),
    )
    return jsonify(record.to_dict())


@api.delete("/<record_id>")
def delete_resume(record_id: str):
    get_store().delete(record_id)
    return jsonify({"success": True})


@api.post("/<record_id>/duplicate")
def duplicate_resume(record_id: str):
    return jsonify(get_store().duplicate(record_id).to_dict()), 201


@api.get("/<record_id>/score")
def score_resume(record_id: str):
    record = get_store().get(record_id)
    result = score(record.document)
    log_score_result(record.slug, result)
    return jsonify(result.to_dict(include_band=True))


@api.get("/<id_or_slug>/pdf")
def download_pdf(id_or_slug: str):
    store = get_store()
    record = store.resolve(id_or_slug)
    try:
        result = render_pdf(record.document)
    except RenderError as e:
        log_resume_event("render_failed", record.slug, "web", store.events_file, error=str(e))
        raise

    filename = pdf_filename(record.document)
    log_resume_event(
        "rendered", record.slug, "web", store.events_file,
        output="pdf", pages=result.page_count, omitted=list(result.omitted),
    )
    return Response(
        result.pdf_bytes,
        mimetype="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def _parse_scale(raw: Optional[str]) -> float:
    if raw is None or raw == "":
        return DEFAULT_PREVIEW_SCALE
    try:
        return float(raw)
    except ValueError:
        raise RecordValidationError("scale must be a number", "scale") from None


@api.get("/<record_id>/preview")
def preview_resume(record_id: str):
    scale = _parse_scale(request.args.get("scale"))
    record = get_store().get(record_id)
    return Response(render_preview(record.document, scale), mimetype="text/html")


# Public view


@public.get("/cv/<slug>")
def public_resume(slug: str):
    try:
        record = get_store().get_public_by_slug(slug)
    except RecordNotFoundError:
        _log_warning(f"Public view not available: {slug}")
        return Response(NOT_FOUND_PAGE, status=404, mimetype="text/html")

    if not is_displayable(record.document):
        _log_warning(f"Public view not available: {slug}")
        return Response(NOT_FOUND_PAGE, status=404, mimetype="text/html")

    return Response(render_public(record.document), mimetype="text/html")


def create_app(store: Optional[ResumeStore] = None, config: Optional[Dict[str, Any]] = None) -> Flask:
    """
    Application factory.

    Args:
        store: Resume store to serve (default: ResumeStore at FOLIO_DB_PATH)
        config: Extra Flask config values (e.g. {"TESTING": True})

    Returns:
        Configured Flask app
    """
    app = Flask(__name__)
    app.config.update(config or {})
    app.extensions[STORE_KEY] = store or ResumeStore()

    app.register_blueprint(api)
    app.register_blueprint(public)
    register_error_handlers(app)

    _log_info(f"App created (store: {app.extensions[STORE_KEY].db_path})")
    return app
