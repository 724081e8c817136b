"""
Integration tests for the Flask application.

Drives every route through the Flask test client against a temporary store and
checks status codes, the shared JSON error shape and lifecycle events.
"""

import base64
import io

import pdfplumber
import pytest

from folio.contexts.rendering import pdf_renderer
from folio.contexts.storage import ResumeStore, seed_sample
from folio.utils.event_logging import get_recent_events
from folio.web import create_app


@pytest.fixture
def app(store):
    return create_app(store, config={"TESTING": True})


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def sample_record(store):
    return seed_sample(store)


def _create(client, title="My CV", slug="my-cv", **extra):
    return client.post("/api/cv", json={"title": title, "slug": slug, **extra})


@pytest.mark.integration
def test_create_and_get(client):
    response = _create(client)

    assert response.status_code == 201
    created = response.get_json()
    assert created["slug"] == "my-cv"
    assert created["is_public"] is False
    assert created["content"]["basics"] == {"name": ""}

    fetched = client.get(f"/api/cv/{created['id']}")
    assert fetched.status_code == 200
    assert fetched.get_json()["id"] == created["id"]


@pytest.mark.integration
@pytest.mark.parametrize(
    "body, field",
    [
        ({"slug": "no-title"}, "title"),
        ({"title": "No slug"}, "slug"),
        ({"title": "Bad", "slug": "Bad Slug"}, "slug"),
    ],
)
def test_create_validation_errors(client, store, body, field):
    response = client.post("/api/cv", json=body)

    assert response.status_code == 400
    data = response.get_json()
    assert data["field"] == field
    assert "error" in data and "details" in data
    assert store.count() == 0


@pytest.mark.integration
def test_create_with_malformed_content(client):
    response = _create(client, content={"work": [{"highlights": "oops"}]})

    assert response.status_code == 400
    assert response.get_json()["field"] == "work[0].highlights"


@pytest.mark.integration
def test_create_requires_json_object(client):
    response = client.post("/api/cv", data="not json", content_type="text/plain")
    assert response.status_code == 400


@pytest.mark.integration
def test_create_duplicate_slug_conflicts(client):
    _create(client)
    response = _create(client, title="Other")

    assert response.status_code == 409
    assert response.get_json()["error"] == "A resume with this slug already exists"
    assert response.get_json()["details"] == "my-cv"


@pytest.mark.integration
def test_list_omits_content(client):
    _create(client, slug="one")
    _create(client, slug="two")

    listed = client.get("/api/cv").get_json()

    assert [r["slug"] for r in listed] == ["two", "one"]
    assert all("content" not in r for r in listed)
    assert client.get("/api/cv?owner_id=nobody").get_json() == []


@pytest.mark.integration
def test_partial_update(client, sample_doc):
    """Test that PUT only touches the fields it carries."""
    created = _create(client, content=sample_doc.to_dict()).get_json()

    response = client.put(f"/api/cv/{created['id']}", json={"title": "Renamed"})

    assert response.status_code == 200
    updated = response.get_json()
    assert updated["title"] == "Renamed"
    assert updated["content"] == created["content"]

    response = client.put(f"/api/cv/{created['id']}", json={"is_public": True})
    assert response.get_json()["is_public"] is True
    assert response.get_json()["title"] == "Renamed"


@pytest.mark.integration
def test_update_unknown_record(client):
    response = client.put("/api/cv/missing", json={"title": "X"})

    assert response.status_code == 404
    assert response.get_json()["error"] == "Resume not found"


@pytest.mark.integration
def test_delete(client):
    created = _create(client).get_json()

    response = client.delete(f"/api/cv/{created['id']}")
    assert response.get_json() == {"success": True}
    assert client.get(f"/api/cv/{created['id']}").status_code == 404


@pytest.mark.integration
def test_duplicate(client, sample_record):
    response = client.post(f"/api/cv/{sample_record.id}/duplicate")

    assert response.status_code == 201
    copy = response.get_json()
    assert copy["title"] == f"{sample_record.title} (Copy)"
    assert copy["slug"].startswith("jane-doe-copy-")
    assert copy["is_public"] is False


@pytest.mark.integration
def test_featured(client, sample_record):
    other = _create(client, title="Other", slug="other", is_public=True).get_json()

    assert client.get("/api/cv/featured").get_json()["id"] == sample_record.id

    response = client.post("/api/cv/featured", json={"resume_id": other["id"]})
    assert response.status_code == 200
    assert response.get_json()["is_featured"] is True

    featured = [r for r in client.get("/api/cv").get_json() if r["is_featured"]]
    assert [r["id"] for r in featured] == [other["id"]]


@pytest.mark.integration
def test_featured_requires_resume_id(client):
    response = client.post("/api/cv/featured", json={})

    assert response.status_code == 400
    assert response.get_json() == {"error": "Resume ID is required", "details": None, "field": "resume_id"}


@pytest.mark.integration
def test_no_featured_resume(client):
    response = client.get("/api/cv/featured")

    assert response.status_code == 404
    assert response.get_json()["error"] == "No featured CV found"


@pytest.mark.integration
def test_score(client, sample_record):
    data = client.get(f"/api/cv/{sample_record.id}/score").get_json()

    assert data["total"] == 100
    assert len(data["categories"]) == 5
    assert data["band"] == {"label": "Excellent", "color": "green"}


@pytest.mark.integration
def test_pdf_download_by_id_and_slug(client, sample_record):
    by_id = client.get(f"/api/cv/{sample_record.id}/pdf")
    by_slug = client.get("/api/cv/jane-doe/pdf")

    for response in (by_id, by_slug):
        assert response.status_code == 200
        assert response.mimetype == "application/pdf"
        assert response.data.startswith(b"%PDF")
        disposition = response.headers["Content-Disposition"]
        assert disposition.startswith('attachment; filename="CV_Jane_Doe_')
        assert disposition.endswith('.pdf"')

    rendered = get_recent_events(slug="jane-doe", event_type="rendered")
    assert len(rendered) == 2
    assert rendered[0]["output"] == "pdf"


@pytest.mark.integration
def test_pdf_download_unknown(client):
    assert client.get("/api/cv/nobody/pdf").status_code == 404


@pytest.mark.integration
def test_preview(client, sample_record):
    response = client.get(f"/api/cv/{sample_record.id}/preview?scale=0.8")

    assert response.status_code == 200
    assert response.mimetype == "text/html"
    assert b"transform: scale(0.8)" in response.data


@pytest.mark.integration
def test_preview_scale_is_clamped(client, sample_record):
    response = client.get(f"/api/cv/{sample_record.id}/preview?scale=9")
    assert b"transform: scale(1.0)" in response.data


@pytest.mark.integration
def test_preview_rejects_bad_scale(client, sample_record):
    response = client.get(f"/api/cv/{sample_record.id}/preview?scale=big")

    assert response.status_code == 400
    assert response.get_json()["field"] == "scale"


@pytest.mark.integration
def test_public_view(client, sample_record):
    response = client.get("/cv/jane-doe")

    assert response.status_code == 200
    assert b"Jane Doe" in response.data
    assert b"cv-print" in response.data


@pytest.mark.integration
def test_public_view_hides_private_and_unknown(client, store):
    store.create("Private", "private", document={"basics": {"name": "Hidden Person"}})

    private = client.get("/cv/private")
    unknown = client.get("/cv/unknown")

    assert private.status_code == unknown.status_code == 404
    assert private.data == unknown.data
    assert b"Hidden Person" not in private.data


@pytest.mark.integration
def test_public_view_requires_a_name(client, store):
    store.create("Nameless", "nameless", is_public=True)
    assert client.get("/cv/nameless").status_code == 404


@pytest.mark.integration
def test_unknown_route_returns_json_error(client):
    response = client.get("/api/nothing/here")

    assert response.status_code == 404
    assert response.get_json()["error"] == "Not Found"


@pytest.mark.integration
def test_storage_failure_maps_to_503(tmp_path):
    store = ResumeStore(tmp_path / "broken.db")
    app = create_app(store, config={"TESTING": True})
    store.conn.execute("DROP TABLE resumes")

    response = app.test_client().get("/api/cv")

    assert response.status_code == 503
    assert "no such table" in response.get_json()["details"]
    store.close()


@pytest.mark.integration
def test_pdf_download_never_reads_server_files(client, sample_record, tmp_path):
    """Test that a photo path stored through the API is not read from the server's disk."""
    secret = tmp_path / "secret.png"
    secret.write_bytes(
        base64.b64decode(
            "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8z8BQDwAEhQGAhKmMIQAAAABJRU5ErkJggg=="
        )
    )
    content = client.get(f"/api/cv/{sample_record.id}").get_json()["content"]
    content["basics"]["image"] = str(secret)
    client.put(f"/api/cv/{sample_record.id}", json={"content": content})

    response = client.get(f"/api/cv/{sample_record.id}/pdf")

    assert response.status_code == 200
    with pdfplumber.open(io.BytesIO(response.data)) as pdf:
        assert sum(len(page.images) for page in pdf.pages) == 0
    assert get_recent_events(slug="jane-doe", event_type="rendered")[-1]["omitted"] == ["photo"]


@pytest.mark.integration
def test_pdf_render_failure_returns_json(client, sample_record, monkeypatch):
    def broken_build(self, story):
        raise KeyError("missing font")

    monkeypatch.setattr(pdf_renderer._ResumeDocTemplate, "build", broken_build)

    response = client.get(f"/api/cv/{sample_record.id}/pdf")

    assert response.status_code == 500
    assert response.mimetype == "application/json"
    assert response.get_json()["error"] == "PDF rendering failed"
    assert get_recent_events(slug="jane-doe", event_type="render_failed")


@pytest.mark.integration
def test_public_view_has_no_script_links(client, store):
    store.create(
        "Linked",
        "linked",
        document={
            "basics": {
                "name": "Jane Doe",
                "url": "javascript:alert(document.cookie)",
                "profiles": [{"network": "LinkedIn", "url": "javascript:alert(1)"}],
            }
        },
        is_public=True,
    )

    response = client.get("/cv/linked")

    assert response.status_code == 200
    assert b"javascript:" not in response.data
