"""Unit tests for shared utilities."""

import json
import sys
from datetime import datetime, timedelta

import pytest
from loguru import logger

from folio import __version__
from folio.utils.event_logging import get_recent_events, log_resume_event
from folio.utils.logger import SETTINGS_ENV_VARS, settings_overrides, setup_logger
from folio.utils.report_formatter import Column, TableFormatter
from folio.utils.text_processing import is_valid_slug, sanitize_filename_part, slugify, truncate_display
from folio.utils.timestamp import format_timestamp


@pytest.mark.unit
@pytest.mark.parametrize(
    "text, expected",
    [
        ("Jane Doe - CV 2025", "jane-doe-cv-2025"),
        ("Crème Brûlée", "creme-brulee"),
        ("  --Hello__World--  ", "hello-world"),
        ("!!!", ""),
    ],
)
def test_slugify(text, expected):
    assert slugify(text) == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "slug, valid",
    [
        ("jane-doe", True),
        ("cv2025", True),
        ("Jane", False),
        ("jane--doe", False),
        ("-jane", False),
        ("jane doe", False),
        ("", False),
    ],
)
def test_is_valid_slug(slug, valid):
    assert is_valid_slug(slug) is valid


@pytest.mark.unit
def test_sanitize_filename_part():
    assert sanitize_filename_part("Jane Doe") == "Jane_Doe"
    assert sanitize_filename_part("a/b\\c") == "a_b_c"


@pytest.mark.unit
def test_truncate_display():
    assert truncate_display("short", 10) == "short"
    assert truncate_display("a much longer title", 10) == "a much ..."


@pytest.mark.unit
def test_event_log_round_trip(isolated_event_log):
    """Test that events are appended as JSON lines and read back filtered."""
    log_resume_event("created", "jane", "storage", resume_id="1")
    log_resume_event("published", "jane", "storage")
    log_resume_event("created", "other", "cli")

    lines = isolated_event_log.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 3
    assert json.loads(lines[0])["resume_id"] == "1"

    assert [e["event_type"] for e in get_recent_events(slug="jane")] == ["created", "published"]
    assert [e["slug"] for e in get_recent_events(event_type="created")] == ["jane", "other"]
    assert [e["slug"] for e in get_recent_events(n=1)] == ["other"]


@pytest.mark.unit
def test_event_log_explicit_file(tmp_path):
    events_file = tmp_path / "custom" / "events.log"
    log_resume_event("rendered", "jane", "cli", events_file=events_file, output="pdf")

    events = get_recent_events(events_file=events_file)
    assert events[0]["output"] == "pdf"
    assert events[0]["source"] == "cli"


@pytest.mark.unit
def test_event_log_skips_malformed_lines(isolated_event_log):
    log_resume_event("created", "jane", "storage")
    with open(isolated_event_log, "a", encoding="utf-8") as f:
        f.write("not json\n")

    assert len(get_recent_events()) == 1


@pytest.mark.unit
def test_unknown_event_type():
    with pytest.raises(ValueError, match="Unknown event type"):
        log_resume_event("exploded", "jane", "storage")


@pytest.mark.unit
def test_no_events_file_returns_empty(tmp_path):
    assert get_recent_events(events_file=tmp_path / "missing.log") == []


@pytest.mark.unit
def test_format_timestamp():
    assert format_timestamp("2025-11-13T18:45:40.572549") == "2025-11-13 18:45:40"
    assert format_timestamp("garbage") == "garbage"

    two_hours_ago = (datetime.now() - timedelta(hours=2, minutes=1)).isoformat()
    assert format_timestamp(two_hours_ago, relative=True) == "2h ago"


@pytest.mark.unit
def test_table_formatter():
    table = TableFormatter([Column("Name", 6), Column("N", 4, ">")], total_width=12)
    report = table.add_section_header("Title").add_table_header().add_row("ab", 3).build()

    assert report.splitlines() == ["=" * 12, "Title", "=" * 12, "Name      N", "ab        3"]


@pytest.fixture
def restore_loguru():
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def clean_settings(monkeypatch):
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.mark.unit
def test_setup_logger_writes_provenance(tmp_path, clean_settings, restore_loguru, isolated_event_log):
    """Test that a session log starts with folio version, event log and setting overrides."""
    clean_settings.setenv("ATS_RUBRIC_PATH", "strict_rubric.yaml")

    log_file = setup_logger("render", tmp_path / "render_session", {"Database": "folio.db"})
    logger.info("[render] hello")
    logger.remove()

    assert log_file == tmp_path / "render_session" / "render.log"
    text = log_file.read_text(encoding="utf-8")
    assert f"folio {__version__}" in text
    assert f"Lifecycle events: {isolated_event_log}" in text
    assert "Setting ATS_RUBRIC_PATH=strict_rubric.yaml" in text
    assert "Database: folio.db" in text
    assert text.index("Database: folio.db") < text.index("[render] hello")


@pytest.mark.unit
def test_settings_overrides_defaults(clean_settings):
    assert settings_overrides() == {}

    clean_settings.setenv("FOLIO_DB_PATH", "/data/folio.db")
    clean_settings.setenv("UNRELATED", "x")
    assert settings_overrides() == {"FOLIO_DB_PATH": "/data/folio.db"}
