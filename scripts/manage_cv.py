#!/usr/bin/env python3
"""
Command-line interface for managing stored resumes.

Commands:
    create    - Create a resume (empty, or from a JSON/YAML file)
    list      - List an owner's resumes
    show      - Show one resume's record fields (or its full JSON)
    publish   - Make a resume's public view available
    unpublish - Make a resume private again
    feature   - Make a resume the owner's featured resume
    duplicate - Copy a resume as a private draft
    delete    - Delete a resume
    seed      - Store the sample resume
    events    - Show recent lifecycle events
"""

import json
import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from folio.contexts.schema import load_document
from folio.contexts.storage import DEFAULT_OWNER_ID, ResumeStore, seed_sample
from folio.exceptions import FolioError
from folio.utils.event_logging import get_recent_events
from folio.utils.text_processing import slugify, truncate_display
from folio.utils.timestamp import format_timestamp

load_dotenv()
FOLIO_DB_PATH = Path(os.getenv("FOLIO_DB_PATH", "outs/folio.db"))

app = typer.Typer(
    add_completion=False,
    help="Manage stored resumes (create, publish, feature, duplicate, delete)",
    invoke_without_command=True,
)

DbOption = Annotated[
    Path,
    typer.Option("--db", help="SQLite resume store"),
]


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _fail(error: Exception) -> None:
    typer.secho(f"Error: {error}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _open_store(db: Path) -> ResumeStore:
    try:
        return ResumeStore(db)
    except FolioError as e:
        _fail(e)


def _describe(record) -> str:
    flags = []
    if record.is_public:
        flags.append("public")
    if record.is_featured:
        flags.append("featured")
    return f"{record.slug} ({', '.join(flags) or 'private'})"


@app.command("create")
def create_command(
    title: Annotated[str, typer.Argument(help="Resume title")],
    slug: Annotated[
        Optional[str], typer.Option("--slug", "-s", help="URL slug (default: derived from title)")
    ] = None,
    source: Annotated[
        Optional[Path],
        typer.Option("--from", "-f", help="JSON or YAML resume document to start from"),
    ] = None,
    public: Annotated[bool, typer.Option("--public", help="Publish right away")] = False,
    owner: Annotated[str, typer.Option("--owner", help="Owner id")] = DEFAULT_OWNER_ID,
    db: DbOption = FOLIO_DB_PATH,
):
    """
    Create a resume.

    Examples:\n

        $ manage_cv.py create "Jane Doe - CV"                        # Empty resume, slug jane-doe-cv

        $ manage_cv.py create "Backend CV" --from jane.yaml --public  # From a file, published
    """
    store = _open_store(db)
    try:
        document = load_document(source) if source else None
        record = store.create(
            title=title,
            slug=slug if slug is not None else slugify(title),
            document=document,
            owner_id=owner,
            is_public=public,
        )
    except (FolioError, FileNotFoundError) as e:
        _fail(e)

    typer.secho(f"✓ Created {_describe(record)}", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  id: {record.id}")


@app.command("list")
def list_command(
    owner: Annotated[str, typer.Option("--owner", help="Owner id")] = DEFAULT_OWNER_ID,
    db: DbOption = FOLIO_DB_PATH,
):
    """List resumes, most recently updated first."""
    records = _open_store(db).list_by_owner(owner)
    if not records:
        typer.secho("No resumes found", fg=typer.colors.YELLOW)
        return

    typer.secho(f"\n{len(records)} resume(s)\n", fg=typer.colors.BLUE, bold=True)
    for record in records:
        marker = "★" if record.is_featured else " "
        visibility = "public " if record.is_public else "private"
        updated = format_timestamp(record.updated_at, relative=True)
        typer.echo(
            f" {marker} {record.slug:<32} {visibility}  {truncate_display(record.title, 40):<40}  {updated}"
        )
    typer.echo("")


@app.command("show")
def show_command(
    resume: Annotated[str, typer.Argument(help="Resume id or slug")],
    as_json: Annotated[bool, typer.Option("--json", help="Print the full record as JSON")] = False,
    db: DbOption = FOLIO_DB_PATH,
):
    """Show one resume."""
    try:
        record = _open_store(db).resolve(resume)
    except FolioError as e:
        _fail(e)

    if as_json:
        typer.echo(json.dumps(record.to_dict(), indent=2, ensure_ascii=False))
        return

    typer.secho(f"\n{record.title}", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"  id:       {record.id}")
    typer.echo(f"  slug:     {_describe(record)}")
    typer.echo(f"  name:     {record.document.name or '(empty)'}")
    typer.echo(f"  created:  {format_timestamp(record.created_at)}")
    typer.echo(f"  updated:  {format_timestamp(record.updated_at)}")
    typer.echo("")


def _set_visibility(resume: str, public: bool, db: Path) -> None:
    store = _open_store(db)
    try:
        record = store.update(store.resolve(resume).id, is_public=public)
    except FolioError as e:
        _fail(e)
    typer.secho(f"✓ {_describe(record)}", fg=typer.colors.GREEN)


@app.command("publish")
def publish_command(
    resume: Annotated[str, typer.Argument(help="Resume id or slug")],
    db: DbOption = FOLIO_DB_PATH,
):
    """Make the public view of a resume available at /cv/<slug>."""
    _set_visibility(resume, True, db)


@app.command("unpublish")
def unpublish_command(
    resume: Annotated[str, typer.Argument(help="Resume id or slug")],
    db: DbOption = FOLIO_DB_PATH,
):
    """Make a resume private again."""
    _set_visibility(resume, False, db)


@app.command("feature")
def feature_command(
    resume: Annotated[str, typer.Argument(help="Resume id or slug")],
    db: DbOption = FOLIO_DB_PATH,
):
    """Make a resume its owner's only featured resume."""
    store = _open_store(db)
    try:
        record = store.set_featured(store.resolve(resume).id)
    except FolioError as e:
        _fail(e)
    typer.secho(f"✓ Featured {_describe(record)}", fg=typer.colors.GREEN)
    if not record.is_public:
        typer.secho("  Note: the resume is private, so it is not shown as featured yet", fg=typer.colors.YELLOW)


@app.command("duplicate")
def duplicate_command(
    resume: Annotated[str, typer.Argument(help="Resume id or slug")],
    db: DbOption = FOLIO_DB_PATH,
):
    """Copy a resume as a new private draft."""
    store = _open_store(db)
    try:
        record = store.duplicate(store.resolve(resume).id)
    except FolioError as e:
        _fail(e)
    typer.secho(f"✓ Created {_describe(record)}", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  title: {record.title}")
    typer.echo(f"  id:    {record.id}")


@app.command("delete")
def delete_command(
    resume: Annotated[str, typer.Argument(help="Resume id or slug")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
    db: DbOption = FOLIO_DB_PATH,
):
    """Delete a resume permanently."""
    store = _open_store(db)
    try:
        record = store.resolve(resume)
    except FolioError as e:
        _fail(e)

    if not yes and not typer.confirm(f"Delete '{record.title}' ({record.slug})?"):
        typer.echo("Aborted")
        raise typer.Exit(code=1)

    try:
        store.delete(record.id)
    except FolioError as e:
        _fail(e)
    typer.secho(f"✓ Deleted {record.slug}", fg=typer.colors.GREEN)


@app.command("seed")
def seed_command(
    owner: Annotated[str, typer.Option("--owner", help="Owner id")] = DEFAULT_OWNER_ID,
    db: DbOption = FOLIO_DB_PATH,
):
    """Store the sample resume (public and featured). Safe to run twice."""
    try:
        record = seed_sample(_open_store(db), owner_id=owner)
    except FolioError as e:
        _fail(e)
    typer.secho(f"✓ Sample resume: {_describe(record)}", fg=typer.colors.GREEN)


@app.command("events")
def events_command(
    count: Annotated[int, typer.Option("--count", "-n", help="Number of events", min=1)] = 10,
    slug: Annotated[Optional[str], typer.Option("--slug", help="Only this resume")] = None,
    event_type: Annotated[Optional[str], typer.Option("--type", help="Only this event type")] = None,
):
    """Show recent resume lifecycle events."""
    events = get_recent_events(count, slug=slug, event_type=event_type)
    if not events:
        typer.secho("No events found", fg=typer.colors.YELLOW)
        return
    for event in events:
        when = format_timestamp(event.get("timestamp", ""), relative=True)
        typer.echo(f"  {when:>10}  {event['event_type']:<16} {event['slug']:<28} {event['source']}")


if __name__ == "__main__":
    app()
