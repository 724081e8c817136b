#!/usr/bin/env python3
"""
Resume Rendering CLI

Renders a resume to PDF or HTML. The resume is either a JSON/YAML document file or a
stored record (id or slug).

Commands:
    pdf  - Render an A4 PDF (CV_<Name>_<YYYY-MM-DD>.pdf)
    html - Render the preview or public HTML page

Examples:\n

    render_cv.py pdf jane-doe                       # Stored record by slug

    render_cv.py pdf data/jane.yaml -o outs/pdfs    # Document file, custom output dir

    render_cv.py html jane-doe --public             # Public page HTML
"""

import os
from pathlib import Path
from typing import Tuple

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from folio.contexts.rendering import pdf_filename, render_pdf, render_preview, render_public
from folio.contexts.rendering.html_renderer import DEFAULT_PREVIEW_SCALE
from folio.contexts.rendering.logger import setup_rendering_logger
from folio.contexts.schema import ResumeDocument, load_document
from folio.contexts.storage import ResumeStore
from folio.exceptions import FolioError
from folio.utils.event_logging import log_resume_event
from folio.utils.text_processing import slugify
from folio.utils.timestamp import now

load_dotenv()
FOLIO_DB_PATH = Path(os.getenv("FOLIO_DB_PATH", "outs/folio.db"))
RESULTS_PATH = Path(os.getenv("RESULTS_PATH", "outs/results"))
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

app = typer.Typer(
    help="Render resumes to PDF or HTML",
    add_completion=False,
    invoke_without_command=True,
)

SourceArgument = Annotated[
    str, typer.Argument(help="JSON/YAML document file, or stored resume id/slug")
]
OutputOption = Annotated[
    Path, typer.Option("--output-dir", "-o", help="Directory for the rendered file")
]
DbOption = Annotated[Path, typer.Option("--db", help="SQLite resume store")]
LogOption = Annotated[
    bool, typer.Option("--log/--no-log", help="Write a session log under LOGS_PATH")
]


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _load_source(source: str, db: Path) -> Tuple[ResumeDocument, str, Path]:
    """
    Return (document, slug-like label, photo base directory) for a file path or stored record.

    Relative photo paths resolve next to a document file, or against the working
    directory for stored records.
    """
    path = Path(source)
    if path.is_file():
        document = load_document(path)
        label = slugify(document.name) or slugify(path.stem) or "resume"
        return document, label, path.resolve().parent
    record = ResumeStore(db).resolve(source)
    return record.document, record.slug, Path.cwd()


def _fail(error: Exception) -> None:
    typer.secho(f"Error: {error}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.command("pdf")
def pdf_command(
    source: SourceArgument,
    output_dir: OutputOption = RESULTS_PATH,
    db: DbOption = FOLIO_DB_PATH,
    log: LogOption = True,
):
    """
    Render a resume to PDF.

    Elements that cannot be rendered (e.g. an unreachable photo) are left out and
    listed; the PDF is still written.
    """
    if log:
        log_file = setup_rendering_logger(LOGS_PATH / f"render_{now()}")

    try:
        document, label, base_dir = _load_source(source, db)
    except (FolioError, FileNotFoundError) as e:
        _fail(e)

    typer.secho(f"\nRendering PDF: {label}", fg=typer.colors.BLUE, bold=True)
    try:
        result = render_pdf(document, base_dir=base_dir, allow_private_hosts=True)
    except FolioError as e:
        log_resume_event("render_failed", label, "cli", error=str(e))
        _fail(e)

    output_dir.mkdir(parents=True, exist_ok=True)
    pdf_path = output_dir / pdf_filename(document)
    pdf_path.write_bytes(result.pdf_bytes)
    log_resume_event(
        "rendered", label, "cli", output="pdf", pages=result.page_count, path=str(pdf_path)
    )

    typer.secho("✓ Rendered", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  Pages: {result.page_count}")
    typer.echo(f"  PDF: {pdf_path}")
    if result.omitted:
        typer.secho(f"  Omitted: {', '.join(result.omitted)}", fg=typer.colors.YELLOW)
    if log:
        typer.echo(f"  Log: {log_file}")
    typer.echo("")


@app.command("html")
def html_command(
    source: SourceArgument,
    public: Annotated[
        bool, typer.Option("--public", help="Public page instead of the editor preview")
    ] = False,
    scale: Annotated[
        float, typer.Option("--scale", help="Preview zoom (0.3-1.0)")
    ] = DEFAULT_PREVIEW_SCALE,
    output_dir: OutputOption = RESULTS_PATH,
    db: DbOption = FOLIO_DB_PATH,
):
    """Render the preview (default) or public HTML page of a resume."""
    try:
        document, label, _ = _load_source(source, db)
        html = render_public(document) if public else render_preview(document, scale)
    except (FolioError, FileNotFoundError) as e:
        _fail(e)

    output_dir.mkdir(parents=True, exist_ok=True)
    html_path = output_dir / f"{label}_{'public' if public else 'preview'}.html"
    html_path.write_text(html, encoding="utf-8")
    log_resume_event("rendered", label, "cli", output="html", path=str(html_path))

    typer.secho(f"✓ HTML: {html_path}", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
