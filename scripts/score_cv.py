#!/usr/bin/env python3
"""
Score a resume for ATS completeness.

The resume is either a JSON/YAML document file or a stored record (id or slug).

Examples:\n

    score_cv.py jane-doe                      # Breakdown table

    score_cv.py data/jane.yaml --json         # JSON for scripting

    score_cv.py jane-doe --rubric strict.yaml # Custom rubric
"""

import json
import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from folio.contexts.schema import load_document
from folio.contexts.scoring import format_score_report, load_rubric, score
from folio.contexts.storage import ResumeStore
from folio.exceptions import FolioError

load_dotenv()
FOLIO_DB_PATH = Path(os.getenv("FOLIO_DB_PATH", "outs/folio.db"))

app = typer.Typer(add_completion=False, help="Score a resume for ATS completeness")

BAND_COLORS = {
    "green": typer.colors.GREEN,
    "yellow": typer.colors.YELLOW,
    "orange": typer.colors.MAGENTA,
    "red": typer.colors.RED,
}


@app.command()
def score_command(
    source: Annotated[str, typer.Argument(help="JSON/YAML document file, or stored resume id/slug")],
    as_json: Annotated[bool, typer.Option("--json", help="Print the score as JSON")] = False,
    rubric_path: Annotated[
        Optional[Path], typer.Option("--rubric", help="YAML rubric overrides")
    ] = None,
    db: Annotated[Path, typer.Option("--db", help="SQLite resume store")] = FOLIO_DB_PATH,
):
    """Score a resume and list what to improve."""
    try:
        path = Path(source)
        if path.is_file():
            document, title = load_document(path), path.name
        else:
            record = ResumeStore(db).resolve(source)
            document, title = record.document, record.title
        rubric = load_rubric(rubric_path) if rubric_path else None
    except (FolioError, FileNotFoundError, ValueError) as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    result = score(document, rubric)

    if as_json:
        typer.echo(json.dumps(result.to_dict(include_band=True), indent=2))
        return

    typer.echo(format_score_report(result, title=f"ATS Score Breakdown: {title}"))
    band = result.band
    typer.secho(
        f"\nTotal: {result.total}/100 ({band.label})",
        fg=BAND_COLORS.get(band.color, typer.colors.WHITE),
        bold=True,
    )


if __name__ == "__main__":
    app()
