#!/usr/bin/env python3
"""
Run the folio web app (resume API, PDF downloads, public pages).

Examples:\n

    serve.py                        # http://127.0.0.1:5000

    serve.py --seed --port 8080     # Store the sample resume first
"""

import os
from pathlib import Path

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from folio.contexts.storage import ResumeStore, seed_sample
from folio.utils.logger import setup_logger
from folio.utils.timestamp import now
from folio.web import create_app

load_dotenv()
FOLIO_DB_PATH = Path(os.getenv("FOLIO_DB_PATH", "outs/folio.db"))
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

app = typer.Typer(add_completion=False, help="Run the folio web app")


@app.command()
def serve_command(
    host: Annotated[str, typer.Option("--host", help="Bind address")] = "127.0.0.1",
    port: Annotated[int, typer.Option("--port", "-p", help="Port")] = 5000,
    debug: Annotated[bool, typer.Option("--debug", help="Flask debug mode")] = False,
    seed: Annotated[bool, typer.Option("--seed", help="Store the sample resume first")] = False,
    db: Annotated[Path, typer.Option("--db", help="SQLite resume store")] = FOLIO_DB_PATH,
):
    """Start the development server."""
    setup_logger(
        context_name="web",
        log_dir=LOGS_PATH / f"serve_{now()}",
        extra_provenance={"Database": db, "Address": f"{host}:{port}"},
    )

    store = ResumeStore(db)
    if seed:
        seed_sample(store)

    create_app(store).run(host=host, port=port, debug=debug)


if __name__ == "__main__":
    app()
