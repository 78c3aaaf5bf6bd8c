"""CLI entrypoint for the plugin archiver."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import typer
import uvicorn

from plugin_archiver.cli.orchestrator import (
    DEFAULT_WORKER_URL,
    DownloadOrchestrator,
    OrchestratorState,
    PhaseFailedError,
)

app = typer.Typer(name="parc", help="Download plugin archives through a chunked worker")

_STATE_COLORS = {
    OrchestratorState.DISCOVERING: typer.colors.BLUE,
    OrchestratorState.PROCESSING_CHUNK: None,
    OrchestratorState.FINALIZING: typer.colors.BLUE,
    OrchestratorState.DONE: typer.colors.GREEN,
}


def _resolve_worker_url(override: Optional[str]) -> str:
    if override:
        return override.rstrip('/')
    for env_name in ("PARC_WORKER_URL", "WORKER_URL"):
        env_url = os.environ.get(env_name)
        if env_url:
            return env_url.rstrip('/')
    return DEFAULT_WORKER_URL


def _report(state: OrchestratorState, message: str) -> None:
    typer.echo(typer.style(message, fg=_STATE_COLORS.get(state)))


@app.command()
def download(
    slug: str = typer.Argument(..., help="Plugin slug to download"),
    worker_url: Optional[str] = typer.Option(None, "--worker-url", "-w", help="URL of the worker"),
    output_dir: Path = typer.Option(Path("downloads"), "--output-dir", "-o", help="Where to write the zip"),
    delay: float = typer.Option(0.1, "--delay", help="Pause between chunk calls in seconds"),
) -> None:
    """Download a plugin as a zip archive."""
    orchestrator = DownloadOrchestrator(
        worker_url=_resolve_worker_url(worker_url),
        delay=delay,
        on_event=_report,
    )
    try:
        orchestrator.run(slug, output_dir=output_dir)
    except PhaseFailedError as exc:
        typer.echo(typer.style(f"Error downloading plugin: {exc}", fg=typer.colors.RED), err=True)
        raise typer.Exit(code=1)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind"),
    port: int = typer.Option(8787, "--port", help="Port to listen on"),
) -> None:
    """Run the archive worker."""
    uvicorn.run("plugin_archiver.app:app", host=host, port=port)


if __name__ == "__main__":
    app()
