"""Command line entry points."""

import asyncio
import json

import click
from rich.console import Console

from .core.config import get_settings
from .core.logging import setup_logging
from .fetchers.paperless_client import PaperlessClient
from .models.ingestion import IngestionRequest, IngestionResult
from .workflows.ingestion_workflow import IngestionWorkflow

console = Console()


@click.group()
def cli() -> None:
    """Paperless bridge."""


@cli.command()
@click.option("--host", default=None, help="Bind address (overrides PAPERLESS_HELPER_HOST)")
@click.option("--port", default=None, type=int, help="Port (overrides PAPERLESS_HELPER_PORT)")
def serve(host, port) -> None:
    """Run the HTTP server."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "paperless_bridge.main:app",
        host=host or settings.paperless_helper_host,
        port=port or settings.paperless_helper_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower()
    )


async def _process(request: IngestionRequest) -> IngestionResult:
    settings = get_settings()
    async with PaperlessClient(settings) as client:
        workflow = IngestionWorkflow.from_settings(client, settings)
        return await workflow.run(request)


@cli.command()
@click.argument("url")
@click.argument("external_id")
@click.option("--token", envvar="PAPERLESS_API_TOKEN", required=True, help="Paperless API token")
def process(url: str, external_id: str, token: str) -> None:
    """Ingest URL into Paperless and print the result."""
    setup_logging()
    request = IngestionRequest(url=url, id=external_id, token=token)
    result = asyncio.run(_process(request))
    console.print_json(json.dumps(result.to_response()))
    if result.failure is not None:
        raise SystemExit(1)


if __name__ == "__main__":  # pragma: no cover
    cli()
