"""``atelier serve``: run the HTTP API under uvicorn."""

from __future__ import annotations

import click
import uvicorn

from atelier.infrastructure.bootstrap import Container
from atelier.infrastructure.http.app import create_app


@click.command("serve")
@click.option("--host", default="127.0.0.1", show_default=True, help="Interface to bind.")
@click.option("--port", default=8000, show_default=True, type=int, help="Port to listen on.")
@click.pass_obj
def serve(container: Container, host: str, port: int) -> None:
    """Serve the storefront API."""
    app = create_app(container)
    uvicorn.run(app, host=host, port=port, log_level=container.settings.log_level.lower())
