"""Serve command implementation."""

from typing import Optional

import typer
import uvicorn

from ..config import Config
from ..server import create_app


def serve_command(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Bind port"),
) -> None:
    """Serve the authenticated fetch trigger over HTTP."""
    config = Config()
    trigger = config.config.trigger
    uvicorn.run(create_app(config), host=host or trigger.host, port=port or trigger.port)
