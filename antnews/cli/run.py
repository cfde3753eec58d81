"""Run command implementation."""

import asyncio
from typing import Awaitable, Callable, TypeVar

import typer
from rich.console import Console

from ..config import Config
from ..db import open_pool, validate_connection
from ..errors import ConfigurationError
from ..pipeline import PipelineOrchestrator, build_orchestrator

console = Console()

T = TypeVar("T")


def load_checked_config() -> Config:
    """Load configuration and make sure the database answers."""
    try:
        config = Config()
        db_config = config.get_db_config()
    except (FileNotFoundError, ConfigurationError) as e:
        console.print(f"[red]{e}[/red]")
        console.print("Run [bold]antnews init[/bold] first.")
        raise typer.Exit(1)

    console.print("[dim]Checking database connection...[/dim]")
    if not asyncio.run(validate_connection(db_config)):
        console.print("[red]❌ Database connection failed![/red]")
        console.print("Please check your database configuration and ensure Postgres is running.")
        raise typer.Exit(1)
    return config


def run_with_orchestrator(
    config: Config,
    action: Callable[[PipelineOrchestrator], Awaitable[T]],
) -> T:
    """Open a pool, build the pipeline and run ``action`` against it."""

    async def _run() -> T:
        async with open_pool(config.get_db_config()) as pool:
            return await action(build_orchestrator(config, pool))

    return asyncio.run(_run())


def run_command() -> None:
    """Run the full pipeline: fetch, scrape, categorize, detect duplicates."""
    config = load_checked_config()
    try:
        result = run_with_orchestrator(config, lambda orchestrator: orchestrator.run())
    except KeyboardInterrupt:
        console.print("\n[yellow]Pipeline interrupted by user[/yellow]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Pipeline failed: {e}[/red]")
        raise typer.Exit(1)

    if not result.success:
        raise typer.Exit(1)
