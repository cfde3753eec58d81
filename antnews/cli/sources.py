"""Sources management commands."""

import asyncio
from typing import Dict, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from ..config import Config, SourceConfig, load_sources, save_sources
from ..db import SourceManager, open_pool
from ..ingestion import DecoderClient, FeedResult, RSSFetcher
from ..ingestion.rss_fetcher import print_feed_summary

console = Console()
sources_app = typer.Typer(help="Manage RSS sources")


def _load_or_exit(config: Config) -> List[SourceConfig]:
    try:
        return load_sources(config.sources_path)
    except FileNotFoundError:
        console.print("[red]Sources file not found. Run 'antnews init' first.[/red]")
        raise typer.Exit(1)


@sources_app.command("list")
def sources_list() -> None:
    """List all configured sources."""
    sources = _load_or_exit(Config())

    if not sources:
        console.print("[yellow]No sources configured.[/yellow]")
        return

    table = Table(title="Configured Sources")
    table.add_column("Name", style="cyan")
    table.add_column("Language", style="magenta")
    table.add_column("Decoded", style="green")
    table.add_column("Active", style="yellow")
    table.add_column("Feed URL", style="blue")

    for source in sources:
        table.add_row(
            source.name,
            source.language,
            "✓" if source.config.needs_decoding else "",
            "✓" if source.is_active else "✗",
            source.config.feed_url or "-",
        )

    console.print(table)


@sources_app.command("add")
def sources_add(
    name: str = typer.Option(..., "--name", "-n", help="Source name"),
    feed_url: str = typer.Option(..., "--feed-url", "-f", help="RSS feed URL"),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Origin site URL"),
    language: str = typer.Option("en", "--language", "-l", help="Language code"),
    needs_decoding: bool = typer.Option(
        False, "--needs-decoding", help="Item links must go through the decoder"
    ),
) -> None:
    """Add a new RSS source."""
    config = Config()
    try:
        sources = load_sources(config.sources_path)
    except FileNotFoundError:
        sources = []

    if any(s.name == name or s.config.feed_url == feed_url for s in sources):
        console.print(f"[red]Source '{name}' or feed URL already exists.[/red]")
        raise typer.Exit(1)

    try:
        new_source = SourceConfig(
            name=name,
            url=url,
            language=language,
            config={"feed_url": feed_url, "needs_decoding": needs_decoding},
        )
    except ValueError as e:
        console.print(f"[red]Invalid source: {e}[/red]")
        raise typer.Exit(1)

    sources.append(new_source)
    save_sources(sources, config.sources_path)

    console.print(f"[green]✅ Added source: {name}[/green]")
    console.print("Run [bold]antnews sources sync[/bold] to push it to the database.")


@sources_app.command("remove")
def sources_remove(
    name: str = typer.Argument(..., help="Source name to remove"),
) -> None:
    """Remove a source from sources.yaml."""
    config = Config()
    sources = _load_or_exit(config)

    original_count = len(sources)
    sources = [s for s in sources if s.name != name]

    if len(sources) == original_count:
        console.print(f"[red]Source '{name}' not found.[/red]")
        raise typer.Exit(1)

    save_sources(sources, config.sources_path)
    console.print(f"[green]✅ Removed source: {name}[/green]")


async def _read_sources(config: Config, sources: List[SourceConfig]) -> Dict[str, FeedResult]:
    decoder_config = config.config.decoder
    reader = RSSFetcher(
        decoder=DecoderClient(
            base_url=decoder_config.base_url,
            decode_timeout=decoder_config.decode_timeout_seconds,
            wake_timeout=decoder_config.wake_timeout_seconds,
        ),
        timeout=config.config.pipeline.feed_timeout_seconds,
    )
    if any(s.config.needs_decoding for s in sources):
        await reader.decoder.wake()

    results = await asyncio.gather(
        *(reader.read_feed(s.config.feed_url, s.config.needs_decoding) for s in sources)
    )
    return {source.name: result for source, result in zip(sources, results)}


@sources_app.command("test")
def sources_test(
    name: Optional[str] = typer.Argument(None, help="Source name to test (or test all)"),
) -> None:
    """Read feeds and report how many items each returns."""
    config = Config()
    sources = _load_or_exit(config)

    if name:
        sources = [s for s in sources if s.name == name]
        if not sources:
            console.print(f"[red]Source '{name}' not found.[/red]")
            raise typer.Exit(1)

    testable = []
    for source in sources:
        if not source.is_active:
            console.print(f"[yellow]⚠️  {source.name}: Inactive[/yellow]")
        elif not source.config.feed_url:
            console.print(f"[yellow]⚠️  {source.name}: No feed URL[/yellow]")
        else:
            testable.append(source)

    results = asyncio.run(_read_sources(config, testable))
    for source_name, result in results.items():
        if result.success:
            console.print(f"[green]✅ {source_name}: {result.item_count} items[/green]")
        else:
            console.print(f"[red]❌ {source_name}: Failed - {result.error}[/red]")

    print_feed_summary(results)


@sources_app.command("sync")
def sources_sync() -> None:
    """Upsert sources.yaml into the database, matched by name."""
    config = Config()
    sources = _load_or_exit(config)

    async def _sync() -> Dict[str, int]:
        async with open_pool(config.get_db_config()) as pool:
            return await SourceManager(pool).sync_sources(sources)

    try:
        source_map = asyncio.run(_sync())
    except Exception as e:
        console.print(f"[red]❌ Failed to sync sources: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✅ Synced {len(source_map)} sources[/green]")
