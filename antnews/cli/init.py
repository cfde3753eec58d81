"""Init command implementation."""

import asyncio
from pathlib import Path
from typing import List

import typer
from rich.console import Console
from rich.panel import Panel

from ..config import ConfigModel, SourceConfig, save_config, save_sources
from ..db import SourceManager, init_database, open_pool, validate_connection

console = Console()


def _google_news(name: str, query: str, language: str, country: str) -> SourceConfig:
    return SourceConfig(
        name=f"Google News - {name}",
        url="https://news.google.com/",
        language=language,
        config={
            "feed_url": (
                f"https://news.google.com/rss/search?q={query}"
                f"&hl={language}&gl={country}&ceid={country}:{language}"
            ),
            "needs_decoding": True,
        },
    )


def _direct(name: str, url: str, feed_url: str, language: str) -> SourceConfig:
    return SourceConfig(name=name, url=url, language=language, config={"feed_url": feed_url})


def create_default_sources() -> List[SourceConfig]:
    """Create default ant news sources."""
    return [
        _google_news("Fourmis", "fourmis", "fr", "FR"),
        _google_news("Ants", "ants", "en", "GB"),
        _google_news("Hormigas", "hormigas", "es", "ES"),
        _google_news("Ameisen", "ameisen", "de", "DE"),
        _direct(
            "Passion Entomologie",
            "https://passion-entomologie.fr/",
            "https://passion-entomologie.fr/feed/",
            "fr",
        ),
        _direct(
            "Entomology Today",
            "https://entomologytoday.org/",
            "https://entomologytoday.org/feed/",
            "en",
        ),
        _direct(
            "ScienceDaily - Insects",
            "https://www.sciencedaily.com/news/plants_animals/insects_and_butterflies/",
            "https://www.sciencedaily.com/rss/plants_animals/insects_and_butterflies.xml",
            "en",
        ),
        _direct(
            "Science et Avenir - Animaux",
            "https://www.sciencesetavenir.fr/animaux/",
            "https://www.sciencesetavenir.fr/nature-environnement/rss.xml",
            "fr",
        ),
        _direct(
            "Myrmecological News Blog",
            "https://blog.myrmecologicalnews.org/",
            "https://blog.myrmecologicalnews.org/feed/",
            "en",
        ),
        _direct("Le Blob", "https://leblob.fr/", "https://leblob.fr/rss/blob", "fr"),
        _direct(
            "CNRS Le Journal",
            "https://lejournal.cnrs.fr",
            "https://lejournal.cnrs.fr/rss/7551",
            "fr",
        ),
        _direct(
            "Futura Nature",
            "https://www.futura-sciences.com",
            "https://www.futura-sciences.com/rss/nature/actualites.xml",
            "fr",
        ),
    ]


async def _seed_database(db_config: dict, sources: List[SourceConfig]) -> int:
    async with open_pool(db_config) as pool:
        source_map = await SourceManager(pool).sync_sources(sources)
    return len(source_map)


def init_command(
    config_dir: Path = typer.Option(
        Path.home() / ".config" / "antnews",
        "--config-dir",
        "-c",
        help="Configuration directory",
    ),
    db_host: str = typer.Option("localhost", "--db-host", help="Postgres host"),
    db_port: int = typer.Option(5432, "--db-port", help="Postgres port"),
    db_name: str = typer.Option("antnews", "--db-name", help="Database name"),
    db_user: str = typer.Option("antnews", "--db-user", help="Database user"),
    seed_sources: bool = typer.Option(
        True,
        "--seed-sources/--no-seed-sources",
        help="Seed default ant news sources",
    ),
) -> None:
    """Initialize configuration, database schema and sources."""
    console.print(Panel.fit("🐜 Ant News - Initialization", style="bold blue"))

    config_dir.mkdir(parents=True, exist_ok=True)
    config_path = config_dir / "config.yaml"
    sources_path = config_dir / "sources.yaml"

    config = ConfigModel(
        postgres={
            "host": db_host,
            "port": db_port,
            "database": db_name,
            "user": db_user,
            "password_env": "ANTNEWS_DB_PASSWORD",
        },
    )

    save_config(config, config_path)
    console.print(f"✅ Created config: {config_path}")

    sources = create_default_sources() if seed_sources else []
    save_sources(sources, sources_path)
    console.print(f"✅ Created sources: {sources_path} ({len(sources)} sources)")

    console.print("\n[bold]Testing database connection...[/bold]")
    db_config = config.postgres.model_dump()

    if not asyncio.run(validate_connection(db_config)):
        console.print(
            "[red]❌ Database connection failed![/red]\n"
            "Please ensure Postgres is running and credentials are correct.\n"
            "Set the password via environment variable: "
            "[bold]export ANTNEWS_DB_PASSWORD=your_password[/bold]"
        )
        raise typer.Exit(1)

    console.print("✅ Database connection successful")

    console.print("\n[bold]Initializing database schema...[/bold]")
    try:
        asyncio.run(init_database(db_config, config.openrouter.embedding_dimensions))
        console.print("✅ Database schema initialized")
    except Exception as e:
        console.print(f"[red]❌ Failed to initialize database: {e}[/red]")
        raise typer.Exit(1)

    if sources:
        try:
            seeded = asyncio.run(_seed_database(db_config, sources))
            console.print(f"✅ Seeded {seeded} sources")
        except Exception as e:
            console.print(f"[red]❌ Failed to seed sources: {e}[/red]")
            raise typer.Exit(1)

    console.print(
        Panel(
            f"[green]✅ Ant News initialized successfully![/green]\n\n"
            f"Configuration: {config_path}\n"
            f"Sources: {sources_path}\n\n"
            f"Next steps:\n"
            f"1. Set database password: [bold]export ANTNEWS_DB_PASSWORD=your_password[/bold]\n"
            f"2. Set API key: [bold]export OPENROUTER_API_KEY=your_key[/bold]\n"
            f"3. Run: [bold]antnews run[/bold]",
            style="green",
        )
    )
