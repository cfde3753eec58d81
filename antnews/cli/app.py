"""Main CLI application."""

import typer
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()

from .init import init_command
from .run import run_command
from .serve import serve_command
from .sources import sources_app
from .tasks import (
    backfill_app,
    categorize_command,
    detect_duplicates_command,
    fetch_command,
    scrape_command,
)

app = typer.Typer(
    name="antnews",
    help="Ant news aggregator - feed ingestion, enrichment and deduplication",
    no_args_is_help=True,
)

# Register commands
app.command("init")(init_command)
app.command("run")(run_command)
app.command("fetch")(fetch_command)
app.command("scrape")(scrape_command)
app.command("categorize")(categorize_command)
app.command("detect-duplicates")(detect_duplicates_command)
app.command("serve")(serve_command)
app.add_typer(backfill_app, name="backfill", help="Enrich articles missed by earlier runs")
app.add_typer(sources_app, name="sources", help="Manage RSS sources")


if __name__ == "__main__":
    app()
