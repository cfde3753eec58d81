"""Commands running a single pipeline stage or backfill job."""

from typing import List, Optional

import typer
from pydantic import BaseModel
from rich.console import Console

from ..pipeline import build_backfill_runner
from .run import load_checked_config, run_with_orchestrator

console = Console()
backfill_app = typer.Typer(help="Enrich articles missed by earlier runs")


def print_result(result: BaseModel) -> None:
    """Print a stage result as JSON."""
    console.print_json(result.model_dump_json())


def fetch_command() -> None:
    """Fetch all active RSS sources and insert new articles."""
    config = load_checked_config()
    result = run_with_orchestrator(config, lambda o: o.fetch_stage.run())
    print_result(result)


def scrape_command(
    article_ids: List[int] = typer.Argument(..., help="Article IDs to scrape"),
) -> None:
    """Fill missing image, description and author from article pages."""
    config = load_checked_config()
    result = run_with_orchestrator(config, lambda o: o.scrape_stage.run(article_ids))
    print_result(result)


def categorize_command(
    article_ids: List[int] = typer.Argument(..., help="Article IDs to categorize"),
) -> None:
    """Tag and categorize articles."""
    config = load_checked_config()
    result = run_with_orchestrator(config, lambda o: o.categorize_stage.run(article_ids))
    print_result(result)


def detect_duplicates_command(
    article_ids: List[int] = typer.Argument(..., help="Candidate article IDs"),
    lookback_days: Optional[int] = typer.Option(
        None,
        "--lookback-days",
        help="Only compare with articles published this many days back (0 = unlimited)",
        min=0,
    ),
    threshold: Optional[float] = typer.Option(
        None,
        "--threshold",
        help="Minimum cosine similarity for a duplicate",
        min=0.0,
        max=1.0,
    ),
) -> None:
    """Detect near-duplicates among the given articles."""
    config = load_checked_config()
    pipeline = config.config.pipeline
    result = run_with_orchestrator(
        config,
        lambda o: o.detector.detect(
            article_ids,
            lookback_days=pipeline.lookback_days if lookback_days is None else lookback_days,
            similarity_threshold=pipeline.similarity_threshold if threshold is None else threshold,
        ),
    )
    print_result(result)


@backfill_app.command("embeddings")
def backfill_embeddings(
    limit: int = typer.Option(100, "--limit", help="Maximum articles to embed", min=1),
    detect: bool = typer.Option(
        True, "--detect/--no-detect", help="Run duplicate detection afterwards"
    ),
    lookback_days: int = typer.Option(0, "--lookback-days", help="0 = unlimited", min=0),
    threshold: float = typer.Option(0.85, "--threshold", min=0.0, max=1.0),
) -> None:
    """Embed articles that have no embedding yet."""
    config = load_checked_config()
    result = run_with_orchestrator(
        config,
        lambda o: build_backfill_runner(o).backfill_embeddings(
            limit=limit,
            detect_duplicates=detect,
            lookback_days=lookback_days,
            similarity_threshold=threshold,
        ),
    )
    print_result(result)


@backfill_app.command("categorization")
def backfill_categorization(
    limit: int = typer.Option(50, "--limit", help="Maximum articles to categorize", min=1),
) -> None:
    """Categorize articles with no tags or no category."""
    config = load_checked_config()
    result = run_with_orchestrator(
        config, lambda o: build_backfill_runner(o).backfill_categorization(limit=limit)
    )
    print_result(result)
