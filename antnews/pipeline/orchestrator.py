"""Pipeline orchestrator that runs FETCH, SCRAPE, CATEGORIZE and DEDUPLICATE."""

import time
from typing import Dict, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..config import PipelineConfig
from ..dedup import DuplicateDetector
from ..ingestion import DecoderClient
from .models import OrchestrationResult
from .stages import CategorizeStage, FetchStage, ScrapeStage

console = Console()


class PipelineStage:
    """Timing and outcome of one pipeline stage."""

    def __init__(self, name: str, description: str):
        self.name = name
        self.description = description
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None
        self.success = False
        self.skipped = False
        self.error: Optional[str] = None
        self.details = ""

    def start(self):
        """Mark stage as started."""
        self.start_time = time.time()

    def complete(self, details: str = ""):
        """Mark stage as completed successfully."""
        self.end_time = time.time()
        self.success = True
        self.details = details

    def skip(self, reason: str):
        """Mark stage as not needed for this run."""
        self.skipped = True
        self.success = True
        self.details = reason

    def fail(self, error: str):
        """Mark stage as failed."""
        self.end_time = time.time()
        self.success = False
        self.error = error

    @property
    def duration(self) -> float:
        """Get stage duration in seconds."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0


class PipelineOrchestrator:
    """Run the ingestion stages in order and aggregate their outcomes.

    Only a failure of the FETCH stage as a whole (for example the source
    query itself failing) aborts the run and reports ``success=False``.
    Anything that goes wrong later is appended to ``errors`` and the run
    still reports success.
    """

    def __init__(
        self,
        fetch: FetchStage,
        scrape: ScrapeStage,
        categorize: CategorizeStage,
        detector: DuplicateDetector,
        decoder: Optional[DecoderClient] = None,
        settings: Optional[PipelineConfig] = None,
        show_summary: bool = True,
    ) -> None:
        self.fetch_stage = fetch
        self.scrape_stage = scrape
        self.categorize_stage = categorize
        self.detector = detector
        self.decoder = decoder
        self.settings = settings or PipelineConfig()
        self.show_summary = show_summary
        self.stages: List[PipelineStage] = []
        self.total_start_time: Optional[float] = None

    def _new_stages(self) -> Dict[str, PipelineStage]:
        self.stages = [
            PipelineStage("fetch", "Fetching RSS sources"),
            PipelineStage("scrape", "Scraping article metadata"),
            PipelineStage("categorize", "Categorizing articles"),
            PipelineStage("deduplicate", "Detecting duplicates"),
        ]
        return {stage.name: stage for stage in self.stages}

    async def _wake_decoder(self) -> None:
        if self.decoder is None:
            return
        try:
            await self.decoder.wake()
        except Exception as e:
            console.print(f"[dim]Decoder wake-up failed: {e}[/dim]")

    async def run(self) -> OrchestrationResult:
        """Run the complete pipeline."""
        self.total_start_time = time.time()
        stages = self._new_stages()

        await self._wake_decoder()

        stage = stages["fetch"]
        stage.start()
        try:
            fetch = await self.fetch_stage.run()
        except Exception as e:
            stage.fail(str(e))
            console.print(f"[red]Fetch stage failed: {e}[/red]")
            result = OrchestrationResult(
                success=False,
                message="Failed to fetch articles",
                errors=[f"Failed to fetch articles: {e}"],
            )
            self._print_summary(result)
            return result
        stage.complete(
            f"{fetch.sources_processed} sources, {fetch.articles_added} new, "
            f"{len(fetch.articles_needing_scraping)} need scraping"
        )

        result = OrchestrationResult(
            success=True,
            sources_processed=fetch.sources_processed,
            articles_added=fetch.articles_added,
            articles_needing_scraping=list(fetch.articles_needing_scraping),
            fetch=fetch,
            errors=list(fetch.errors),
        )

        stage = stages["scrape"]
        if not fetch.articles_needing_scraping:
            stage.skip("nothing to scrape")
        else:
            stage.start()
            try:
                result.scrape = await self.scrape_stage.run(fetch.articles_needing_scraping)
                result.errors.extend(result.scrape.errors)
                stage.complete(
                    f"{result.scrape.articles_updated}/{result.scrape.articles_processed} updated"
                )
            except Exception as e:
                stage.fail(str(e))
                result.errors.append(f"Scrape stage failed: {e}")

        stage = stages["categorize"]
        if not fetch.new_article_ids:
            stage.skip("no new articles")
        else:
            stage.start()
            try:
                result.categorize = await self.categorize_stage.run(fetch.new_article_ids)
                result.errors.extend(result.categorize.errors)
                stage.complete(
                    f"{result.categorize.articles_categorized}/"
                    f"{result.categorize.articles_processed} categorized"
                )
            except Exception as e:
                stage.fail(str(e))
                result.errors.append(f"Categorize stage failed: {e}")

        stage = stages["deduplicate"]
        if not fetch.new_article_ids:
            stage.skip("no new articles")
        else:
            stage.start()
            try:
                result.duplicates = await self.detector.detect(
                    fetch.new_article_ids,
                    lookback_days=self.settings.lookback_days,
                    similarity_threshold=self.settings.similarity_threshold,
                )
                result.errors.extend(result.duplicates.errors)
                stage.complete(
                    f"{result.duplicates.duplicates_found} found, "
                    f"{result.duplicates.duplicate_records_created} created"
                )
            except Exception as e:
                stage.fail(str(e))
                result.errors.append(f"Duplicate detection failed: {e}")

        result.message = (
            f"Added {result.articles_added} articles"
            + (f" with {len(result.errors)} warnings" if result.errors else "")
        )
        self._print_summary(result)
        return result

    def _print_summary(self, result: OrchestrationResult):
        """Print pipeline execution summary."""
        if not self.show_summary:
            return

        total_duration = time.time() - self.total_start_time if self.total_start_time else 0

        table = Table(title="Pipeline Summary")
        table.add_column("Stage", style="cyan")
        table.add_column("Status", style="bold")
        table.add_column("Duration", style="yellow")
        table.add_column("Details", style="dim")

        for stage in self.stages:
            if stage.skipped:
                status = "[dim]-[/dim]"
            elif stage.success:
                status = "[green]✓[/green]"
            elif stage.start_time is None:
                status = "[dim]not run[/dim]"
            else:
                status = "[red]✗[/red]"
            duration = f"{stage.duration:.1f}s" if stage.duration > 0 else "-"
            details = stage.details if stage.success else (stage.error or "")
            table.add_row(stage.name.title(), status, duration, details)

        console.print("\n")
        console.print(table)

        if not result.success:
            console.print(Panel(
                f"[red]❌ Pipeline failed![/red]\n\n"
                f"{result.message}\n"
                f"Duration: {total_duration:.1f} seconds",
                style="red"
            ))
        elif result.errors:
            shown = "\n".join(f"• {error}" for error in result.errors[:10])
            more = f"\n… and {len(result.errors) - 10} more" if len(result.errors) > 10 else ""
            console.print(Panel(
                f"[yellow]⚠ Pipeline completed with {len(result.errors)} warnings[/yellow]\n\n"
                f"Articles added: {result.articles_added}\n"
                f"Duration: {total_duration:.1f} seconds\n\n"
                f"{shown}{more}",
                style="yellow"
            ))
        else:
            console.print(Panel(
                f"[green]✅ Pipeline completed successfully![/green]\n\n"
                f"Sources processed: {result.sources_processed}\n"
                f"Articles added: {result.articles_added}\n"
                f"Duration: {total_duration:.1f} seconds",
                style="green"
            ))
