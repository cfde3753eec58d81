"""Ingestion pipeline stages and orchestration."""

from .backfill import BackfillRunner
from .factory import build_backfill_runner, build_orchestrator
from .models import (
    BackfillCategorizationResult,
    BackfillEmbeddingsResult,
    CategorizeResult,
    FetchResult,
    OrchestrationResult,
    ScrapeResult,
)
from .orchestrator import PipelineOrchestrator, PipelineStage
from .stages import CategorizeStage, FetchStage, ScrapeStage, merge_scraped_metadata

__all__ = [
    "BackfillCategorizationResult",
    "BackfillEmbeddingsResult",
    "BackfillRunner",
    "CategorizeResult",
    "CategorizeStage",
    "FetchResult",
    "FetchStage",
    "OrchestrationResult",
    "PipelineOrchestrator",
    "PipelineStage",
    "ScrapeResult",
    "ScrapeStage",
    "build_backfill_runner",
    "build_orchestrator",
    "merge_scraped_metadata",
]
