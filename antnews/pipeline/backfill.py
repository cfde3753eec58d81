"""Backfill jobs for articles that missed enrichment."""

import asyncio
from typing import List

from rich.console import Console

from ..db import ArticleStorage
from ..dedup import DuplicateDetector, embedding_text
from ..enrichment import EmbeddingGenerator
from .models import BackfillCategorizationResult, BackfillEmbeddingsResult
from .stages import CategorizeStage

console = Console()

BACKFILL_EMBEDDINGS_LIMIT = 100
BACKFILL_CATEGORIZATION_LIMIT = 50
BACKFILL_LOOKBACK_DAYS = 0
BACKFILL_SIMILARITY_THRESHOLD = 0.85


class BackfillRunner:
    """Embed and categorize articles left behind by earlier runs."""

    def __init__(
        self,
        articles: ArticleStorage,
        embeddings: EmbeddingGenerator,
        detector: DuplicateDetector,
        categorize: CategorizeStage,
        embedding_delay: float = 5.0,
        sleep=asyncio.sleep,
    ) -> None:
        self.articles = articles
        self.embeddings = embeddings
        self.detector = detector
        self.categorize_stage = categorize
        self.embedding_delay = embedding_delay
        self.sleep = sleep

    async def backfill_embeddings(
        self,
        limit: int = BACKFILL_EMBEDDINGS_LIMIT,
        detect_duplicates: bool = True,
        lookback_days: int = BACKFILL_LOOKBACK_DAYS,
        similarity_threshold: float = BACKFILL_SIMILARITY_THRESHOLD,
    ) -> BackfillEmbeddingsResult:
        """Embed up to ``limit`` articles lacking an embedding, newest first.

        Stops at the first rate limit. Duplicate detection then runs over the
        articles that received an embedding here.
        """
        result = BackfillEmbeddingsResult()
        pending = await self.articles.get_articles_without_embedding(limit)
        console.print(f"Found {len(pending)} articles without embeddings")

        embedded: List[int] = []
        for index, article in enumerate(pending):
            result.articles_processed += 1
            try:
                embedding = await self.embeddings.generate(embedding_text(article))
                if embedding.success:
                    if await self.articles.set_embedding(article.id, embedding.embedding):
                        result.articles_updated += 1
                        embedded.append(article.id)
                else:
                    result.errors.append(
                        f"Failed to embed article {article.id}: {embedding.error}"
                    )
                    if embedding.rate_limited:
                        console.print("[yellow]Rate limit hit - stopping backfill[/yellow]")
                        result.stopped_early = True
                        break
            except Exception as e:
                result.errors.append(f"Failed to embed article {article.id}: {e}")

            if index < len(pending) - 1:
                await self.sleep(self.embedding_delay)

        console.print(
            f"Embedded {result.articles_updated}/{result.articles_processed} articles"
        )

        if detect_duplicates and embedded:
            result.duplicates = await self.detector.detect(
                embedded,
                lookback_days=lookback_days,
                similarity_threshold=similarity_threshold,
            )
        return result

    async def backfill_categorization(
        self, limit: int = BACKFILL_CATEGORIZATION_LIMIT
    ) -> BackfillCategorizationResult:
        """Categorize up to ``limit`` articles with no tags or no category."""
        pending = await self.articles.get_uncategorized_articles(limit)
        if not pending:
            return BackfillCategorizationResult(
                message="No uncategorized articles found", articles_found=0
            )

        console.print(f"Found {len(pending)} uncategorized articles")
        categorize = await self.categorize_stage.run([article.id for article in pending])
        return BackfillCategorizationResult(
            message=(
                f"Categorized {categorize.articles_categorized} of {len(pending)} articles"
            ),
            articles_found=len(pending),
            categorize=categorize,
        )
