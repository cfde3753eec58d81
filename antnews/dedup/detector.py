"""Near-duplicate detection over article embeddings."""

import asyncio
from typing import List, Optional, Tuple

import pendulum
from rich.console import Console

from ..db import ArticleStorage, DuplicateStorage
from ..enrichment import EmbeddingGenerator
from ..models import Article
from .models import DuplicateDetectionResult

console = Console()

DEFAULT_LOOKBACK_DAYS = 30
DEFAULT_SIMILARITY_THRESHOLD = 0.75
DEFAULT_NEIGHBOR_LIMIT = 10
EMBEDDING_DELAY_SECONDS = 5.0


def embedding_text(article: Article) -> str:
    """Text an article is embedded from."""
    return f"{article.title} {article.summary or ''}"


def canonical_pair(first_id: int, second_id: int) -> Tuple[int, int]:
    """Order a pair as (canonical, duplicate); the lower id is canonical."""
    return (first_id, second_id) if first_id < second_id else (second_id, first_id)


class DuplicateDetector:
    """Find near-identical articles and record canonical/duplicate pairs.

    Candidates without an embedding get one first. Each candidate is then
    compared against its nearest neighbours within the lookback window; every
    neighbour at or under ``1 - similarity_threshold`` cosine distance becomes
    a relation keyed on the unordered pair, so re-runs never add edges.
    """

    def __init__(
        self,
        articles: ArticleStorage,
        duplicates: DuplicateStorage,
        embeddings: EmbeddingGenerator,
        neighbor_limit: int = DEFAULT_NEIGHBOR_LIMIT,
        embedding_delay: float = EMBEDDING_DELAY_SECONDS,
        sleep=asyncio.sleep,
    ) -> None:
        self.articles = articles
        self.duplicates = duplicates
        self.embeddings = embeddings
        self.neighbor_limit = neighbor_limit
        self.embedding_delay = embedding_delay
        self.sleep = sleep

    async def detect(
        self,
        article_ids: List[int],
        lookback_days: int = DEFAULT_LOOKBACK_DAYS,
        similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    ) -> DuplicateDetectionResult:
        """Run detection for ``article_ids``. ``lookback_days=0`` means unlimited."""
        if not 0.0 <= similarity_threshold <= 1.0:
            raise ValueError(f"similarity_threshold must be within [0, 1], got {similarity_threshold}")
        if lookback_days < 0:
            raise ValueError(f"lookback_days must be >= 0, got {lookback_days}")

        distance_threshold = 1.0 - similarity_threshold
        published_since: Optional[pendulum.DateTime] = None
        if lookback_days > 0:
            published_since = pendulum.now("UTC").subtract(days=lookback_days)

        console.print(
            f"Detecting duplicates for {len(article_ids)} articles "
            f"(similarity >= {similarity_threshold}, distance <= {distance_threshold:.3f}, "
            f"lookback {'unlimited' if published_since is None else f'{lookback_days} days'})"
        )

        result = DuplicateDetectionResult()
        candidates = await self.articles.get_articles(article_ids)
        if not candidates:
            return result

        for index, article in enumerate(candidates):
            is_last = index == len(candidates) - 1
            embedded_now = False
            try:
                if not article.has_embedding:
                    embedding = await self.embeddings.generate(embedding_text(article))
                    if not embedding.success:
                        result.errors.append(
                            f"Failed to embed article {article.id}: {embedding.error}"
                        )
                        if embedding.rate_limited:
                            console.print("[yellow]  Rate limit hit - stopping batch[/yellow]")
                            result.stopped_early = True
                            break
                        continue

                    await self.articles.set_embedding(article.id, embedding.embedding)
                    embedded_now = True

                neighbors = await self.articles.find_similar(
                    article.id,
                    limit=self.neighbor_limit,
                    published_since=published_since,
                )

                for neighbor in neighbors:
                    if neighbor.distance > distance_threshold:
                        continue

                    result.duplicates_found += 1
                    canonical_id, duplicate_id = canonical_pair(article.id, neighbor.id)

                    if await self.duplicates.relation_exists(canonical_id, duplicate_id):
                        continue

                    similarity = min(1.0, max(0.0, 1.0 - neighbor.distance))
                    if await self.duplicates.create_relation(canonical_id, duplicate_id, similarity):
                        result.duplicate_records_created += 1
                        console.print(
                            f"[dim]  #{duplicate_id} duplicates #{canonical_id} "
                            f"(similarity {similarity:.3f})[/dim]"
                        )

                result.articles_processed += 1

            except Exception as e:
                console.print(f"[red]  Error processing article {article.id}: {e}[/red]")
                result.errors.append(f"Failed to process article {article.id}: {e}")

            # Pace only real embedding calls
            if embedded_now and not is_last:
                await self.sleep(self.embedding_delay)

        console.print(
            f"Duplicate detection: {result.articles_processed}/{len(candidates)} processed, "
            f"{result.duplicates_found} found, {result.duplicate_records_created} created"
        )
        return result
