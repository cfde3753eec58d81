"""FETCH, SCRAPE and CATEGORIZE stages."""

import asyncio
from typing import Dict, List, Optional, Sequence
from urllib.parse import urlparse

from rich.console import Console

from ..db import ArticleStorage, SourceManager
from ..enrichment import ArticleCategorizer, CategorizationInput
from ..errors import FetchStageError
from ..ingestion import (
    FeedItem,
    MetadataScraper,
    RSSFetcher,
    ScrapedMetadata,
    generate_slug,
    matches_keywords,
    parse_pub_date,
)
from ..models import Article, NewArticle, Source
from .models import CategorizeResult, FetchResult, ScrapeResult, SourceFetchResult

console = Console()

DEFAULT_BATCH_SIZE = 50
SCRAPE_DELAY_SECONDS = 0.5
CATEGORIZE_DELAY_SECONDS = 0.1
CATEGORIZE_CONTENT_CHARS = 1000
# articles.author is VARCHAR(200)
AUTHOR_MAX_CHARS = 200


def chunk(ids: Sequence[int], size: int) -> List[List[int]]:
    """Split ids into consecutive batches of at most ``size``."""
    return [list(ids[i:i + size]) for i in range(0, len(ids), size)]


def host_of(url: str) -> Optional[str]:
    """Host part of a URL, None when it has none."""
    return urlparse(url).hostname or None


def build_new_article(item: FeedItem, slug: str, language: str) -> NewArticle:
    """Raw article row for a feed item."""
    return NewArticle(
        title=item.title,
        slug=slug,
        content=item.content or item.description or "",
        summary=item.description or "",
        source_name=host_of(item.link),
        source_url=item.link,
        author=item.author[:AUTHOR_MAX_CHARS] if item.author else None,
        published_at=parse_pub_date(item.pub_date),
        language=language,
        image_url=item.image_url,
    )


def merge_scraped_metadata(article: Article, metadata: ScrapedMetadata) -> Dict[str, str]:
    """Fields to write after a scrape. Stored non-empty values are never replaced."""
    updates: Dict[str, str] = {}
    if metadata.og_image and not article.image_url:
        updates["image_url"] = metadata.og_image
    if metadata.og_description:
        if not article.summary:
            updates["summary"] = metadata.og_description
        if not article.content:
            updates["content"] = metadata.og_description
    if metadata.author and not article.author:
        updates["author"] = metadata.author[:AUTHOR_MAX_CHARS]
    return updates


class FetchStage:
    """Read every active RSS source and insert new relevant articles."""

    def __init__(
        self,
        sources: SourceManager,
        articles: ArticleStorage,
        reader: RSSFetcher,
        max_concurrent_sources: int = 5,
    ) -> None:
        self.sources = sources
        self.articles = articles
        self.reader = reader
        self.max_concurrent_sources = max_concurrent_sources

    async def run(self) -> FetchResult:
        """Fetch all active sources concurrently.

        Raises:
            FetchStageError: the active sources cannot be listed. Per-source
                failures are collected into the result instead.
        """
        try:
            sources = await self.sources.get_active_rss_sources()
        except Exception as e:
            raise FetchStageError(f"Could not load active sources: {e}") from e
        console.print(f"Found {len(sources)} active RSS sources")

        semaphore = asyncio.Semaphore(self.max_concurrent_sources)

        async def bounded(source: Source) -> SourceFetchResult:
            async with semaphore:
                return await self.fetch_source(source)

        outcomes = await asyncio.gather(
            *(bounded(source) for source in sources), return_exceptions=True
        )

        result = FetchResult()
        for source, outcome in zip(sources, outcomes):
            if isinstance(outcome, BaseException):
                result.errors.append(f"Failed to process source {source.name}: {outcome}")
                continue
            result.sources_processed += 1
            result.articles_added += outcome.articles_added
            result.articles_needing_scraping.extend(outcome.articles_needing_scraping)
            result.new_article_ids.extend(outcome.new_article_ids)
            result.errors.extend(outcome.errors)

        console.print(
            f"Fetch complete: {result.articles_added} articles added from "
            f"{result.sources_processed} sources, "
            f"{len(result.articles_needing_scraping)} need scraping"
        )
        return result

    async def fetch_source(self, source: Source) -> SourceFetchResult:
        """Fetch one source; always stamps its last fetch time."""
        result = SourceFetchResult(source_id=source.id, source_name=source.name)
        try:
            feed_url = source.feed_url
            if not feed_url:
                result.errors.append(f"Source {source.name} has no feed_url configured")
                return result

            console.print(f"[dim]Fetching {source.name}...[/dim]")
            feed = await self.reader.read_feed(feed_url, source.needs_decoding)
            if not feed.success:
                console.print(f"[yellow]  {source.name}: {feed.error}[/yellow]")
                result.errors.append(f"Failed to read feed for {source.name}: {feed.error}")
                return result

            result.items_read = feed.item_count
            for item in feed.items:
                if not matches_keywords(item.title, item.description, source.language):
                    continue
                result.items_matched += 1
                await self._store_item(source, item, result)

            console.print(
                f"[dim]  {source.name}: {result.items_read} items, "
                f"{result.items_matched} relevant, {result.articles_added} new[/dim]"
            )
        except Exception as e:
            console.print(f"[red]  Error processing source {source.name}: {e}[/red]")
            result.errors.append(f"Failed to process source {source.name}: {e}")
        finally:
            try:
                await self.sources.mark_fetched(source.id)
            except Exception as e:
                result.errors.append(f"Failed to update last_fetched_at for {source.name}: {e}")
        return result

    async def _store_item(self, source: Source, item: FeedItem, result: SourceFetchResult) -> None:
        slug = generate_slug(item.title)
        if not slug:
            result.errors.append(f'Skipped article "{item.title}": title yields an empty slug')
            return

        try:
            if await self.articles.slug_exists(slug):
                return

            article_id = await self.articles.insert_article(
                build_new_article(item, slug, source.language),
                source_id=source.id,
                original_url=item.link,
            )
            if article_id is None:
                # Inserted by a concurrent source
                return

            result.articles_added += 1
            result.new_article_ids.append(article_id)
            if item.needs_scraping:
                result.articles_needing_scraping.append(article_id)
        except Exception as e:
            result.errors.append(f'Failed to save article "{item.title}": {e}')


class ScrapeStage:
    """Fill missing image, description and author from article pages."""

    def __init__(
        self,
        articles: ArticleStorage,
        scraper: MetadataScraper,
        batch_size: int = DEFAULT_BATCH_SIZE,
        delay: float = SCRAPE_DELAY_SECONDS,
        sleep=asyncio.sleep,
    ) -> None:
        self.articles = articles
        self.scraper = scraper
        self.batch_size = batch_size
        self.delay = delay
        self.sleep = sleep

    async def run(self, article_ids: Sequence[int]) -> ScrapeResult:
        """Scrape ``article_ids`` in concurrent batches."""
        result = ScrapeResult()
        if not article_ids:
            return result

        batches = chunk(article_ids, self.batch_size)
        console.print(f"Scraping metadata for {len(article_ids)} articles in {len(batches)} batches")
        outcomes = await asyncio.gather(
            *(self._scrape_batch(batch) for batch in batches), return_exceptions=True
        )

        for index, outcome in enumerate(outcomes):
            if isinstance(outcome, BaseException):
                result.errors.append(f"Scrape batch {index + 1} failed: {outcome}")
                continue
            result.articles_processed += outcome.articles_processed
            result.articles_updated += outcome.articles_updated
            result.errors.extend(outcome.errors)

        console.print(
            f"Scrape complete: {result.articles_updated}/{result.articles_processed} articles updated"
        )
        return result

    async def _scrape_batch(self, article_ids: List[int]) -> ScrapeResult:
        result = ScrapeResult()
        for index, article_id in enumerate(article_ids):
            try:
                article = await self.articles.get_article(article_id)
                if article is None:
                    result.errors.append(f"Failed to scrape article {article_id}: not found")
                    continue
                result.articles_processed += 1

                if not article.source_url:
                    result.errors.append(f"Failed to scrape article {article_id}: no URL")
                    continue

                metadata = await self.scraper.scrape(article.source_url)
                if not metadata.scraped_successfully:
                    result.errors.append(
                        f"Failed to scrape article {article_id}: {metadata.error_message}"
                    )
                else:
                    updates = merge_scraped_metadata(article, metadata)
                    if updates:
                        await self.articles.update_metadata(article_id, updates)
                        result.articles_updated += 1
            except Exception as e:
                result.errors.append(f"Failed to scrape article {article_id}: {e}")

            if index < len(article_ids) - 1:
                await self.sleep(self.delay)
        return result


class CategorizeStage:
    """Tag and categorize articles with the chat model."""

    def __init__(
        self,
        articles: ArticleStorage,
        categorizer: ArticleCategorizer,
        batch_size: int = DEFAULT_BATCH_SIZE,
        delay: float = CATEGORIZE_DELAY_SECONDS,
        sleep=asyncio.sleep,
    ) -> None:
        self.articles = articles
        self.categorizer = categorizer
        self.batch_size = batch_size
        self.delay = delay
        self.sleep = sleep

    async def run(self, article_ids: Sequence[int]) -> CategorizeResult:
        """Categorize ``article_ids`` in concurrent batches."""
        result = CategorizeResult()
        if not article_ids:
            return result

        batches = chunk(article_ids, self.batch_size)
        console.print(f"Categorizing {len(article_ids)} articles in {len(batches)} batches")
        outcomes = await asyncio.gather(
            *(self._categorize_batch(batch) for batch in batches), return_exceptions=True
        )

        for index, outcome in enumerate(outcomes):
            if isinstance(outcome, BaseException):
                result.errors.append(f"Categorize batch {index + 1} failed: {outcome}")
                continue
            result.articles_processed += outcome.articles_processed
            result.articles_categorized += outcome.articles_categorized
            result.batches_stopped += outcome.batches_stopped
            result.errors.extend(outcome.errors)

        console.print(
            f"Categorization complete: {result.articles_categorized}/"
            f"{result.articles_processed} articles categorized"
        )
        return result

    async def _categorize_batch(self, article_ids: List[int]) -> CategorizeResult:
        result = CategorizeResult()
        for index, article_id in enumerate(article_ids):
            try:
                article = await self.articles.get_article(article_id)
                if article is None:
                    result.errors.append(f"Failed to categorize article {article_id}: not found")
                    continue
                result.articles_processed += 1

                outcome = await self.categorizer.categorize(
                    CategorizationInput(
                        title=article.title,
                        summary=article.summary or "",
                        content=(article.content or "")[:CATEGORIZE_CONTENT_CHARS],
                        language=article.language or "en",
                    )
                )
                if outcome.success:
                    await self.articles.update_categorization(
                        article_id, outcome.tags, outcome.category
                    )
                    result.articles_categorized += 1
                elif outcome.rate_limited:
                    console.print(f"[yellow]  Rate limit hit at article {article_id}, stopping batch[/yellow]")
                    result.errors.append(
                        f"Rate limit exceeded at article {article_id}. "
                        "Remaining articles will retry next run."
                    )
                    result.batches_stopped += 1
                    break
                else:
                    result.errors.append(
                        f"Failed to categorize article {article_id}: {outcome.error}"
                    )
            except Exception as e:
                result.errors.append(f"Failed to categorize article {article_id}: {e}")

            if index < len(article_ids) - 1:
                await self.sleep(self.delay)
        return result
