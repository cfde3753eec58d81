"""Build pipeline components from configuration."""

from psycopg_pool import AsyncConnectionPool

from ..config import Config
from ..db import ArticleStorage, DuplicateStorage, SourceManager
from ..dedup import DuplicateDetector
from ..enrichment import ArticleCategorizer, EmbeddingGenerator, create_client
from ..ingestion import DecoderClient, MetadataScraper, RSSFetcher
from .backfill import BackfillRunner
from .orchestrator import PipelineOrchestrator
from .stages import CategorizeStage, FetchStage, ScrapeStage


def build_orchestrator(
    config: Config,
    pool: AsyncConnectionPool,
    show_summary: bool = True,
) -> PipelineOrchestrator:
    """Wire storage, clients and stages for a pool."""
    settings = config.config
    pipeline = settings.pipeline
    openrouter = settings.openrouter

    articles = ArticleStorage(pool)
    sources = SourceManager(pool)
    duplicates = DuplicateStorage(pool)

    decoder = DecoderClient(
        base_url=settings.decoder.base_url,
        decode_timeout=settings.decoder.decode_timeout_seconds,
        wake_timeout=settings.decoder.wake_timeout_seconds,
    )
    reader = RSSFetcher(decoder=decoder, timeout=pipeline.feed_timeout_seconds)
    scraper = MetadataScraper(
        timeout=settings.scraper.timeout_seconds,
        user_agent=settings.scraper.user_agent,
    )

    client = create_client(config)
    embeddings = EmbeddingGenerator(
        client,
        model=openrouter.embedding_model,
        dimensions=openrouter.embedding_dimensions,
        max_retries=openrouter.max_retries,
        retry_base_delay=openrouter.retry_base_delay_seconds,
    )
    categorizer = ArticleCategorizer(
        client,
        model=openrouter.categorization_model,
        max_retries=openrouter.max_retries,
        retry_base_delay=openrouter.retry_base_delay_seconds,
    )

    return PipelineOrchestrator(
        fetch=FetchStage(
            sources,
            articles,
            reader,
            max_concurrent_sources=pipeline.max_concurrent_sources,
        ),
        scrape=ScrapeStage(
            articles,
            scraper,
            batch_size=pipeline.batch_size,
            delay=settings.scraper.delay_seconds,
        ),
        categorize=CategorizeStage(
            articles,
            categorizer,
            batch_size=pipeline.batch_size,
            delay=pipeline.categorize_delay_seconds,
        ),
        detector=DuplicateDetector(
            articles,
            duplicates,
            embeddings,
            neighbor_limit=pipeline.neighbor_limit,
            embedding_delay=pipeline.embedding_delay_seconds,
        ),
        decoder=decoder,
        settings=pipeline,
        show_summary=show_summary,
    )


def build_backfill_runner(orchestrator: PipelineOrchestrator) -> BackfillRunner:
    """Backfill jobs sharing the orchestrator's storage and clients."""
    detector = orchestrator.detector
    return BackfillRunner(
        articles=detector.articles,
        embeddings=detector.embeddings,
        detector=detector,
        categorize=orchestrator.categorize_stage,
        embedding_delay=detector.embedding_delay,
        sleep=detector.sleep,
    )
