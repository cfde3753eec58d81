"""Tests for the backfill jobs."""

from datetime import datetime, timedelta, timezone

from fakes import FakeOpenAIClient, rate_limit_error

from antnews.dedup import DuplicateDetector
from antnews.enrichment import ArticleCategorizer, EmbeddingGenerator
from antnews.models import ArticleCategory
from antnews.pipeline import BackfillRunner, CategorizeStage


def make_runner(articles, duplicates, sleep, embed=None) -> BackfillRunner:
    client = FakeOpenAIClient(embed=embed or (lambda text: [1.0, 0.0, 0.0]))
    embeddings = EmbeddingGenerator(client, dimensions=3, sleep=sleep)
    return BackfillRunner(
        articles=articles,
        embeddings=embeddings,
        detector=DuplicateDetector(articles, duplicates, embeddings, sleep=sleep),
        categorize=CategorizeStage(articles, ArticleCategorizer(client, sleep=sleep), sleep=sleep),
        sleep=sleep,
    )


async def test_backfill_embeddings_newest_first_and_detects(articles, duplicates, sleep):
    now = datetime.now(timezone.utc)
    older = articles.add("Older", published_at=now - timedelta(days=400))
    newer = articles.add("Newer", published_at=now - timedelta(days=1))
    runner = make_runner(articles, duplicates, sleep)

    result = await runner.backfill_embeddings(limit=10)

    inputs = [c["input"] for c in runner.embeddings.client.embedding_calls]
    assert inputs[0].startswith("Newer")
    assert result.articles_updated == 2
    # pause between the two calls only; detection reuses stored embeddings
    assert sleep.delays == [5.0]
    assert result.duplicates.duplicate_records_created == 1
    assert duplicates.relations[0].canonical_article_id == older.id
    assert duplicates.relations[0].duplicate_article_id == newer.id


async def test_backfill_embeddings_respects_limit_and_no_detect(articles, duplicates, sleep):
    for i in range(3):
        articles.add(f"Article {i}")
    runner = make_runner(articles, duplicates, sleep)

    result = await runner.backfill_embeddings(limit=2, detect_duplicates=False)

    assert result.articles_processed == 2
    assert result.duplicates is None
    assert len(articles.embeddings) == 2


async def test_backfill_embeddings_stops_on_rate_limit(articles, duplicates, sleep):
    articles.add("A")
    articles.add("B")

    def embed(text):
        raise rate_limit_error()

    result = await make_runner(articles, duplicates, sleep, embed=embed).backfill_embeddings()

    assert result.stopped_early
    assert result.articles_processed == 1
    assert result.duplicates is None


async def test_backfill_categorization(articles, duplicates, sleep):
    articles.add("Ants tagged", tags=["ants"], category=ArticleCategory.CARE)
    pending = articles.add("Ants untagged")
    runner = make_runner(articles, duplicates, sleep)

    result = await runner.backfill_categorization(limit=50)

    assert result.articles_found == 1
    assert result.categorize.articles_categorized == 1
    assert articles.articles[pending.id].category == ArticleCategory.NEWS


async def test_backfill_categorization_with_nothing_pending(articles, duplicates, sleep):
    result = await make_runner(articles, duplicates, sleep).backfill_categorization()

    assert result.articles_found == 0
    assert result.categorize is None
