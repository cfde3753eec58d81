"""Tests for embedding-based duplicate detection."""

from datetime import datetime, timedelta, timezone

import pytest
from fakes import FakeOpenAIClient, rate_limit_error

from antnews.dedup import DuplicateDetector, canonical_pair, embedding_text
from antnews.enrichment import EmbeddingGenerator


def make_detector(articles, duplicates, sleep, embed=None) -> DuplicateDetector:
    client = FakeOpenAIClient(embed=embed)
    embeddings = EmbeddingGenerator(client, dimensions=3, sleep=sleep)
    return DuplicateDetector(articles, duplicates, embeddings, sleep=sleep)


def recent(days: int = 1) -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=days)


def test_canonical_pair_puts_lower_id_first():
    assert canonical_pair(7, 3) == (3, 7)
    assert canonical_pair(3, 7) == (3, 7)


async def test_identical_embeddings_create_one_relation(articles, duplicates, sleep):
    first = articles.add("Ants found on Mars", embedding=[1.0, 0.0, 0.0], published_at=recent())
    second = articles.add("Mars ants discovered", embedding=[1.0, 0.0, 0.0], published_at=recent())
    detector = make_detector(articles, duplicates, sleep)

    result = await detector.detect([second.id])

    assert result.success
    assert result.articles_processed == 1
    assert result.duplicates_found == 1
    assert result.duplicate_records_created == 1
    relation = duplicates.relations[0]
    assert relation.canonical_article_id == first.id
    assert relation.duplicate_article_id == second.id
    assert relation.similarity_score == pytest.approx(1.0)


async def test_detection_is_idempotent(articles, duplicates, sleep):
    first = articles.add("A", embedding=[1.0, 0.0, 0.0], published_at=recent())
    second = articles.add("B", embedding=[1.0, 0.0, 0.0], published_at=recent())
    detector = make_detector(articles, duplicates, sleep)

    await detector.detect([first.id, second.id])
    again = await detector.detect([first.id, second.id])

    assert len(duplicates.relations) == 1
    assert again.duplicates_found == 2
    assert again.duplicate_records_created == 0


async def test_dissimilar_articles_are_not_duplicates(articles, duplicates, sleep):
    articles.add("A", embedding=[1.0, 0.0, 0.0], published_at=recent())
    second = articles.add("B", embedding=[0.0, 1.0, 0.0], published_at=recent())

    result = await make_detector(articles, duplicates, sleep).detect([second.id])

    assert result.duplicates_found == 0
    assert duplicates.relations == []


async def test_lookback_excludes_old_articles(articles, duplicates, sleep):
    articles.add("Old", embedding=[1.0, 0.0, 0.0], published_at=recent(days=200))
    new = articles.add("New", embedding=[1.0, 0.0, 0.0], published_at=recent())
    detector = make_detector(articles, duplicates, sleep)

    bounded = await detector.detect([new.id], lookback_days=30)
    assert bounded.duplicates_found == 0

    unlimited = await detector.detect([new.id], lookback_days=0)
    assert unlimited.duplicate_records_created == 1


async def test_missing_embeddings_are_generated_and_paced(articles, duplicates, sleep):
    existing = articles.add("Reused", embedding=[0.0, 0.0, 1.0], published_at=recent())
    a = articles.add("Ants a", summary="one", published_at=recent())
    b = articles.add("Ants b", summary="two", published_at=recent())
    detector = make_detector(articles, duplicates, sleep, embed=lambda text: [1.0, 0.0, 0.0])

    result = await detector.detect([existing.id, a.id, b.id])

    assert a.id in articles.embeddings and b.id in articles.embeddings
    assert result.articles_processed == 3
    assert result.duplicate_records_created == 1
    # one pause between the two embedding calls, none for the reused embedding or after the last
    assert sleep.delays == [5.0]
    calls = detector.embeddings.client.embedding_calls
    assert [c["input"] for c in calls] == [embedding_text(a), embedding_text(b)]


async def test_rate_limit_stops_batch(articles, duplicates, sleep):
    a = articles.add("A", published_at=recent())
    b = articles.add("B", published_at=recent())

    def embed(text):
        raise rate_limit_error()

    detector = make_detector(articles, duplicates, sleep, embed=embed)
    result = await detector.detect([a.id, b.id])

    assert result.stopped_early
    assert result.articles_processed == 0
    assert len(detector.embeddings.client.embedding_calls) == 3  # only the first article
    assert len(result.errors) == 1


async def test_invalid_threshold_is_rejected(articles, duplicates, sleep):
    detector = make_detector(articles, duplicates, sleep)
    with pytest.raises(ValueError):
        await detector.detect([1], similarity_threshold=1.5)
    with pytest.raises(ValueError):
        await detector.detect([1], lookback_days=-1)
