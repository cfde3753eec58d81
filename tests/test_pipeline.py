"""End-to-end tests for the pipeline stages and orchestrator."""

import httpx
import pytest
from fakes import FakeOpenAIClient, FakeSourceManager, make_source, rate_limit_error

from antnews.config import PipelineConfig
from antnews.dedup import DuplicateDetector
from antnews.enrichment import ArticleCategorizer, EmbeddingGenerator
from antnews.ingestion import DecoderClient, MetadataScraper, RSSFetcher, ScrapedMetadata
from antnews.models import ArticleCategory
from antnews.pipeline import (
    CategorizeStage,
    FetchStage,
    PipelineOrchestrator,
    ScrapeStage,
    merge_scraped_metadata,
)

FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"><channel><title>Insects</title>
<item>
  <title>Ants invade garden</title>
  <link>https://news.example.com/ants-garden</link>
  <description>Gardeners report a new colony.</description>
  <pubDate>Mon, 02 Jun 2025 08:00:00 GMT</pubDate>
</item>
<item>
  <title>Beetles are back</title>
  <link>https://news.example.com/beetles</link>
  <description>A good year for beetles.</description>
</item>
<item>
  <title>Why fire ants raft</title>
  <link>https://news.example.com/fire-ants</link>
  <description>Rafts survive floods.</description>
</item>
</channel></rss>
"""

PAGE = """<html><head>
<meta property="og:image" content="https://news.example.com/cover.jpg">
<meta property="og:description" content="Scraped description">
<meta name="author" content="Scraped Author">
</head></html>"""


def transport() -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith(".xml"):
            return httpx.Response(200, text=FEED)
        return httpx.Response(200, text=PAGE)

    return httpx.MockTransport(handler)


def build(articles, duplicates, sleep, sources=None, chat=None, decoder=None) -> PipelineOrchestrator:
    sources = sources or FakeSourceManager([make_source()])
    client = FakeOpenAIClient(embed=lambda text: [1.0, 0.0, 0.0], chat=chat)
    embeddings = EmbeddingGenerator(client, dimensions=3, sleep=sleep)
    return PipelineOrchestrator(
        fetch=FetchStage(sources, articles, RSSFetcher(transport=transport())),
        scrape=ScrapeStage(articles, MetadataScraper(transport=transport()), sleep=sleep),
        categorize=CategorizeStage(articles, ArticleCategorizer(client, sleep=sleep), sleep=sleep),
        detector=DuplicateDetector(articles, duplicates, embeddings, sleep=sleep),
        decoder=decoder,
        settings=PipelineConfig(lookback_days=0),
        show_summary=False,
    )


async def test_fetch_adds_only_matching_items(articles, duplicates, sleep):
    sources = FakeSourceManager([make_source()])
    orchestrator = build(articles, duplicates, sleep, sources=sources)

    result = await orchestrator.fetch_stage.run()

    assert result.articles_added == 2
    assert sorted(result.articles_needing_scraping) == sorted(result.new_article_ids)
    assert {a.slug for a in articles.articles.values()} == {"ants-invade-garden", "why-fire-ants-raft"}
    assert sources.fetched == [1]

    stored = articles.articles[result.new_article_ids[0]]
    assert stored.source_name == "news.example.com"
    assert stored.summary == "Gardeners report a new colony."
    assert stored.content == "Gardeners report a new colony."
    assert stored.published_at.year == 2025
    assert stored.tags == [] and stored.category is None
    assert articles.links[0][1:] == (1, "https://news.example.com/ants-garden")


async def test_same_titles_fetched_twice_are_inserted_once(articles, duplicates, sleep):
    orchestrator = build(articles, duplicates, sleep)

    await orchestrator.fetch_stage.run()
    second = await orchestrator.fetch_stage.run()

    assert second.articles_added == 0
    assert len(articles.articles) == 2


async def test_full_run(articles, duplicates, sleep):
    orchestrator = build(articles, duplicates, sleep)

    result = await orchestrator.run()

    assert result.success
    assert result.articles_added == 2
    assert result.sources_processed == 1
    assert len(result.articles_needing_scraping) == 2
    assert result.scrape.articles_updated == 2
    assert result.categorize.articles_categorized == 2
    # both articles embed to the same vector
    assert result.duplicates.duplicate_records_created == 1
    assert result.errors == []

    for article in articles.articles.values():
        assert article.image_url == "https://news.example.com/cover.jpg"
        assert article.author == "Scraped Author"
        assert article.summary != "Scraped description"  # feed description kept
        assert article.category == ArticleCategory.NEWS
        assert article.tags == ["ants"]


async def test_source_query_failure_aborts_run(articles, duplicates, sleep):
    orchestrator = build(articles, duplicates, sleep, sources=FakeSourceManager(fail=True))

    result = await orchestrator.run()

    assert not result.success
    assert result.articles_added == 0
    assert "Failed to fetch articles" in result.errors[0]


async def test_one_failing_source_does_not_block_others(articles, duplicates, sleep):
    sources = FakeSourceManager([
        make_source(1, "Broken", feed_url=None),
        make_source(2, "Working"),
    ])
    orchestrator = build(articles, duplicates, sleep, sources=sources)

    result = await orchestrator.fetch_stage.run()

    assert result.articles_added == 2
    assert sorted(sources.fetched) == [1, 2]
    assert any("Broken" in error for error in result.errors)


async def test_categorize_rate_limit_stops_batch(articles, duplicates, sleep):
    first = articles.add("Ants one", summary="a")
    second = articles.add("Ants two", summary="b")

    def chat(messages):
        raise rate_limit_error()

    orchestrator = build(articles, duplicates, sleep, chat=chat)
    result = await orchestrator.categorize_stage.run([first.id, second.id])

    assert result.articles_processed == 1
    assert result.articles_categorized == 0
    assert result.batches_stopped == 1
    assert result.errors == [
        f"Rate limit exceeded at article {first.id}. Remaining articles will retry next run."
    ]
    assert articles.articles[second.id].category is None


async def test_scrape_never_overwrites_existing_author(articles, duplicates, sleep):
    article = articles.add("Ants", author="Original Author", summary="Kept summary")
    orchestrator = build(articles, duplicates, sleep)

    result = await orchestrator.scrape_stage.run([article.id])

    stored = articles.articles[article.id]
    assert result.articles_updated == 1
    assert stored.author == "Original Author"
    assert stored.summary == "Kept summary"
    assert stored.content == "Scraped description"
    assert stored.image_url == "https://news.example.com/cover.jpg"


async def test_scrape_pacing_skips_last_page(articles, duplicates, sleep):
    ids = [articles.add(f"Ants {i}").id for i in range(3)]
    orchestrator = build(articles, duplicates, sleep)

    await orchestrator.scrape_stage.run(ids)

    assert sleep.delays == [0.5, 0.5]


def test_merge_writes_nothing_when_complete(articles):
    article = articles.add(
        "Ants", image_url="https://x/i.jpg", summary="s", content="c", author="a"
    )
    metadata = ScrapedMetadata(
        og_image="https://y/i.jpg", og_description="d", author="b", scraped_successfully=True
    )
    assert merge_scraped_metadata(article, metadata) == {}


def test_merge_truncates_long_author(articles):
    article = articles.add("Ants", image_url=None, author=None)
    metadata = ScrapedMetadata(
        og_image="https://y/i.jpg", author="x" * 300, scraped_successfully=True
    )

    updates = merge_scraped_metadata(article, metadata)

    assert updates["image_url"] == "https://y/i.jpg"
    assert len(updates["author"]) == 200


async def failing(*args, **kwargs):
    raise RuntimeError("stage down")


@pytest.mark.parametrize(
    "component, method, message",
    [
        ("detector", "detect", "Duplicate detection failed: stage down"),
        ("scrape_stage", "run", "Scrape stage failed: stage down"),
        ("categorize_stage", "run", "Categorize stage failed: stage down"),
    ],
)
async def test_stage_failure_after_fetch_keeps_run_successful(
    articles, duplicates, sleep, component, method, message
):
    orchestrator = build(articles, duplicates, sleep)
    setattr(getattr(orchestrator, component), method, failing)

    result = await orchestrator.run()

    assert result.success
    assert result.articles_added == 2
    assert message in result.errors


class BrokenDecoder:
    async def wake(self):
        raise RuntimeError("no route")


async def test_decoder_wake_failure_does_not_block_run(articles, duplicates, sleep):
    """A raising wake call is logged and the run carries on."""
    orchestrator = build(articles, duplicates, sleep, decoder=BrokenDecoder())

    result = await orchestrator.run()

    assert result.success
    assert result.articles_added == 2


async def test_unreachable_decoder_wake_does_not_block_run(articles, duplicates, sleep):
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    decoder = DecoderClient(base_url="https://decoder.test/", transport=httpx.MockTransport(refuse))
    orchestrator = build(articles, duplicates, sleep, decoder=decoder)

    result = await orchestrator.run()

    assert result.success
    assert result.errors == []


async def test_categorize_rate_limit_stops_only_its_batch(articles, duplicates, sleep):
    ids = [articles.add(f"Ants {i}", summary="s").id for i in range(4)]

    def chat(messages):
        if "Title: Ants 0" in messages[-1]["content"]:
            raise rate_limit_error()
        return '{"tags": ["ants"], "category": "news"}'

    orchestrator = build(articles, duplicates, sleep, chat=chat)
    orchestrator.categorize_stage.batch_size = 2

    result = await orchestrator.categorize_stage.run(ids)

    assert result.batches_stopped == 1
    assert result.articles_processed == 3
    assert result.articles_categorized == 2
    assert articles.articles[ids[1]].category is None
    assert articles.articles[ids[2]].category == ArticleCategory.NEWS
    assert articles.articles[ids[3]].category == ArticleCategory.NEWS
