"""Feed ingestion, relevance filtering and metadata scraping."""

from .dates import parse_pub_date
from .decoder import DecoderClient
from .keyword_filter import matches_keywords
from .metadata_scraper import MetadataScraper, parse_metadata
from .models import FeedItem, FeedResult, ScrapedMetadata
from .rss_fetcher import RSSFetcher
from .slug import generate_slug

__all__ = [
    "DecoderClient",
    "FeedItem",
    "FeedResult",
    "MetadataScraper",
    "RSSFetcher",
    "ScrapedMetadata",
    "generate_slug",
    "matches_keywords",
    "parse_pub_date",
    "parse_metadata",
]
