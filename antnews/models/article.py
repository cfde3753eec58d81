"""Article models for ingested news items."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from .base import DBModel


class ArticleCategory(str, Enum):
    """Fixed set of article categories."""

    RESEARCH = "research"
    CARE = "care"
    CONSERVATION = "conservation"
    BEHAVIOR = "behavior"
    ECOLOGY = "ecology"
    COMMUNITY = "community"
    NEWS = "news"
    OFF_TOPIC = "off-topic"


class Article(DBModel):
    """Article model."""

    title: str = Field(..., description="Article title")
    slug: str = Field(..., description="Unique URL-safe slug", max_length=500)
    content: Optional[str] = Field(None, description="Full text content")
    summary: Optional[str] = Field(None, description="Short summary")
    source_name: Optional[str] = Field(None, description="Host the article was published on")
    source_url: Optional[str] = Field(None, description="Article URL")
    author: Optional[str] = Field(None, description="Author")
    published_at: Optional[datetime] = Field(None, description="Feed-provided publication time")
    scraped_at: Optional[datetime] = Field(None, description="Ingestion time")
    language: str = Field("en", description="Language code", max_length=5)
    image_url: Optional[str] = Field(None, description="Image URL")
    tags: List[str] = Field(default_factory=list, description="Lowercase tags")
    category: Optional[ArticleCategory] = Field(None, description="Category once categorized")
    view_count: int = Field(0, description="Externally incremented view counter")
    has_embedding: bool = Field(False, description="Whether an embedding is stored")


class NewArticle(DBModel):
    """Values for a raw article insert."""

    title: str
    slug: str
    content: str = ""
    summary: str = ""
    source_name: Optional[str] = None
    source_url: str
    author: Optional[str] = None
    published_at: Optional[datetime] = None
    language: str = "en"
    image_url: Optional[str] = None


class ArticleDuplicate(DBModel):
    """Recorded near-duplicate relationship between two articles."""

    canonical_article_id: int = Field(..., description="Lower id of the pair")
    duplicate_article_id: int = Field(..., description="Higher id of the pair")
    similarity_score: float = Field(..., ge=0.0, le=1.0)
    merged_at: Optional[datetime] = Field(None, description="Creation timestamp")


class SimilarArticle(DBModel):
    """Nearest-neighbour search hit."""

    title: str = ""
    distance: float = Field(..., description="Cosine distance, lower is closer")
