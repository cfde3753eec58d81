"""Data models for ingestion."""

from typing import Optional

from pydantic import BaseModel, Field


class FeedItem(BaseModel):
    """Normalized feed item."""

    title: str = Field(..., description="Article title")
    description: str = Field("", description="Plain-text description")
    link: str = Field(..., description="Article URL")
    pub_date: Optional[str] = Field(None, description="Publication date as given by the feed")
    author: Optional[str] = Field(None, description="Author")
    content: Optional[str] = Field(None, description="Full content if the feed carries it")
    image_url: Optional[str] = Field(None, description="Best-effort image URL")

    @property
    def needs_scraping(self) -> bool:
        """Whether metadata scraping could fill missing fields."""
        return not self.image_url or not self.description or not self.author


class FeedResult(BaseModel):
    """Result of reading one feed."""

    feed_url: str = Field(..., description="Feed URL")
    success: bool = Field(..., description="Whether the feed was read")
    items: list[FeedItem] = Field(default_factory=list, description="Normalized items")
    error: Optional[str] = Field(None, description="Error message if failed")

    @property
    def item_count(self) -> int:
        """Number of items read."""
        return len(self.items)


class ScrapedMetadata(BaseModel):
    """Open Graph metadata scraped from an article page."""

    og_image: Optional[str] = Field(None, description="og:image content")
    og_description: Optional[str] = Field(None, description="og:description content")
    author: Optional[str] = Field(None, description="author / article:author content")
    scraped_successfully: bool = Field(..., description="Whether the page was fetched and parsed")
    error_message: Optional[str] = Field(None, description="HTTP status, timeout or other reason")
