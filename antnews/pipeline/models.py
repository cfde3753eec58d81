"""Result models for pipeline stages."""

from typing import List, Optional

from pydantic import BaseModel, Field

from ..dedup import DuplicateDetectionResult


class SourceFetchResult(BaseModel):
    """Outcome of fetching one source."""

    source_id: int
    source_name: str
    items_read: int = 0
    items_matched: int = 0
    articles_added: int = 0
    articles_needing_scraping: List[int] = Field(default_factory=list)
    new_article_ids: List[int] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)


class FetchResult(BaseModel):
    """Aggregate FETCH stage outcome."""

    success: bool = True
    sources_processed: int = 0
    articles_added: int = 0
    articles_needing_scraping: List[int] = Field(default_factory=list)
    new_article_ids: List[int] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)


class ScrapeResult(BaseModel):
    """Aggregate SCRAPE stage outcome."""

    success: bool = True
    articles_processed: int = 0
    articles_updated: int = 0
    errors: List[str] = Field(default_factory=list)


class CategorizeResult(BaseModel):
    """Aggregate CATEGORIZE stage outcome."""

    success: bool = True
    articles_processed: int = 0
    articles_categorized: int = 0
    batches_stopped: int = Field(0, description="Batches cut short by a rate limit")
    errors: List[str] = Field(default_factory=list)


class OrchestrationResult(BaseModel):
    """Outcome of a full pipeline run."""

    success: bool
    message: str = ""
    sources_processed: int = 0
    articles_added: int = 0
    articles_needing_scraping: List[int] = Field(default_factory=list)
    fetch: Optional[FetchResult] = None
    scrape: Optional[ScrapeResult] = None
    categorize: Optional[CategorizeResult] = None
    duplicates: Optional[DuplicateDetectionResult] = None
    errors: List[str] = Field(default_factory=list)


class BackfillEmbeddingsResult(BaseModel):
    """Outcome of embedding articles that never got one."""

    success: bool = True
    articles_processed: int = 0
    articles_updated: int = 0
    stopped_early: bool = False
    errors: List[str] = Field(default_factory=list)
    duplicates: Optional[DuplicateDetectionResult] = None


class BackfillCategorizationResult(BaseModel):
    """Outcome of categorizing articles left uncategorized."""

    success: bool = True
    message: str = ""
    articles_found: int = 0
    categorize: Optional[CategorizeResult] = None
