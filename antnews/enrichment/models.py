"""Result models for AI enrichment calls."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from ..models import ArticleCategory


class EnrichmentErrorKind(str, Enum):
    """Why an enrichment call failed."""

    CONFIGURATION = "configuration"
    EMPTY_INPUT = "empty_input"
    RATE_LIMITED = "rate_limited"
    TIMEOUT = "timeout"
    HTTP_STATUS = "http_status"
    INVALID_RESPONSE = "invalid_response"
    NETWORK = "network"


class EnrichmentResult(BaseModel):
    """Common success/failure envelope."""

    success: bool = Field(..., description="Whether the call produced a usable value")
    error: Optional[str] = Field(None, description="Human-readable failure reason")
    error_kind: Optional[EnrichmentErrorKind] = Field(None, description="Failure type")

    @property
    def rate_limited(self) -> bool:
        """Whether the failure was a rate limit that survived all retries."""
        return self.error_kind == EnrichmentErrorKind.RATE_LIMITED


class EmbeddingResult(EnrichmentResult):
    """Embedding vector or failure."""

    embedding: Optional[List[float]] = Field(None, description="Embedding vector")


class CategorizationResult(EnrichmentResult):
    """Tags and category or failure."""

    tags: List[str] = Field(default_factory=list, description="Normalized tags")
    category: Optional[ArticleCategory] = Field(None, description="Normalized category")


class CategorizationInput(BaseModel):
    """Article fields sent to the categorization model."""

    title: str
    summary: str = ""
    content: str = ""
    language: str = "en"
