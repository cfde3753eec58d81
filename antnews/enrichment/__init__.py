"""AI enrichment: embeddings and categorization."""

from .categorizer import ArticleCategorizer, normalize_category, normalize_tags
from .client import call_with_rate_limit_retry, create_client
from .embeddings import EmbeddingGenerator
from .models import (
    CategorizationInput,
    CategorizationResult,
    EmbeddingResult,
    EnrichmentErrorKind,
)

__all__ = [
    "ArticleCategorizer",
    "CategorizationInput",
    "CategorizationResult",
    "EmbeddingGenerator",
    "EmbeddingResult",
    "EnrichmentErrorKind",
    "call_with_rate_limit_retry",
    "create_client",
    "normalize_category",
    "normalize_tags",
]
