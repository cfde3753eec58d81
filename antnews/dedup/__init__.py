"""Embedding-based duplicate detection."""

from .detector import DuplicateDetector, canonical_pair, embedding_text
from .models import DuplicateDetectionResult

__all__ = ["DuplicateDetectionResult", "DuplicateDetector", "canonical_pair", "embedding_text"]
