"""Result models for duplicate detection."""

from typing import List

from pydantic import BaseModel, Field


class DuplicateDetectionResult(BaseModel):
    """Outcome of one detection batch."""

    success: bool = Field(True, description="Batch ran; item errors are listed separately")
    articles_processed: int = Field(0, description="Candidates that completed a similarity search")
    duplicates_found: int = Field(0, description="Pairs under the distance threshold, new or not")
    duplicate_records_created: int = Field(0, description="Relations inserted by this batch")
    stopped_early: bool = Field(False, description="Batch halted on an embedding rate limit")
    errors: List[str] = Field(default_factory=list, description="Per-article error messages")
