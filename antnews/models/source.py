"""Source model for configured feeds."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import Field

from .base import DBModel


class Source(DBModel):
    """Feed source model."""

    name: str = Field(..., description="Source name")
    type: Optional[str] = Field("rss", description="Source kind")
    url: Optional[str] = Field(None, description="Origin URL")
    language: str = Field("fr", description="Language code")
    last_fetched_at: Optional[datetime] = Field(None, description="Last fetch attempt")
    fetch_interval_minutes: int = Field(60, description="Advisory fetch interval")
    is_active: bool = Field(True, description="Whether the source is polled")
    config: Optional[Dict[str, Any]] = Field(None, description="Opaque source configuration")

    @property
    def feed_url(self) -> Optional[str]:
        """Feed URL from the configuration blob."""
        return (self.config or {}).get("feed_url")

    @property
    def needs_decoding(self) -> bool:
        """Whether item links must be resolved through the decoder."""
        return bool((self.config or {}).get("needs_decoding", False))
