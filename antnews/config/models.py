"""Configuration models."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class PostgresConfig(BaseModel):
    """Postgres configuration."""

    host: str = Field("localhost", description="Database host")
    port: int = Field(5432, description="Database port")
    database: str = Field("antnews", description="Database name")
    user: str = Field("antnews", description="Database user")
    password: Optional[str] = Field(None, description="Database password")
    password_env: Optional[str] = Field(
        "ANTNEWS_DB_PASSWORD", description="Environment variable for password"
    )
    min_size: int = Field(1, description="Minimum pool size", ge=1)
    max_size: int = Field(10, description="Maximum pool size", ge=1)


class OpenRouterConfig(BaseModel):
    """OpenAI-compatible API used for embeddings and categorization."""

    base_url: str = Field("https://openrouter.ai/api/v1", description="API base URL")
    api_key_env: Optional[str] = Field(
        "OPENROUTER_API_KEY", description="Environment variable for API key"
    )
    api_key: Optional[str] = Field(None, description="API key (prefer api_key_env)")
    embedding_model: str = Field("openai/text-embedding-3-small")
    embedding_dimensions: int = Field(1536, ge=1)
    categorization_model: str = Field("mistralai/mistral-7b-instruct:free")
    referer: str = Field("https://news.antkeeper.com", description="HTTP-Referer header")
    app_title: str = Field("Antkeeper News", description="X-Title header")
    timeout_seconds: float = Field(30.0, gt=0)
    max_retries: int = Field(2, ge=0, description="Retries after a 429 response")
    retry_base_delay_seconds: float = Field(5.0, ge=0)


class DecoderConfig(BaseModel):
    """Link-decoder service configuration."""

    base_url: str = Field(
        "https://news-decoder-api-production.up.railway.app",
        description="Decoder service base URL",
    )
    decode_timeout_seconds: float = Field(120.0, gt=0)
    wake_timeout_seconds: float = Field(30.0, gt=0)


class ScraperConfig(BaseModel):
    """Open Graph metadata scraper configuration."""

    timeout_seconds: float = Field(10.0, gt=0)
    user_agent: str = Field("AntkeeperNews/1.0 (RSS aggregator; +https://news.antkeeper.com)")
    delay_seconds: float = Field(0.5, ge=0, description="Pause between page fetches")


class PipelineConfig(BaseModel):
    """Ingestion pipeline tuning."""

    batch_size: int = Field(50, ge=1)
    categorize_delay_seconds: float = Field(0.1, ge=0)
    embedding_delay_seconds: float = Field(5.0, ge=0)
    lookback_days: int = Field(90, ge=0, description="0 means unlimited")
    similarity_threshold: float = Field(0.75, ge=0.0, le=1.0)
    neighbor_limit: int = Field(10, ge=1)
    feed_timeout_seconds: float = Field(60.0, gt=0)
    max_concurrent_sources: int = Field(5, ge=1)


class TriggerConfig(BaseModel):
    """On-demand trigger endpoint configuration."""

    secret_env: str = Field("CRON_SECRET", description="Environment variable for bearer secret")
    host: str = Field("127.0.0.1")
    port: int = Field(8000)


class ConfigModel(BaseModel):
    """Main configuration model."""

    postgres: PostgresConfig = Field(default_factory=PostgresConfig)
    openrouter: OpenRouterConfig = Field(default_factory=OpenRouterConfig)
    decoder: DecoderConfig = Field(default_factory=DecoderConfig)
    scraper: ScraperConfig = Field(default_factory=ScraperConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    trigger: TriggerConfig = Field(default_factory=TriggerConfig)


class SourceFeedConfig(BaseModel):
    """Opaque per-source configuration blob."""

    feed_url: Optional[str] = Field(None, description="Feed URL to poll")
    needs_decoding: bool = Field(False, description="Item links must go through the decoder")


class SourceConfig(BaseModel):
    """Source configuration from sources.yaml."""

    name: str = Field(..., description="Source name")
    type: str = Field("rss", description="Source kind")
    url: Optional[str] = Field(None, description="Origin site URL")
    language: str = Field("en", description="Language code")
    fetch_interval_minutes: int = Field(60, ge=1)
    is_active: bool = Field(True, description="Whether source is polled")
    config: SourceFeedConfig = Field(default_factory=SourceFeedConfig)

    @field_validator("language")
    @classmethod
    def validate_language(cls, v: str) -> str:
        """Language codes are stored lowercase and fit the 5-char column."""
        v = v.strip().lower()
        if not v or len(v) > 5:
            raise ValueError(f"Invalid language code: {v!r}")
        return v
