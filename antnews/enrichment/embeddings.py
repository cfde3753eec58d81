"""Embedding generation for duplicate detection."""

import asyncio
from typing import Any, Optional

import openai
from rich.console import Console

from .client import Sleep, call_with_rate_limit_retry, describe_api_error
from .models import EmbeddingResult, EnrichmentErrorKind

console = Console()

DEFAULT_EMBEDDING_MODEL = "openai/text-embedding-3-small"
EMBEDDING_DIMENSIONS = 1536


class EmbeddingGenerator:
    """Turn text into a fixed-length vector via the embeddings endpoint."""

    def __init__(
        self,
        client: Optional[Any],
        model: str = DEFAULT_EMBEDDING_MODEL,
        dimensions: int = EMBEDDING_DIMENSIONS,
        max_retries: int = 2,
        retry_base_delay: float = 5.0,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """
        Initialize embedding generator.

        Args:
            client: AsyncOpenAI-compatible client, None when no API key is set
            model: Embedding model name
            dimensions: Required vector length
            max_retries: Retries after a 429 response
            retry_base_delay: First backoff delay in seconds
            sleep: Awaitable sleep used for backoff
        """
        self.client = client
        self.model = model
        self.dimensions = dimensions
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay
        self.sleep = sleep

    async def generate(self, text: Optional[str]) -> EmbeddingResult:
        """Generate an embedding for ``text``."""
        if self.client is None:
            return EmbeddingResult(
                success=False,
                error="OPENROUTER_API_KEY not configured",
                error_kind=EnrichmentErrorKind.CONFIGURATION,
            )

        if not text or not text.strip():
            return EmbeddingResult(
                success=False,
                error="Input text is empty",
                error_kind=EnrichmentErrorKind.EMPTY_INPUT,
            )

        async def request():
            return await self.client.embeddings.create(
                model=self.model,
                input=text,
                encoding_format="float",
            )

        try:
            response = await call_with_rate_limit_retry(
                request,
                max_retries=self.max_retries,
                base_delay=self.retry_base_delay,
                sleep=self.sleep,
                label="Embeddings",
            )
        except openai.OpenAIError as e:
            kind, message = describe_api_error(e)
            console.print(f"[red]Embedding generation error: {message}[/red]")
            return EmbeddingResult(
                success=False, error=message, error_kind=EnrichmentErrorKind(kind)
            )

        data = getattr(response, "data", None) or []
        embedding = getattr(data[0], "embedding", None) if data else None

        if not isinstance(embedding, list) or not embedding:
            return EmbeddingResult(
                success=False,
                error="No embedding returned from API",
                error_kind=EnrichmentErrorKind.INVALID_RESPONSE,
            )

        if len(embedding) != self.dimensions:
            return EmbeddingResult(
                success=False,
                error=f"Embedding has {len(embedding)} dimensions, expected {self.dimensions}",
                error_kind=EnrichmentErrorKind.INVALID_RESPONSE,
            )

        return EmbeddingResult(success=True, embedding=[float(v) for v in embedding])
