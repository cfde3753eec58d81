"""Shared OpenAI-compatible client and rate-limit retry loop."""

import asyncio
from typing import Awaitable, Callable, Optional, Tuple, TypeVar

import openai
from openai import AsyncOpenAI
from rich.console import Console

from ..config import Config

console = Console()

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


def create_client(config: Config) -> Optional[AsyncOpenAI]:
    """Build the API client, or None when no API key is configured."""
    api_key = config.get_api_key()
    if not api_key:
        return None

    openrouter = config.config.openrouter
    return AsyncOpenAI(
        api_key=api_key,
        base_url=openrouter.base_url,
        timeout=openrouter.timeout_seconds,
        # Retries are driven by call_with_rate_limit_retry only.
        max_retries=0,
        default_headers={
            "HTTP-Referer": openrouter.referer,
            "X-Title": openrouter.app_title,
        },
    )


async def call_with_rate_limit_retry(
    call: Callable[[], Awaitable[T]],
    max_retries: int = 2,
    base_delay: float = 5.0,
    sleep: Sleep = asyncio.sleep,
    label: str = "API",
) -> T:
    """Run ``call``, retrying only on HTTP 429 with exponential backoff.

    Delays are ``base_delay * 2**attempt``. Once ``max_retries`` retries are
    spent the last ``openai.RateLimitError`` is re-raised.
    """
    attempt = 0
    while True:
        try:
            return await call()
        except openai.RateLimitError:
            if attempt >= max_retries:
                console.print(f"[yellow]{label} rate limit hit (429) - max retries exceeded[/yellow]")
                raise
            delay = base_delay * (2 ** attempt)
            attempt += 1
            console.print(
                f"[yellow]{label} rate limit hit (429) - retrying in {delay:g}s "
                f"(attempt {attempt}/{max_retries})[/yellow]"
            )
            await sleep(delay)


def describe_api_error(error: Exception) -> Tuple[str, str]:
    """Map a client exception to an error kind value and message."""
    if isinstance(error, openai.RateLimitError):
        return "rate_limited", "Rate limit exceeded - max retries reached"
    if isinstance(error, openai.APITimeoutError):
        return "timeout", "Request timeout"
    if isinstance(error, openai.APIStatusError):
        return "http_status", f"API error: {error.status_code}"
    if isinstance(error, openai.APIConnectionError):
        return "network", f"Connection error: {error}"
    return "invalid_response", f"Unexpected API error: {error}"
