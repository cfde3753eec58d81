"""Client for the link-decoder service used by aggregator feeds."""

import time
from typing import Optional

import httpx
from rich.console import Console

from .models import FeedItem, FeedResult

console = Console()

DEFAULT_DECODER_URL = "https://news-decoder-api-production.up.railway.app"


class DecoderClient:
    """Resolve aggregator feeds into items with real article links."""

    def __init__(
        self,
        base_url: str = DEFAULT_DECODER_URL,
        decode_timeout: float = 120.0,
        wake_timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize decoder client."""
        self.base_url = base_url.rstrip("/")
        self.decode_timeout = decode_timeout
        self.wake_timeout = wake_timeout
        self.transport = transport

    async def wake(self) -> bool:
        """Ping the service so a sleeping instance starts before real work.

        Never raises; the return value only says whether it answered 2xx.
        """
        started = time.monotonic()
        try:
            async with httpx.AsyncClient(
                timeout=self.wake_timeout, transport=self.transport
            ) as client:
                response = await client.get(f"{self.base_url}/")
            elapsed_ms = (time.monotonic() - started) * 1000
            console.print(
                f"[dim][Decoder] Service responded in {elapsed_ms:.0f}ms "
                f"(status: {response.status_code})[/dim]"
            )
            return response.is_success
        except httpx.HTTPError as e:
            console.print(
                f"[dim][Decoder] Wake-up request failed, service may still be starting: {e!r}[/dim]"
            )
            return False

    async def decode_feed(self, feed_url: str) -> FeedResult:
        """Decode a feed URL into resolved items.

        Decoded items carry only title, link and publication date; description,
        content and image are left for metadata scraping.
        """
        started = time.monotonic()
        try:
            async with httpx.AsyncClient(
                timeout=self.decode_timeout, transport=self.transport
            ) as client:
                response = await client.post(f"{self.base_url}/decode", json={"url": feed_url})

            elapsed = time.monotonic() - started
            console.print(
                f"[dim]  [Decoder] Response {response.status_code} in {elapsed:.2f}s[/dim]"
            )

            if not response.is_success:
                return FeedResult(
                    feed_url=feed_url,
                    success=False,
                    error=f"Decoder returned HTTP {response.status_code}",
                )

            try:
                data = response.json()
            except ValueError:
                return FeedResult(
                    feed_url=feed_url, success=False, error="Decoder returned invalid JSON"
                )

            if not isinstance(data, list):
                return FeedResult(
                    feed_url=feed_url,
                    success=False,
                    error=f"Decoder response is not an array ({type(data).__name__})",
                )

            items = []
            for raw in data:
                if not isinstance(raw, dict) or not raw.get("title") or not raw.get("link"):
                    continue
                items.append(
                    FeedItem(
                        title=str(raw["title"]).strip(),
                        description="",
                        link=str(raw["link"]),
                        pub_date=raw.get("pubdate"),
                        content="",
                    )
                )

            return FeedResult(feed_url=feed_url, success=True, items=items)

        except httpx.TimeoutException:
            elapsed = time.monotonic() - started
            return FeedResult(
                feed_url=feed_url,
                success=False,
                error=f"Decoder timed out after {elapsed:.1f}s",
            )
        except httpx.HTTPError as e:
            return FeedResult(feed_url=feed_url, success=False, error=f"Decoder error: {e!r}")
