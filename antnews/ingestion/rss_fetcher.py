"""RSS feed reader."""

from typing import Any, Dict, Optional

import feedparser
import httpx
from bs4 import BeautifulSoup
from rich.console import Console

from .decoder import DecoderClient
from .models import FeedItem, FeedResult

console = Console()


def _html_to_text(value: Optional[str]) -> str:
    """Strip markup from a feed description."""
    if not value:
        return ""
    if "<" not in value:
        return value.strip()
    return BeautifulSoup(value, "html.parser").get_text(" ", strip=True)


def extract_image_url(entry: Dict[str, Any]) -> Optional[str]:
    """Pick the first image URL an entry advertises.

    Order: image enclosure, media:content, media:thumbnail, itunes:image.
    """
    for enclosure in entry.get("enclosures") or []:
        mime_type = enclosure.get("type") or ""
        href = enclosure.get("href") or enclosure.get("url")
        if href and mime_type.startswith("image/"):
            return href

    for media in entry.get("media_content") or []:
        if media.get("url"):
            return media["url"]

    for thumbnail in entry.get("media_thumbnail") or []:
        if thumbnail.get("url"):
            return thumbnail["url"]

    image = entry.get("image")
    if isinstance(image, dict) and image.get("href"):
        return image["href"]
    if isinstance(image, str) and image:
        return image

    return None


def entry_to_item(entry: Dict[str, Any]) -> FeedItem:
    """Normalize a parsed feed entry."""
    summary = entry.get("summary") or entry.get("description") or ""
    description = _html_to_text(summary)

    content = None
    if entry.get("content"):
        content = entry["content"][0].get("value")
    if not content:
        content = description or None

    return FeedItem(
        title=(entry.get("title") or "").strip(),
        description=description,
        link=entry.get("link") or "",
        pub_date=entry.get("published") or entry.get("updated"),
        author=entry.get("author") or None,
        content=content,
        image_url=extract_image_url(entry),
    )


class RSSFetcher:
    """Fetch feeds and normalize their items."""

    def __init__(
        self,
        decoder: Optional[DecoderClient] = None,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize RSS fetcher."""
        self.decoder = decoder or DecoderClient()
        self.timeout = timeout
        self.transport = transport

    async def fetch_feed(self, feed_url: str) -> FeedResult:
        """Fetch and parse a feed document directly."""
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self.transport,
            ) as client:
                response = await client.get(feed_url)
                response.raise_for_status()

            feed = feedparser.parse(response.content)

            if feed.bozo and not feed.entries:
                return FeedResult(
                    feed_url=feed_url,
                    success=False,
                    error=f"Invalid RSS feed: {feed.bozo_exception}",
                )

            items = [entry_to_item(entry) for entry in feed.entries]
            return FeedResult(
                feed_url=feed_url,
                success=True,
                items=[item for item in items if item.title and item.link],
            )

        except httpx.TimeoutException:
            return FeedResult(feed_url=feed_url, success=False, error="Request timed out")
        except httpx.HTTPStatusError as e:
            return FeedResult(
                feed_url=feed_url,
                success=False,
                error=f"HTTP {e.response.status_code}",
            )
        except httpx.HTTPError as e:
            return FeedResult(feed_url=feed_url, success=False, error=f"HTTP error: {e}")

    async def read_feed(self, feed_url: str, needs_decoding: bool = False) -> FeedResult:
        """Read one feed, through the decoder service when its links are indirect."""
        if needs_decoding:
            return await self.decoder.decode_feed(feed_url)
        return await self.fetch_feed(feed_url)


def print_feed_summary(results: Dict[str, FeedResult]) -> None:
    """Print summary of feed fetch results keyed by source name."""
    total_items = sum(r.item_count for r in results.values())
    successful = sum(1 for r in results.values() if r.success)
    failed = len(results) - successful

    console.print("\n[bold]Feed Summary:[/bold]")
    console.print(f"  Sources read: {len(results)}")
    console.print(f"  Successful: [green]{successful}[/green]")
    console.print(f"  Failed: [red]{failed}[/red]")
    console.print(f"  Total items: {total_items}")

    if failed > 0:
        console.print("\n[bold red]Failed feeds:[/bold red]")
        for name, result in results.items():
            if not result.success:
                console.print(f"  - {name}: {result.error}")
