"""Open Graph metadata scraper."""

from typing import Optional

import httpx
from bs4 import BeautifulSoup

from .models import ScrapedMetadata

DEFAULT_USER_AGENT = "AntkeeperNews/1.0 (RSS aggregator; +https://news.antkeeper.com)"


def _meta_content(soup: BeautifulSoup, **attrs: str) -> Optional[str]:
    tag = soup.find("meta", attrs=attrs)
    if tag is None:
        return None
    content = (tag.get("content") or "").strip()
    return content or None


def parse_metadata(html: str) -> ScrapedMetadata:
    """Extract og:image, og:description and author from a page."""
    soup = BeautifulSoup(html, "html.parser")
    return ScrapedMetadata(
        og_image=_meta_content(soup, property="og:image"),
        og_description=_meta_content(soup, property="og:description"),
        author=_meta_content(soup, name="author") or _meta_content(soup, property="article:author"),
        scraped_successfully=True,
    )


class MetadataScraper:
    """Fetch article pages and read their Open Graph metadata."""

    def __init__(
        self,
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize metadata scraper."""
        self.timeout = timeout
        self.user_agent = user_agent
        self.transport = transport

    async def scrape(self, url: str) -> ScrapedMetadata:
        """Scrape one page. Failures are reported in the result, never raised."""
        try:
            headers = {
                "User-Agent": self.user_agent,
                "Accept": "text/html,application/xhtml+xml",
            }

            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers=headers,
                transport=self.transport,
            ) as client:
                response = await client.get(url)

            if not response.is_success:
                return ScrapedMetadata(
                    scraped_successfully=False,
                    error_message=f"HTTP {response.status_code}",
                )

            return parse_metadata(response.text)

        except httpx.TimeoutException:
            return ScrapedMetadata(scraped_successfully=False, error_message="Timeout")
        except Exception as e:
            return ScrapedMetadata(scraped_successfully=False, error_message=str(e) or repr(e))
