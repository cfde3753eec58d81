"""AI tag and category assignment."""

import asyncio
import json
from typing import Any, List, Optional

import openai
from rich.console import Console

from ..models import ArticleCategory
from .client import Sleep, call_with_rate_limit_retry, describe_api_error
from .models import CategorizationInput, CategorizationResult, EnrichmentErrorKind
from .prompts import build_system_prompt, build_user_prompt

console = Console()

DEFAULT_CATEGORIZATION_MODEL = "mistralai/mistral-7b-instruct:free"
DEFAULT_CATEGORY = ArticleCategory.NEWS
MAX_TAGS = 10
MAX_TAG_LENGTH = 50
CONTENT_CHARS = 1000


def normalize_tags(tags: Any) -> List[str]:
    """Lowercase, trim, length-filter and de-duplicate tags, keeping order."""
    if not isinstance(tags, list):
        return []

    normalized: List[str] = []
    for tag in tags:
        if not isinstance(tag, str):
            continue
        tag = tag.strip().lower()
        if not tag or len(tag) >= MAX_TAG_LENGTH or tag in normalized:
            continue
        normalized.append(tag)
    return normalized[:MAX_TAGS]


def normalize_category(category: Any) -> ArticleCategory:
    """Map a model-provided category onto the fixed set, defaulting to news."""
    if not isinstance(category, str):
        return DEFAULT_CATEGORY
    try:
        return ArticleCategory(category.strip().lower())
    except ValueError:
        return DEFAULT_CATEGORY


class ArticleCategorizer:
    """Assign tags and a category to an article with a chat model."""

    def __init__(
        self,
        client: Optional[Any],
        model: str = DEFAULT_CATEGORIZATION_MODEL,
        max_retries: int = 2,
        retry_base_delay: float = 5.0,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """Initialize categorizer."""
        self.client = client
        self.model = model
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay
        self.sleep = sleep

    def _failure(self, error: str, kind: EnrichmentErrorKind) -> CategorizationResult:
        return CategorizationResult(success=False, error=error, error_kind=kind)

    async def categorize(self, article: CategorizationInput) -> CategorizationResult:
        """Categorize one article.

        The category is only meaningful when ``success`` is True; callers must
        leave the stored category untouched on failure.
        """
        if self.client is None:
            return self._failure(
                "OPENROUTER_API_KEY not configured", EnrichmentErrorKind.CONFIGURATION
            )

        article = article.model_copy(update={"content": (article.content or "")[:CONTENT_CHARS]})

        if not article.title.strip() and not article.summary.strip() and not article.content.strip():
            return self._failure("Article has no text to categorize", EnrichmentErrorKind.EMPTY_INPUT)

        messages = [
            {"role": "system", "content": build_system_prompt(article.language)},
            {"role": "user", "content": build_user_prompt(article)},
        ]

        async def request():
            return await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                response_format={"type": "json_object"},
                temperature=0.3,
                max_tokens=200,
            )

        try:
            response = await call_with_rate_limit_retry(
                request,
                max_retries=self.max_retries,
                base_delay=self.retry_base_delay,
                sleep=self.sleep,
                label="Categorization",
            )
        except openai.OpenAIError as e:
            kind, message = describe_api_error(e)
            console.print(f"[red]Categorization error: {message}[/red]")
            return self._failure(message, EnrichmentErrorKind(kind))

        choices = getattr(response, "choices", None) or []
        content = choices[0].message.content if choices and choices[0].message else None
        if not content or not content.strip():
            return self._failure("No response from AI model", EnrichmentErrorKind.INVALID_RESPONSE)

        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as e:
            return self._failure(
                f"Model returned invalid JSON: {e}", EnrichmentErrorKind.INVALID_RESPONSE
            )

        if not isinstance(parsed, dict):
            return self._failure(
                "Model output is not a JSON object", EnrichmentErrorKind.INVALID_RESPONSE
            )

        tags = normalize_tags(parsed.get("tags"))
        if not tags:
            return self._failure("Model output has no usable tags", EnrichmentErrorKind.INVALID_RESPONSE)

        return CategorizationResult(
            success=True,
            tags=tags,
            category=normalize_category(parsed.get("category")),
        )
