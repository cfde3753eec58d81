"""Language-aware keyword relevance filter."""

from typing import Dict, List

KEYWORDS: Dict[str, List[str]] = {
    "en": ["ants", "myrmecology"],
    "fr": ["fourmis", "myrmécologie"],
    "es": ["hormigas", "mirmecología"],
    "de": ["ameisen", "myrmekologie"],
}

DEFAULT_LANGUAGE = "en"


def keywords_for(language: str) -> List[str]:
    """Keyword list for a language, English when unknown."""
    return KEYWORDS.get((language or "").lower(), KEYWORDS[DEFAULT_LANGUAGE])


def matches_keywords(title: str, description: str, language: str) -> bool:
    """Return True if any topic keyword appears in the title or description."""
    text = f"{title or ''} {description or ''}".lower()
    return any(keyword.lower() in text for keyword in keywords_for(language))
