"""URL slug generation."""

import re
import unicodedata

MAX_SLUG_LENGTH = 500

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def generate_slug(title: str) -> str:
    """Build the ASCII slug for a title.

    Accents are stripped, runs of other characters collapse to one hyphen
    and the result never starts or ends with a hyphen.
    """
    text = unicodedata.normalize("NFD", title.lower())
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    text = _NON_ALNUM.sub("-", text).strip("-")
    return text[:MAX_SLUG_LENGTH].rstrip("-")
