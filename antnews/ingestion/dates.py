"""Feed date parsing."""

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional

import pendulum


def parse_pub_date(value: Optional[str]) -> Optional[datetime]:
    """Parse a feed-provided date string; None when absent or unparseable.

    RFC 822 dates (RSS) are tried first, then anything pendulum understands
    (ISO 8601 from Atom feeds and the decoder). Naive values are taken as UTC.
    """
    if not value or not value.strip():
        return None
    value = value.strip()

    parsed: Optional[datetime] = None
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        parsed = None

    if parsed is None:
        try:
            parsed = pendulum.parse(value, strict=False)
        except ValueError:
            return None
        if not isinstance(parsed, datetime):
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
