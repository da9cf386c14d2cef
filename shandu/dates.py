"""Date utilities for shandu.

Pure functions for parsing dates and measuring spans between them.
"""

from datetime import datetime, timezone

import pandas as pd

SECONDS_PER_DAY = 86400
DAYS_PER_MONTH = 30


def _naive(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def parse_date(raw: str | datetime) -> datetime:
    """Parse a user or stored date into a naive datetime.

    ISO dates and timestamps are parsed directly. Anything else goes through
    pandas.to_datetime with day-first parsing, so DD/MM/YYYY and most other
    formats are accepted. Timezone aware values are converted to UTC and
    made naive.

    Args:
        raw: Date string or datetime.

    Returns:
        Naive datetime.

    Raises:
        ValueError: If the value cannot be parsed.
    """
    if isinstance(raw, datetime):
        return _naive(raw)
    if not isinstance(raw, str) or not raw.strip():
        raise ValueError(f"Could not parse date {raw!r}")

    text = raw.strip()
    try:
        return _naive(datetime.fromisoformat(text))
    except ValueError:
        pass

    try:
        parsed = pd.to_datetime(text, dayfirst=True)
    except (ValueError, pd.errors.ParserError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{raw}': {e}") from e
    if pd.isna(parsed):
        raise ValueError(f"Could not parse date {raw!r}")

    result: datetime = parsed.to_pydatetime()
    return _naive(result)


def format_date(value: datetime) -> str:
    """Format a datetime as an ISO timestamp for storage."""
    return value.isoformat(timespec="seconds")


def days_between(start: datetime, end: datetime) -> float:
    """Fractional number of days from start to end (negative if end is earlier)."""
    return (end - start).total_seconds() / SECONDS_PER_DAY
