"""
Datetime helpers.

All timestamps are stored and compared in UTC. SQLite hands back naive
datetimes even for ``DateTime(timezone=True)`` columns, so values read
from the database go through ``ensure_utc`` before any arithmetic.
"""

from datetime import datetime, timezone
from typing import Optional

from .constants import DAYS_OF_WEEK


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a datetime to aware UTC.

    Naive values are assumed to already be UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def weekday_name(value: datetime) -> str:
    """Lowercase English weekday for a datetime (``monday`` .. ``sunday``)."""
    return DAYS_OF_WEEK[value.weekday()]
