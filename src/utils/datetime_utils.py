"""Datetime utilities for timezone-aware UTC timestamps.

Usage:
    from src.utils.datetime_utils import utc_now, local_today

    # For SQLAlchemy Column defaults
    created_at = Column(DateTime, default=utc_now)
    document_date = Column(Date, default=local_today)
"""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime.

    This is the replacement for the deprecated datetime.utcnow().

    Returns:
        Current UTC datetime with timezone info
    """
    return datetime.now(timezone.utc)


def local_today() -> date:
    """Return today's date in local time.

    Business dates (document dates, validity starts) are calendar dates in
    the operator's timezone, not UTC.
    """
    return date.today()
