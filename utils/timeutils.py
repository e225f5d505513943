"""
Time helpers. Timestamps are stored as naive UTC; the daily quota boundary
is the IST calendar day.
"""
from datetime import datetime, timedelta, timezone

IST_OFFSET = timedelta(hours=5, minutes=30)
IST = timezone(IST_OFFSET, name='IST')


def now_utc():
    """Current time as naive UTC, matching what the DB columns hold."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(dt):
    if dt is None:
        return None
    if dt.tzinfo is not None:
        return dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def ist_date(dt):
    """Calendar date of ``dt`` in IST. Naive values are taken as UTC."""
    return (to_naive_utc(dt) + IST_OFFSET).date()


def isoformat(dt):
    return dt.isoformat() if dt else None
