# academy/core/clock.py
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from academy.core.config import settings


def local_tz() -> ZoneInfo:
    return ZoneInfo(settings.TIMEZONE)


def now() -> datetime:
    """Current time in the academy's timezone (tz-aware)."""
    return datetime.now(local_tz())


def day_bounds(day: date | datetime) -> tuple[datetime, datetime]:
    """
    Inclusive [start, end] of the local calendar day containing ``day``.

    Aware datetimes are first converted to the academy's timezone so that a
    timestamp taken just after midnight UTC lands on the right local day.
    """
    if isinstance(day, datetime):
        if day.tzinfo is not None:
            day = day.astimezone(local_tz())
        day = day.date()
    tz = local_tz()
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = start + timedelta(days=1) - timedelta(microseconds=1)
    return start, end
