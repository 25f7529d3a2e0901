"""UTC datetime utilities."""

import calendar
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def months_ago(moment: datetime, months: int) -> datetime:
    """Step back ``months`` calendar months, clamping the day to the target month's end.

    months_ago(2026-08-31, 6) -> 2026-02-28
    """
    total = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(total, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)
