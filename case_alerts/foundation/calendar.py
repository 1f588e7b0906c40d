"""Calendar arithmetic shared by every deadline rule.

Deadlines are compared at day granularity: both "today" and the target are
reduced to their calendar date in the office time zone before subtracting,
so a target at 00:01 and one at 23:59 of the same day are both "due today".
Standalone reminders are the exception and use ``ceil_days`` on the raw
timestamp difference.

Naive datetimes are wall-clock times in the office time zone.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone, tzinfo

_DAY_MICROSECONDS = 24 * 60 * 60 * 1_000_000


def utc_now() -> datetime:
    """Current instant, timezone-aware.  Patch this in tests, not datetime."""
    return datetime.now(timezone.utc)


def localize(value: datetime, tz: tzinfo) -> datetime:
    """Express *value* in *tz*, reading naive values as already local."""
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def calendar_date(value: datetime, tz: tzinfo) -> date:
    """Return the calendar date of *value* as seen from *tz* (its midnight)."""
    return localize(value, tz).date()


def shift_days(day: date, days: int) -> date:
    """Move a calendar date forward (or backward) by whole days."""
    return day + timedelta(days=days)


def days_between(today: date, target: date) -> int:
    """Signed whole days from *today* until *target*.

    Negative means the target is in the past, zero means today.
    """
    return (target - today).days


def ceil_days(delta: timedelta) -> int:
    """Round a time difference up to whole days.

    ``ceil_days(timedelta(hours=1)) == 1`` and
    ``ceil_days(timedelta(hours=-23)) == 0``.
    """
    micros = (delta.days * 86400 + delta.seconds) * 1_000_000 + delta.microseconds
    return -(-micros // _DAY_MICROSECONDS)
