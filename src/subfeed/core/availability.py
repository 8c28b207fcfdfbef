"""Availability of daily feed data.

Events for day D keep arriving until the day is over, so the feed for D
can only be served from 00:00 UTC of D+1 onward.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

from subfeed.core.errors import NotYetAvailable


def available_since(day: date) -> datetime:
    """Return the instant from which data for `day` is complete.

    The last representable day never completes: `datetime.max` is returned.
    """
    try:
        next_day = day + timedelta(days=1)
    except OverflowError:
        return datetime.max.replace(tzinfo=timezone.utc)
    return datetime.combine(next_day, time.min, tzinfo=timezone.utc)


def check_available(day: date, now: datetime | None = None) -> None:
    """Raise `NotYetAvailable` if data for `day` cannot be queried at `now`."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    since = available_since(day)
    if now < since:
        raise NotYetAvailable(day, since)
