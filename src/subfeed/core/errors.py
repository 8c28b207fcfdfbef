"""Error taxonomy for the subscriptions feed.

- `NotYetAvailable`: policy rejection, the requested day is not over yet.
- `StoreQueryError`: a page could not be fetched from the table store.
- `InvalidDateError`: the inbound date parameter is malformed.

Only the first two can originate from the reconciliation core.
"""

from __future__ import annotations

from datetime import date, datetime


class SubfeedError(Exception):
    """Base class for every error raised by this package."""


class NotYetAvailable(SubfeedError):
    """Data for `day` cannot be queried before `available_since`."""

    def __init__(self, day: date, available_since: datetime) -> None:
        self.day = day
        self.available_since = available_since
        super().__init__(f"Subscription data for {day.isoformat()} is not available before {available_since.isoformat()}")


class StoreQueryError(SubfeedError):
    """A store page fetch failed; fatal for the current request."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        self.cause = cause
        super().__init__(message)


class InvalidDateError(SubfeedError, ValueError):
    """The date parameter is not a real `YYYY-MM-DD` calendar date."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Invalid date {value!r}: expected a calendar date formatted as YYYY-MM-DD")
