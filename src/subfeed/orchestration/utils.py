from __future__ import annotations

import re
from datetime import date, datetime
from email.utils import format_datetime

from subfeed.core.errors import InvalidDateError

SHORT_DATE_RE = re.compile(r"\d\d\d\d-\d\d-\d\d")


def parse_short_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string into a real calendar date."""
    if not SHORT_DATE_RE.fullmatch(value):
        raise InvalidDateError(value)
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise InvalidDateError(value) from e


def http_date(instant: datetime) -> str:
    """RFC 1123 rendering, e.g. ``Sun, 02 May 2021 00:00:00 GMT``."""
    return format_datetime(instant, usegmt=True)
