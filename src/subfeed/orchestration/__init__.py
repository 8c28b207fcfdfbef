"""Entry points serving the subscriptions feed.

This package provides:
- get_subscriptions_feed: validation, availability gate and error mapping
- fetch_feed: same, wired to a TableClient built from a FeedConfig
- Date parsing helpers
"""

from subfeed.orchestration.feed import FeedResponse, fetch_feed, get_subscriptions_feed
from subfeed.orchestration.utils import http_date, parse_short_date

__all__ = [
    "FeedResponse",
    "fetch_feed",
    "get_subscriptions_feed",
    "http_date",
    "parse_short_date",
]
