"""Core data models, configuration, errors and domain rules.

This package provides:
- Data models (UserRecord, Page, ContinuationToken, SubscriptionsFeed)
- Configuration (FeedConfig)
- Error taxonomy (NotYetAvailable, StoreQueryError, InvalidDateError)
- Partition key builders and the availability gate
"""

from subfeed.core.availability import available_since, check_available
from subfeed.core.config import FeedConfig
from subfeed.core.errors import InvalidDateError, NotYetAvailable, StoreQueryError, SubfeedError
from subfeed.core.models import ContinuationToken, Page, SubscriptionsFeed, UserRecord, UserSet

__all__ = [
    "FeedConfig",
    "ContinuationToken",
    "Page",
    "SubscriptionsFeed",
    "UserRecord",
    "UserSet",
    "InvalidDateError",
    "NotYetAvailable",
    "StoreQueryError",
    "SubfeedError",
    "available_since",
    "check_available",
]
