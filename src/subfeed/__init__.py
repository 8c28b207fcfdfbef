from __future__ import annotations

from .core.config import FeedConfig
from .core.errors import NotYetAvailable, StoreQueryError
from .core.models import SubscriptionsFeed
from .core.use_cases.reconcile import FeedReconciler, reconcile_sets
from .clients.table import TableClient
from .orchestration.feed import FeedResponse, fetch_feed, get_subscriptions_feed
from .scanning.scanner import PagedScanner, UserSetCollector

__all__ = [
    "FeedConfig",
    "FeedReconciler",
    "FeedResponse",
    "NotYetAvailable",
    "PagedScanner",
    "StoreQueryError",
    "SubscriptionsFeed",
    "TableClient",
    "UserSetCollector",
    "fetch_feed",
    "get_subscriptions_feed",
    "reconcile_sets",
]
