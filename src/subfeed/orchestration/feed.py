"""Subscriptions feed entry point: validate → gate → reconcile → respond.

This module provides two layers:

1) `get_subscriptions_feed(...)`:
   - Depends ONLY on a `FeedReconciler`.
   - Maps every outcome (feed, invalid date, data not yet available,
     store failure) to a transport-neutral `FeedResponse`.

2) `fetch_feed(...)` (convenience wrapper):
   - Wires a concrete `TableClient` from a `FeedConfig` for CLI / script
     usage and closes it afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from subfeed.clients.table import TableClient
from subfeed.core.availability import check_available
from subfeed.core.config import FeedConfig
from subfeed.core.errors import InvalidDateError, NotYetAvailable, StoreQueryError
from subfeed.core.models import SubscriptionsFeed
from subfeed.core.use_cases.reconcile import FeedReconciler
from subfeed.orchestration.utils import http_date, parse_short_date
from subfeed.scanning.scanner import UserSetCollector

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Output DTO
# ---------------------------------------------------------------------------


@dataclass(kw_only=True)
class FeedResponse:
    """Transport-neutral response: an HTTP-like status and a JSON body."""

    status_code: int
    body: dict[str, Any] = field(default_factory=dict)
    feed: SubscriptionsFeed | None = None

    @property
    def ok(self) -> bool:
        return self.status_code == 200


def _problem(status: int, title: str, detail: str) -> FeedResponse:
    return FeedResponse(status_code=status, body={"status": status, "title": title, "detail": detail})


def not_yet_available_response(err: NotYetAvailable) -> FeedResponse:
    return _problem(
        404,
        "Data not available yet",
        f"Subscription data for {err.day.isoformat()} will be available from {http_date(err.available_since)}",
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


async def get_subscriptions_feed(
    reconciler: FeedReconciler,
    *,
    date_utc: str | date,
    service_id: str,
    now: datetime | None = None,
    deadline_s: float | None = None,
) -> FeedResponse:
    """
    Return the subscriptions feed of `service_id` for `date_utc` as a response.

    The availability check runs before any store query is issued.
    """
    try:
        day = parse_short_date(date_utc) if isinstance(date_utc, str) else date_utc
    except InvalidDateError as e:
        return _problem(400, "Invalid date", str(e))

    try:
        check_available(day, now)
    except NotYetAvailable as e:
        logger.info("feed %s %s rejected: available from %s", service_id, day.isoformat(), e.available_since.isoformat())
        return not_yet_available_response(e)

    try:
        feed = await reconciler.reconcile(day, service_id, deadline_s=deadline_s)
    except StoreQueryError as e:
        logger.error("feed %s %s failed: %s", service_id, day.isoformat(), e)
        return _problem(500, "Error while retrieving the feed", str(e))

    return FeedResponse(status_code=200, body=feed.to_payload(), feed=feed)


async def fetch_feed(
    config: FeedConfig | None = None,
    *,
    date_utc: str | date,
    service_id: str,
    now: datetime | None = None,
) -> FeedResponse:
    """Build a `TableClient` from `config`, serve one feed request, close it.

    Without `config`, it is read from the `SUBSCRIPTIONS_FEED_*` environment.
    """
    if config is None:
        config = FeedConfig.from_env()
    async with TableClient.from_config(config) as store:
        reconciler = FeedReconciler(UserSetCollector.for_store(store))
        return await get_subscriptions_feed(
            reconciler,
            date_utc=date_utc,
            service_id=service_id,
            now=now,
            deadline_s=config.deadline_s,
        )
