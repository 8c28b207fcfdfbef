from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import date

from subfeed.core.errors import StoreQueryError
from subfeed.core.interfaces import IUserSetSource
from subfeed.core.models import SubscriptionsFeed, UserSet
from subfeed.core.partition_keys import (
    profile_subscriptions_key,
    service_subscriptions_key,
    service_unsubscriptions_key,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Partition keys of one request
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FeedKeys:
    """The three event streams read to build the feed of a service for a day."""

    profile: str
    subscribed: str
    unsubscribed: str

    @classmethod
    def for_day(cls, day: date, service_id: str) -> FeedKeys:
        return cls(
            profile=profile_subscriptions_key(day),
            subscribed=service_subscriptions_key(day, service_id),
            unsubscribed=service_unsubscriptions_key(day, service_id),
        )


# ---------------------------------------------------------------------------
# Set algebra
# ---------------------------------------------------------------------------


def reconcile_sets(
    profile: UserSet,
    subscribed: UserSet,
    unsubscribed: UserSet,
) -> tuple[set[str], set[str]]:
    """
    Combine the three daily event sets into (subscriptions, unsubscriptions).

    - New profiles count as subscribed to every service, except the ones
      they unsubscribed from on the same day.
    - Explicit subscriptions of users who also created their profile that
      day are already counted by the previous rule.
    - Unsubscriptions of users who created their profile that day are
      dropped, the service never saw them subscribed.

    Users who both subscribed and unsubscribed without a new profile end up
    in both sets; that case is left as is.
    """
    subscriptions = (profile - unsubscribed) | (subscribed - profile)
    unsubscriptions = unsubscribed - profile
    return subscriptions, unsubscriptions


# ---------------------------------------------------------------------------
# Domain service – FeedReconciler
# ---------------------------------------------------------------------------


class FeedReconciler:
    """
    Build the subscriptions feed of a service for a given day.

    It depends only on an `IUserSetSource`, usually a `UserSetCollector`
    bound to the table store. The three event streams are read
    concurrently; the first failure cancels the others and no partial
    feed is ever returned.
    """

    def __init__(self, source: IUserSetSource) -> None:
        self._source = source

    async def _collect_all(self, keys: FeedKeys) -> tuple[UserSet, UserSet, UserSet]:
        tasks = [
            asyncio.create_task(self._source.collect(key))
            for key in (keys.profile, keys.subscribed, keys.unsubscribed)
        ]
        try:
            profile, subscribed, unsubscribed = await asyncio.gather(*tasks)
        except BaseException:
            for t in tasks:
                t.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return profile, subscribed, unsubscribed

    async def reconcile(
        self,
        day: date,
        service_id: str,
        *,
        deadline_s: float | None = None,
    ) -> SubscriptionsFeed:
        """
        Return the feed for `service_id` on `day`.

        Parameters
        ----------
        day : date
            Day whose events are reconciled.
        service_id : str
            Service the subscription events are scoped to.
        deadline_s : float | None
            Upper bound for the whole operation; on expiry every pending page
            fetch is cancelled and `StoreQueryError` is raised.
        """
        keys = FeedKeys.for_day(day, service_id)
        try:
            profile, subscribed, unsubscribed = await asyncio.wait_for(
                self._collect_all(keys),
                timeout=deadline_s,
            )
        except asyncio.TimeoutError as e:
            raise StoreQueryError(f"Feed for {service_id} on {day.isoformat()} not built within {deadline_s}s", e) from e

        subscriptions, unsubscriptions = reconcile_sets(profile, subscribed, unsubscribed)

        both = subscriptions & unsubscriptions
        if both:
            logger.warning(
                "%d users both subscribed to and unsubscribed from %s on %s",
                len(both),
                service_id,
                day.isoformat(),
            )
        logger.info(
            "feed %s %s: profiles=%d subscribed=%d unsubscribed=%d -> +%d -%d",
            service_id,
            day.isoformat(),
            len(profile),
            len(subscribed),
            len(unsubscribed),
            len(subscriptions),
            len(unsubscriptions),
        )

        return SubscriptionsFeed(
            date_utc=day,
            subscriptions=sorted(subscriptions),
            unsubscriptions=sorted(unsubscriptions),
        )
