"""Partition keys of the subscriptions feed table.

Events are grouped by day and kind:

- ``P-{date}-S``: profiles created on ``date`` (global, not service scoped)
- ``S-{date}-{service}-S``: subscriptions to ``service`` on ``date``
- ``S-{date}-{service}-U``: unsubscriptions from ``service`` on ``date``
"""

from __future__ import annotations

from datetime import date

PROFILE_PREFIX = "P"
SERVICE_PREFIX = "S"
SUBSCRIBED = "S"
UNSUBSCRIBED = "U"


def _day(d: date) -> str:
    return d.isoformat()


def profile_subscriptions_key(d: date) -> str:
    return f"{PROFILE_PREFIX}-{_day(d)}-{SUBSCRIBED}"


def service_subscriptions_key(d: date, service_id: str) -> str:
    return f"{SERVICE_PREFIX}-{_day(d)}-{service_id}-{SUBSCRIBED}"


def service_unsubscriptions_key(d: date, service_id: str) -> str:
    return f"{SERVICE_PREFIX}-{_day(d)}-{service_id}-{UNSUBSCRIBED}"


def query_filter_for_key(partition_key: str) -> str:
    """Exact-match OData filter on the partition key."""
    escaped = partition_key.replace("'", "''")
    return f"PartitionKey eq '{escaped}'"
