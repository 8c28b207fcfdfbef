"""Core data models.

This module defines:
- `UserRecord`: one subscription event row as read from the table store.
- `ContinuationToken` / `Page`: one slice of a paginated query.
- `SubscriptionsFeed`: the daily feed returned to clients.

Design notes
------------
- Records are immutable; the feed core only reads them.
- The feed serializes with the wire names (`dateUTC`), while Python code
  uses snake_case attributes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from pydantic import BaseModel, ConfigDict, Field

UserSet = frozenset[str]


# === Store records ===


@dataclass(slots=True, frozen=True)
class UserRecord:
    """A subscription event row, minimally normalized."""

    partition_key: str
    row_key: str
    user_id: str  # hashed fiscal code


@dataclass(slots=True, frozen=True)
class ContinuationToken:
    """Opaque position from which the store resumes a query."""

    next_partition_key: str
    next_row_key: str | None = None


@dataclass(slots=True, frozen=True)
class Page:
    """One page of query results and the token to fetch the next one."""

    records: tuple[UserRecord, ...] = field(default_factory=tuple)
    continuation: ContinuationToken | None = None

    @property
    def is_last(self) -> bool:
        return self.continuation is None


# === Feed ===


class SubscriptionsFeed(BaseModel):
    """Users who subscribed to and unsubscribed from a service on one day."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    date_utc: date = Field(alias="dateUTC")
    subscriptions: list[str] = Field(default_factory=list)
    unsubscriptions: list[str] = Field(default_factory=list)

    def to_payload(self) -> dict[str, object]:
        """Return the JSON-ready wire representation."""
        return self.model_dump(mode="json", by_alias=True)
