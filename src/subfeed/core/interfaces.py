from __future__ import annotations

from typing import Protocol, runtime_checkable

from subfeed.core.models import ContinuationToken, Page, UserSet


# ---------------------------------------------------------------------------
# ITableStore
# ---------------------------------------------------------------------------

@runtime_checkable
class ITableStore(Protocol):
    """
    Abstract paginated key-value store holding subscription events.

    Domain expectations:
    - It applies the partition filter server-side.
    - Each call returns a single page and, if more results remain, the
      token to resume from.
    - Any failure surfaces as `StoreQueryError`.
    """

    async def query_page(
        self,
        *,
        partition_filter: str,
        continuation: ContinuationToken | None = None,
    ) -> Page:
        """
        Return one page of records matching `partition_filter`.

        Implementations:
        - Azure Table Storage REST (`TableClient`)
        - In-memory store for testing
        """
        ...


# ---------------------------------------------------------------------------
# IUserSetSource
# ---------------------------------------------------------------------------

@runtime_checkable
class IUserSetSource(Protocol):
    """
    Anything able to turn a partition key into the set of users it holds.

    The reconciler depends on this rather than on a concrete collector so
    that it can be exercised with precomputed sets.
    """

    async def collect(self, partition_key: str) -> UserSet:
        """Return every user identifier stored under `partition_key`."""
        ...
