"""Paginated scans over the subscriptions feed table.

- `PagedScanner` follows continuation tokens until the store is exhausted.
- `UserSetCollector` folds every page of a partition into a set of users.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from subfeed.core.errors import StoreQueryError
from subfeed.core.interfaces import ITableStore
from subfeed.core.models import ContinuationToken, UserRecord, UserSet
from subfeed.core.partition_keys import query_filter_for_key

logger = logging.getLogger(__name__)


class PagedScanner:
    """Lazily walk every page of a filtered query.

    Parameters
    ----------
    store : ITableStore
        Store to query; may be shared across scanners.
    """

    def __init__(self, store: ITableStore) -> None:
        self._store = store

    async def scan(self, partition_filter: str) -> AsyncIterator[list[UserRecord]]:
        """Yield the records of each page, in store order.

        Each call starts a new read from the first page. The first failing
        fetch raises `StoreQueryError` and ends the iteration.
        """
        continuation: ContinuationToken | None = None
        page_no = 0
        while True:
            try:
                page = await self._store.query_page(
                    partition_filter=partition_filter,
                    continuation=continuation,
                )
            except StoreQueryError:
                raise
            except Exception as e:
                raise StoreQueryError(f"Failed to fetch page {page_no} for [{partition_filter}]: {e}", e) from e

            logger.debug("page %d for [%s]: %d records", page_no, partition_filter, len(page.records))
            yield list(page.records)

            if page.is_last:
                return
            continuation = page.continuation
            page_no += 1


class UserSetCollector:
    """Collect the distinct user identifiers stored under a partition key."""

    def __init__(self, scanner: PagedScanner) -> None:
        self._scanner = scanner

    @classmethod
    def for_store(cls, store: ITableStore) -> UserSetCollector:
        return cls(PagedScanner(store))

    async def collect(self, partition_key: str) -> UserSet:
        users: set[str] = set()
        async for records in self._scanner.scan(query_filter_for_key(partition_key)):
            for rec in records:
                users.add(rec.user_id)
        logger.debug("collected %d users under %s", len(users), partition_key)
        return frozenset(users)
