from unittest.mock import AsyncMock

import pytest

from subfeed.core.errors import StoreQueryError
from subfeed.core.models import ContinuationToken, Page, UserRecord


class FakeTableStore:
    """In-memory paginated store: partition key -> list of pages of user ids."""

    def __init__(self, partitions=None, fail_on=None):
        self.partitions = partitions or {}
        self.fail_on = fail_on or {}  # partition key -> failing page index
        self.calls = []

    async def query_page(self, *, partition_filter, continuation=None):
        key = partition_filter.split("'")[1]
        index = int(continuation.next_partition_key) if continuation else 0
        self.calls.append((key, index))
        if self.fail_on.get(key) == index:
            raise StoreQueryError(f"boom on page {index} of {key}")

        pages = self.partitions.get(key, [[]])
        records = tuple(UserRecord(partition_key=key, row_key=f"{key}-{u}", user_id=u) for u in pages[index])
        nxt = ContinuationToken(next_partition_key=str(index + 1)) if index + 1 < len(pages) else None
        return Page(records=records, continuation=nxt)


@pytest.fixture
def fake_store():
    return FakeTableStore


@pytest.fixture
def mock_store():
    store = AsyncMock()
    store.query_page = AsyncMock(return_value=Page())
    store.aclose = AsyncMock()
    return store
