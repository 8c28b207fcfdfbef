from datetime import date, datetime, timezone
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest

from subfeed.core.config import FeedConfig
from subfeed.core.errors import InvalidDateError
from subfeed.core.use_cases.reconcile import FeedKeys, FeedReconciler
from subfeed.orchestration.feed import fetch_feed, get_subscriptions_feed
from subfeed.orchestration.utils import http_date, parse_short_date
from subfeed.scanning.scanner import UserSetCollector

NOW = datetime(2021, 5, 3, 12, 0, tzinfo=timezone.utc)
KEYS = FeedKeys.for_day(date(2021, 5, 1), "svc")


def test_parse_short_date() -> None:
    assert parse_short_date("2021-05-01") == date(2021, 5, 1)
    for bad in ("2021-5-1", "2021-02-30", "20210501", "2021-05-01T00:00:00Z"):
        with pytest.raises(InvalidDateError):
            parse_short_date(bad)


def test_http_date() -> None:
    assert http_date(datetime(2021, 5, 2, tzinfo=timezone.utc)) == "Sun, 02 May 2021 00:00:00 GMT"


@pytest.mark.asyncio
async def test_success_payload(fake_store: Any) -> None:
    store = fake_store({KEYS.profile: [["a", "b"]], KEYS.subscribed: [["b", "c"]], KEYS.unsubscribed: [["b"]]})
    reconciler = FeedReconciler(UserSetCollector.for_store(store))

    response = await get_subscriptions_feed(reconciler, date_utc="2021-05-01", service_id="svc", now=NOW)

    assert response.ok
    assert response.body["dateUTC"] == "2021-05-01"
    assert set(response.body["subscriptions"]) == {"a", "c"}
    assert response.body["unsubscriptions"] == []


@pytest.mark.asyncio
async def test_not_yet_available_skips_the_store(mock_store: Any) -> None:
    reconciler = FeedReconciler(UserSetCollector.for_store(mock_store))

    response = await get_subscriptions_feed(
        reconciler,
        date_utc="2021-05-01",
        service_id="svc",
        now=datetime(2021, 5, 1, 23, 0, tzinfo=timezone.utc),
    )

    assert response.status_code == 404
    assert response.body["title"] == "Data not available yet"
    assert response.body["detail"] == (
        "Subscription data for 2021-05-01 will be available from Sun, 02 May 2021 00:00:00 GMT"
    )
    mock_store.query_page.assert_not_awaited()


@pytest.mark.asyncio
async def test_invalid_date(mock_store: Any) -> None:
    reconciler = FeedReconciler(UserSetCollector.for_store(mock_store))

    response = await get_subscriptions_feed(reconciler, date_utc="2021-13-01", service_id="svc", now=NOW)

    assert response.status_code == 400
    mock_store.query_page.assert_not_awaited()


@pytest.mark.asyncio
async def test_store_failure_is_internal_error(fake_store: Any) -> None:
    store = fake_store({KEYS.subscribed: [["b"], ["c"]]}, fail_on={KEYS.subscribed: 1})
    reconciler = FeedReconciler(UserSetCollector.for_store(store))

    response = await get_subscriptions_feed(reconciler, date_utc=date(2021, 5, 1), service_id="svc", now=NOW)

    assert response.status_code == 500
    assert response.feed is None
    assert "boom" in response.body["detail"]


@pytest.mark.asyncio
async def test_fetch_feed_wires_and_closes_client(mock_store: Any) -> None:
    mock_store.__aenter__ = AsyncMock(return_value=mock_store)
    mock_store.__aexit__ = AsyncMock(return_value=None)
    config = FeedConfig(account_url="https://acct.table.core.windows.net")

    with patch("subfeed.orchestration.feed.TableClient") as MockClient:
        MockClient.from_config.return_value = mock_store
        response = await fetch_feed(config, date_utc="2021-05-01", service_id="svc", now=NOW)

    MockClient.from_config.assert_called_once_with(config)
    assert response.ok
    assert response.body == {"dateUTC": "2021-05-01", "subscriptions": [], "unsubscriptions": []}
    assert mock_store.query_page.await_count == 3
    mock_store.__aexit__.assert_awaited_once()


@pytest.mark.asyncio
async def test_last_representable_day_is_not_found(mock_store: Any) -> None:
    reconciler = FeedReconciler(UserSetCollector.for_store(mock_store))

    response = await get_subscriptions_feed(reconciler, date_utc="9999-12-31", service_id="svc", now=NOW)

    assert response.status_code == 404
    assert response.body["detail"].startswith("Subscription data for 9999-12-31 will be available from ")
    mock_store.query_page.assert_not_awaited()


@pytest.mark.asyncio
async def test_fetch_feed_reads_config_from_env(mock_store: Any, monkeypatch: pytest.MonkeyPatch) -> None:
    mock_store.__aenter__ = AsyncMock(return_value=mock_store)
    mock_store.__aexit__ = AsyncMock(return_value=None)
    monkeypatch.setenv("SUBSCRIPTIONS_FEED_ACCOUNT_URL", "https://acct.table.core.windows.net")
    monkeypatch.setenv("SUBSCRIPTIONS_FEED_TABLE", "Feed")

    with patch("subfeed.orchestration.feed.TableClient") as MockClient:
        MockClient.from_config.return_value = mock_store
        response = await fetch_feed(date_utc="2021-05-01", service_id="svc", now=NOW)

    config = MockClient.from_config.call_args.args[0]
    assert config.account_url == "https://acct.table.core.windows.net"
    assert config.table == "Feed"
    assert response.ok
