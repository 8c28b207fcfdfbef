"""Lightweight async client for Azure Table Storage queries.

This module provides:
- `TableClient`: an async client with sane timeouts/connection limits
- Helpers to build query parameters and read continuation headers

It returns `Page` records ready for the feed scanners.
"""

from __future__ import annotations

from urllib.parse import parse_qsl

import httpx

from subfeed.core.config import FeedConfig
from subfeed.core.errors import StoreQueryError
from subfeed.core.models import ContinuationToken, Page, UserRecord

API_VERSION = "2019-02-02"

NEXT_PARTITION_KEY_HEADER = "x-ms-continuation-NextPartitionKey"
NEXT_ROW_KEY_HEADER = "x-ms-continuation-NextRowKey"


def sas_params(sas_token: str | None) -> dict[str, str]:
    """Split a SAS token (with or without leading '?') into query params."""
    if not sas_token:
        return {}
    return dict(parse_qsl(sas_token.lstrip("?"), keep_blank_values=True))


def query_params(
    partition_filter: str,
    continuation: ContinuationToken | None,
    sas_token: str | None = None,
) -> dict[str, str]:
    """Format the query string of a Query Entities call."""
    params = {"$filter": partition_filter}
    if continuation is not None:
        params["NextPartitionKey"] = continuation.next_partition_key
        if continuation.next_row_key is not None:
            params["NextRowKey"] = continuation.next_row_key
    params.update(sas_params(sas_token))
    return params


def continuation_from_headers(headers: httpx.Headers) -> ContinuationToken | None:
    """Return the continuation token of a response, None on the last page."""
    next_pk = headers.get(NEXT_PARTITION_KEY_HEADER)
    if not next_pk:
        return None
    return ContinuationToken(next_partition_key=next_pk, next_row_key=headers.get(NEXT_ROW_KEY_HEADER) or None)


class TableClient:
    """Minimal async Table Storage client.

    Parameters
    ----------
    account_url : str
        Table service endpoint, e.g. ``https://<account>.table.core.windows.net``.
    table : str
        Name of the table holding subscription events.
    sas_token : str | None
        Shared access signature appended to every request.
    user_field : str
        Entity property holding the user identifier.
    timeout_s : int
        Per-operation timeout in seconds (connect/read/write).
    max_connections : int
        Maximum concurrent connections to keep in the pool.
    transport : httpx.AsyncBaseTransport | None
        Custom transport, mostly for tests.
    """

    def __init__(
        self,
        account_url: str,
        table: str,
        *,
        sas_token: str | None = None,
        user_field: str = "hashedFiscalCode",
        timeout_s: int = 20,
        max_connections: int = 64,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = f"{account_url.rstrip('/')}/{table}()"
        self.sas_token = sas_token
        self.user_field = user_field
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(
                connect=timeout_s,
                read=timeout_s,
                write=timeout_s,
                pool=max(30, timeout_s * 3),
            ),
            limits=httpx.Limits(
                max_connections=max_connections,
                max_keepalive_connections=max(1, max_connections // 2),
            ),
            headers={
                "Accept": "application/json;odata=nometadata",
                "x-ms-version": API_VERSION,
            },
            http2=transport is None,
            transport=transport,
        )

    @classmethod
    def from_config(cls, config: FeedConfig, **kwargs) -> TableClient:
        return cls(
            config.account_url,
            config.table,
            sas_token=config.sas_token,
            user_field=config.user_field,
            timeout_s=config.timeout_s,
            max_connections=config.max_connections,
            **kwargs,
        )

    async def query_page(
        self,
        *,
        partition_filter: str,
        continuation: ContinuationToken | None = None,
    ) -> Page:
        """Fetch one page of entities matching `partition_filter`."""
        params = query_params(partition_filter, continuation, self.sas_token)
        try:
            r = await self.client.get(self.url, params=params)
            r.raise_for_status()
            data = r.json()
        except httpx.HTTPStatusError as e:
            raise StoreQueryError(f"Table query failed with HTTP {e.response.status_code}: {_error_message(e.response)}", e) from e
        except httpx.HTTPError as e:
            raise StoreQueryError(f"Table query failed: {type(e).__name__}: {e}", e) from e
        except ValueError as e:
            raise StoreQueryError(f"Table query returned a malformed body: {e}", e) from e

        records: list[UserRecord] = []
        try:
            for entity in data.get("value", []):
                records.append(
                    UserRecord(
                        partition_key=entity["PartitionKey"],
                        row_key=entity["RowKey"],
                        user_id=entity[self.user_field],
                    )
                )
        except (AttributeError, KeyError, TypeError) as e:
            raise StoreQueryError(f"Table query returned an unexpected entity: {e!r}", e) from e

        return Page(records=tuple(records), continuation=continuation_from_headers(r.headers))

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> TableClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def _error_message(response: httpx.Response) -> str:
    try:
        err = response.json().get("odata.error", {})
        return err.get("message", {}).get("value") or response.reason_phrase
    except (ValueError, AttributeError):
        return response.reason_phrase
