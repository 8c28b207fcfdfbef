from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_TABLE = "SubscriptionsFeedByDay"
DEFAULT_USER_FIELD = "hashedFiscalCode"

ENV_PREFIX = "SUBSCRIPTIONS_FEED_"


@dataclass(frozen=True)
class FeedConfig:
    """Configuration for the table store and the feed reconciliation."""

    account_url: str
    table: str = DEFAULT_TABLE
    sas_token: str | None = None
    user_field: str = DEFAULT_USER_FIELD
    timeout_s: int = 20
    max_connections: int = 64
    deadline_s: float | None = None  # whole-reconciliation budget, None = unbounded

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> FeedConfig:
        """Build a config from `SUBSCRIPTIONS_FEED_*` environment variables."""
        env = os.environ if environ is None else environ
        account_url = env.get(f"{ENV_PREFIX}ACCOUNT_URL")
        if not account_url:
            raise ValueError(f"{ENV_PREFIX}ACCOUNT_URL must be set")
        deadline = env.get(f"{ENV_PREFIX}DEADLINE_S")
        timeout = env.get(f"{ENV_PREFIX}TIMEOUT_S")
        max_connections = env.get(f"{ENV_PREFIX}MAX_CONNECTIONS")
        return cls(
            account_url=account_url,
            table=env.get(f"{ENV_PREFIX}TABLE") or DEFAULT_TABLE,
            sas_token=env.get(f"{ENV_PREFIX}SAS_TOKEN") or None,
            user_field=env.get(f"{ENV_PREFIX}USER_FIELD") or DEFAULT_USER_FIELD,
            timeout_s=int(timeout) if timeout else 20,
            max_connections=int(max_connections) if max_connections else 64,
            deadline_s=float(deadline) if deadline else None,
        )
