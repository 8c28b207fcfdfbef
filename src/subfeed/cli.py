import asyncio
import json
import logging
from datetime import date

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from subfeed.core.config import DEFAULT_TABLE, DEFAULT_USER_FIELD, ENV_PREFIX, FeedConfig
from subfeed.core.errors import InvalidDateError
from subfeed.orchestration.feed import FeedResponse, fetch_feed
from subfeed.orchestration.utils import parse_short_date

console = Console()


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def _parse_date(ctx: click.Context, param: click.Parameter, value: str) -> date:
    try:
        return parse_short_date(value)
    except InvalidDateError as e:
        raise click.BadParameter(str(e)) from e


def _print_summary(response: FeedResponse) -> None:
    feed = response.feed
    table = Table(title=f"subscriptions feed • {feed.date_utc.isoformat()}")
    table.add_column("kind")
    table.add_column("users", justify="right")
    table.add_row("[green]subscriptions[/]", str(len(feed.subscriptions)))
    table.add_row("[red]unsubscriptions[/]", str(len(feed.unsubscriptions)))
    console.print(table)


@click.group()
def cli() -> None:
    """subfeed — daily subscriptions feed of a notification service."""


@cli.command("get-feed")
@click.option("--date", "day", required=True, callback=_parse_date, help="Day of the feed (YYYY-MM-DD, UTC)")
@click.option("--service-id", required=True, help="Service the feed is computed for")
@click.option("--account-url", envvar=f"{ENV_PREFIX}ACCOUNT_URL", required=True, help="Table service endpoint")
@click.option("--table", envvar=f"{ENV_PREFIX}TABLE", default=DEFAULT_TABLE, show_default=True)
@click.option("--sas-token", envvar=f"{ENV_PREFIX}SAS_TOKEN", default=None, help="Shared access signature")
@click.option("--user-field", envvar=f"{ENV_PREFIX}USER_FIELD", default=DEFAULT_USER_FIELD, show_default=True)
@click.option("--timeout", "timeout_s", envvar=f"{ENV_PREFIX}TIMEOUT_S", type=int, default=20, show_default=True, help="Per-request timeout (s)")
@click.option("--deadline", "deadline_s", envvar=f"{ENV_PREFIX}DEADLINE_S", type=float, default=None, help="Budget for the whole feed (s)")
@click.option("--output", type=click.Choice(["json", "table"]), default="json", show_default=True)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default="warning",
    show_default=True,
)
@click.pass_context
def get_feed_cmd(
    ctx: click.Context,
    day: date,
    service_id: str,
    account_url: str,
    table: str,
    sas_token: str | None,
    user_field: str,
    timeout_s: int,
    deadline_s: float | None,
    output: str,
    log_level: str,
) -> None:
    """Print the users who subscribed to / unsubscribed from a service on a day."""
    _setup_logging(log_level)

    config = FeedConfig(
        account_url=account_url,
        table=table,
        sas_token=sas_token,
        user_field=user_field,
        timeout_s=timeout_s,
        deadline_s=deadline_s,
    )

    response = asyncio.run(fetch_feed(config, date_utc=day, service_id=service_id))
    if response.status_code == 404:
        click.echo(f"{response.body['title']}: {response.body['detail']}", err=True)
        ctx.exit(2)
    if not response.ok:
        raise click.ClickException(f"{response.body['title']}: {response.body['detail']}")

    if output == "table":
        _print_summary(response)
    else:
        click.echo(json.dumps(response.body, indent=2))


if __name__ == "__main__":
    cli()
