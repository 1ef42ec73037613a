"""One-shot price lookup."""

import asyncio
from pathlib import Path
from typing import Optional

import click
import httpx
from rich.table import Table

from tokenwatch.cli.common import console, error_panel, get_settings
from tokenwatch.config import Settings
from tokenwatch.log import setup_logging
from tokenwatch.models import PriceSnapshot
from tokenwatch.providers import build_price_service


async def fetch_snapshot(settings: Settings, client: Optional[httpx.AsyncClient] = None) -> PriceSnapshot:
    """Fetch one price snapshot outside the server."""
    if client is not None:
        return await build_price_service(settings, client).snapshot()

    async with httpx.AsyncClient(follow_redirects=True) as owned:
        return await build_price_service(settings, owned).snapshot()


@click.command()
@click.option(
    "-c", "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ~/.config/tokenwatch/config.toml)",
)
@click.option("--debug", is_flag=True, help="Show provider logs")
def price(config_path: Optional[Path], debug: bool) -> None:
    """Fetch and display the current token price.

    Walks the same provider chain the bot uses. No bot token is required.
    """
    settings = get_settings(config_path, require_token=False)
    setup_logging(debug=debug)

    with console.status(f"Fetching {settings.token.name} price..."):
        snapshot = asyncio.run(fetch_snapshot(settings))

    if snapshot.usd is None:
        error_panel(f"Could not fetch {settings.token.name} price from any provider.")
        raise SystemExit(1)

    table = Table(
        title=f"{settings.token.name} Price",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Currency", style="bold")
    table.add_column("Price", justify="right")

    table.add_row("USD", f"${snapshot.usd:.6f}")
    if snapshot.converted is not None and snapshot.rate is not None:
        table.add_row(snapshot.currency, f"{snapshot.converted:.2f}")
        table.add_row(f"USD/{snapshot.currency}", f"{snapshot.rate:.2f}", style="dim")

    console.print(table)
