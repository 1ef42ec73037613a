"""Run the alert bot."""

from pathlib import Path
from typing import Optional

import click

from tokenwatch.cli.common import get_settings
from tokenwatch.log import setup_logging


@click.command()
@click.option(
    "-c", "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ~/.config/tokenwatch/config.toml)",
)
@click.option("--host", default=None, help="Interface to bind (overrides config)")
@click.option("--port", type=int, default=None, help="Port to listen on (overrides config)")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def serve(config_path: Optional[Path], host: Optional[str], port: Optional[int], debug: bool) -> None:
    """Start the webhook server and the price alert loop.

    Point your bot's webhook at http://HOST:PORT/telegram.

    \b
    Examples:
      tokenwatch serve
      BOT_TOKEN=123:abc tokenwatch serve --port 8080
    """
    settings = get_settings(config_path)
    setup_logging(debug=debug)

    # aiohttp is only needed when actually serving
    from tokenwatch.bot.server import run_server

    run_server(settings, host=host, port=port)
