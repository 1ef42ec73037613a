"""Main CLI entry point for tokenwatch."""

from pathlib import Path
from typing import Optional

import click

from tokenwatch.cli.common import console
from tokenwatch.cli.price import price
from tokenwatch.cli.serve import serve
from tokenwatch.config import DEFAULT_CONFIG_PATH, write_template_config

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="tokenwatch")
def cli() -> None:
    """tokenwatch - Telegram price alerts for a crypto token.

    \b
    Quick Start:
      tokenwatch init     # Create a config file
      tokenwatch price    # Check the current price
      tokenwatch serve    # Run the bot
    """


@click.command()
@click.option(
    "-c", "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Where to write the config file",
)
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
def init(config_path: Optional[Path], force: bool) -> None:
    """Create a template configuration file."""
    path = config_path or DEFAULT_CONFIG_PATH

    if path.exists() and not force:
        console.print(f"[yellow]Config already exists at {path}[/yellow] (use --force to overwrite)")
        return

    written = write_template_config(path)
    console.print(f"[green]✓ Created config at {written}[/green]")
    console.print("[dim]Set telegram.bot_token there or export BOT_TOKEN.[/dim]")


cli.add_command(init)
cli.add_command(price)
cli.add_command(serve)


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
