"""Helpers shared by CLI commands."""

from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.panel import Panel

from tokenwatch.config import Settings, load_settings
from tokenwatch.errors import ConfigError

console = Console()


def error_panel(message: str, hint: Optional[str] = None) -> None:
    body = f"[red]{message}[/red]"
    if hint:
        body += f"\n\n{hint}"
    console.print(Panel(
        body,
        title="[bold red]Error[/bold red]",
        border_style="red",
    ))


def get_settings(config_path: Optional[Path], require_token: bool = True) -> Settings:
    """Load settings or exit with an error panel.

    Raises:
        SystemExit: If the configuration is missing or invalid.
    """
    try:
        return load_settings(config_path, require_token=require_token)
    except ConfigError as e:
        error_panel(
            str(e),
            "Run [cyan]tokenwatch init[/cyan] to create a config file, "
            "or set the [cyan]BOT_TOKEN[/cyan] environment variable.",
        )
        raise SystemExit(1)
