"""Command-line interface for tokenwatch."""

from tokenwatch.cli.main import cli, main

__all__ = ["cli", "main"]
