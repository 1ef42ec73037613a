"""tokenwatch - Telegram price alerts for a single crypto token."""

__version__ = "0.1.0"
