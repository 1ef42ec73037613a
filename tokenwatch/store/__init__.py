"""Alert storage for tokenwatch."""

from tokenwatch.store.alerts import AlertStore

__all__ = ["AlertStore"]
