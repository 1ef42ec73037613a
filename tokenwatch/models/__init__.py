"""Data models for tokenwatch."""

from tokenwatch.models.alert import Alert
from tokenwatch.models.price import PriceSnapshot, TradingPair

__all__ = [
    "Alert",
    "PriceSnapshot",
    "TradingPair",
]
