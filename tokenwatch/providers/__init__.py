"""Price and exchange-rate providers for tokenwatch."""

from tokenwatch.providers.base import Provider
from tokenwatch.providers.coingecko import CoinGeckoProvider
from tokenwatch.providers.dexscreener import DexScreenerProvider, select_pair
from tokenwatch.providers.fx import FxProvider, default_fx_providers
from tokenwatch.providers.service import PriceService, build_price_service
from tokenwatch.providers.source import CacheEntry, CachedSource, first_success

__all__ = [
    "CacheEntry",
    "CachedSource",
    "CoinGeckoProvider",
    "DexScreenerProvider",
    "FxProvider",
    "PriceService",
    "Provider",
    "build_price_service",
    "default_fx_providers",
    "first_success",
    "select_pair",
]
