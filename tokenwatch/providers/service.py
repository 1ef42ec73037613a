"""Price service combining the token price with the local-currency rate."""

from typing import Optional

import httpx

from tokenwatch.config import Settings
from tokenwatch.models import PriceSnapshot
from tokenwatch.providers.base import Provider
from tokenwatch.providers.coingecko import CoinGeckoProvider
from tokenwatch.providers.dexscreener import DexScreenerProvider
from tokenwatch.providers.fx import default_fx_providers
from tokenwatch.providers.source import CachedSource


class PriceService:
    """Produces price snapshots for the watched token.

    The rate source is optional; without it snapshots carry only the USD
    price.
    """

    def __init__(
        self,
        prices: CachedSource,
        rates: Optional[CachedSource] = None,
        currency: str = "INR",
    ):
        self.prices = prices
        self.rates = rates
        self.currency = currency

    async def get_price(self) -> Optional[float]:
        return await self.prices.get()

    async def get_rate(self) -> Optional[float]:
        if self.rates is None:
            return None
        return await self.rates.get()

    async def snapshot(self) -> PriceSnapshot:
        """Fetch the USD price and convert it.

        Returns:
            Snapshot whose ``usd`` is None when no price could be fetched.
        """
        usd = await self.get_price()
        rate = await self.get_rate()
        converted = usd * rate if usd is not None and rate is not None else None
        return PriceSnapshot(usd=usd, converted=converted, rate=rate, currency=self.currency)


def build_price_providers(settings: Settings, client: httpx.AsyncClient) -> list[Provider]:
    """Build the token price chain: one DexScreener search per term, then CoinGecko."""
    token = settings.token
    timeout = settings.monitor.request_timeout

    providers: list[Provider] = [
        DexScreenerProvider(
            client,
            term,
            token_name=token.name if token.match_pairs else None,
            token_symbol=token.symbol if token.match_pairs else None,
            timeout=timeout,
        )
        for term in token.search_terms
    ]
    if token.coingecko_id:
        providers.append(CoinGeckoProvider(client, token.coingecko_id, timeout=timeout))
    return providers


def build_price_service(settings: Settings, client: httpx.AsyncClient) -> PriceService:
    """Wire up the price and rate sources described by settings."""
    prices = CachedSource(
        build_price_providers(settings, client),
        ttl=settings.monitor.price_cache_ttl,
        name="price",
    )

    rates = None
    if settings.fx.enabled:
        rates = CachedSource(
            default_fx_providers(client, settings.fx.currency, timeout=settings.monitor.request_timeout),
            ttl=settings.fx.cache_ttl,
            name=f"USD/{settings.fx.currency} rate",
            fallback=settings.fx.fallback_rate,
        )

    return PriceService(prices, rates, currency=settings.fx.currency)
