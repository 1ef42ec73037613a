"""USD exchange-rate providers."""

import logging
from typing import Any, Optional

import httpx

from tokenwatch.providers.base import Provider, positive_float

logger = logging.getLogger(__name__)

EXCHANGERATE_API_URL = "https://api.exchangerate-api.com/v4/latest/USD"
FRANKFURTER_URL = "https://api.frankfurter.app/latest"
CURRENCY_API_URL = "https://cdn.jsdelivr.net/npm/@fawazahmed0/currency-api@latest/v1/currencies/usd.json"


class FxProvider(Provider):
    """Fetches the USD rate for one target currency from a public FX API."""

    url: str = ""
    params: Optional[dict[str, str]] = None

    def __init__(self, client: httpx.AsyncClient, currency: str = "INR", timeout: float = 5.0):
        super().__init__(client, timeout)
        self.currency = currency.upper()

    def extract_rate(self, data: Any) -> Optional[float]:
        """Pull the rate out of a decoded response body."""
        rates = data.get("rates") if isinstance(data, dict) else None
        if not isinstance(rates, dict):
            return None
        return positive_float(rates.get(self.currency))

    async def fetch(self) -> Optional[float]:
        data = await self._get_json(self.url, params=self.params)
        if data is None:
            return None

        rate = self.extract_rate(data)
        if rate is None:
            logger.warning(f"[{self.name}] No {self.currency} rate in response")
            return None

        logger.info(f"[{self.name}] USD/{self.currency} = {rate}")
        return rate


class ExchangeRateApiProvider(FxProvider):
    name = "exchangerate-api"
    url = EXCHANGERATE_API_URL


class FrankfurterProvider(FxProvider):
    name = "frankfurter"
    url = FRANKFURTER_URL
    params = {"from": "USD"}


class CurrencyApiProvider(FxProvider):
    """jsDelivr-hosted currency-api; keys are lowercase and nested under ``usd``."""

    name = "currency-api"
    url = CURRENCY_API_URL

    def extract_rate(self, data: Any) -> Optional[float]:
        usd = data.get("usd") if isinstance(data, dict) else None
        if not isinstance(usd, dict):
            return None
        return positive_float(usd.get(self.currency.lower()))


FX_PROVIDERS = [ExchangeRateApiProvider, FrankfurterProvider, CurrencyApiProvider]


def default_fx_providers(client: httpx.AsyncClient, currency: str, timeout: float = 5.0) -> list[FxProvider]:
    """Build the FX fallback chain in priority order."""
    return [cls(client, currency=currency, timeout=timeout) for cls in FX_PROVIDERS]
