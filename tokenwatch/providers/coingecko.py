"""CoinGecko simple-price provider."""

import logging
from typing import Optional

import httpx

from tokenwatch.providers.base import Provider, positive_float

logger = logging.getLogger(__name__)

COINGECKO_BASE_URL = "https://api.coingecko.com/api/v3"


class CoinGeckoProvider(Provider):
    """Looks up a coin's USD price by its CoinGecko id."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        coin_id: str,
        timeout: float = 8.0,
        base_url: str = COINGECKO_BASE_URL,
    ):
        super().__init__(client, timeout)
        self.coin_id = coin_id
        self.name = f"CoinGecko:{coin_id}"
        self._base_url = base_url.rstrip("/")

    async def fetch(self) -> Optional[float]:
        data = await self._get_json(
            f"{self._base_url}/simple/price",
            params={"ids": self.coin_id, "vs_currencies": "usd"},
        )
        # {"<coin_id>": {"usd": 0.0351}}
        if not isinstance(data, dict) or not isinstance(data.get(self.coin_id), dict):
            if data is not None:
                logger.warning(f"[{self.name}] Coin missing from response")
            return None

        price = positive_float(data[self.coin_id].get("usd"))
        if price is not None:
            logger.info(f"[{self.name}] ${price}")
        return price
