"""Base interface for price and exchange-rate providers."""

import logging
import math
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)

USER_AGENT = "tokenwatch/0.1"


class Provider(ABC):
    """One market-data source queried for a single number.

    Implementations never raise on network or payload problems: they log
    and return None so the next provider in the chain gets its turn.
    """

    name: str = "provider"

    def __init__(self, client: httpx.AsyncClient, timeout: float = 8.0):
        """Initialize the provider.

        Args:
            client: Shared HTTP client.
            timeout: Per-request timeout in seconds.
        """
        self._client = client
        self._timeout = timeout

    @abstractmethod
    async def fetch(self) -> Optional[float]:
        """Fetch the value from the remote source.

        Returns:
            A strictly positive value, or None if the source had nothing usable.
        """
        pass

    async def _get_json(self, url: str, params: Optional[dict[str, str]] = None) -> Optional[Any]:
        """HTTP GET returning decoded JSON, or None on any failure."""
        try:
            response = await self._client.get(
                url,
                params=params,
                headers={"User-Agent": USER_AGENT},
                timeout=self._timeout,
            )
        except httpx.HTTPError as e:
            logger.warning(f"[{self.name}] Request error: {e}")
            return None

        if response.status_code == 429:
            logger.warning(f"[{self.name}] Rate limited (HTTP 429)")
            return None
        if response.status_code != 200:
            logger.warning(f"[{self.name}] HTTP error {response.status_code}")
            return None

        try:
            return response.json()
        except ValueError:
            logger.warning(f"[{self.name}] Malformed JSON response")
            return None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"


def positive_float(value: Any) -> Optional[float]:
    """Parse value as a finite float greater than zero, else None."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    return number
