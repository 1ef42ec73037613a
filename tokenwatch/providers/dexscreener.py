"""DexScreener pair-search price provider."""

import logging
from typing import Any, Iterable, Optional

import httpx

from tokenwatch.models import TradingPair
from tokenwatch.providers.base import Provider, positive_float

logger = logging.getLogger(__name__)

DEXSCREENER_SEARCH_URL = "https://api.dexscreener.com/latest/dex/search"


def parse_pairs(data: Any) -> list[TradingPair]:
    """Extract trading pairs with a usable price from a search response.

    Records without a strictly positive ``priceUsd`` are dropped.

    Args:
        data: Decoded JSON body of a DexScreener search.

    Returns:
        Parsed pairs, in response order.
    """
    if not isinstance(data, dict) or not isinstance(data.get("pairs"), list):
        return []

    pairs = []
    for record in data["pairs"]:
        if not isinstance(record, dict):
            continue

        price = positive_float(record.get("priceUsd"))
        if price is None:
            continue

        liquidity = record.get("liquidity") or {}
        base = record.get("baseToken") or {}
        pairs.append(TradingPair(
            price_usd=price,
            liquidity_usd=positive_float(liquidity.get("usd") if isinstance(liquidity, dict) else None) or 0.0,
            base_name=str(base.get("name") or "") if isinstance(base, dict) else "",
            base_symbol=str(base.get("symbol") or "") if isinstance(base, dict) else "",
            dex_id=str(record.get("dexId") or ""),
        ))
    return pairs


def matches_token(pair: TradingPair, name: Optional[str], symbol: Optional[str]) -> bool:
    """Check whether a pair's base token is the one we are watching.

    A pair matches if its symbol equals ``symbol`` or its name contains
    ``name`` (both case-insensitive). With neither given, every pair matches.
    """
    if not name and not symbol:
        return True
    if symbol and pair.base_symbol.lower() == symbol.lower():
        return True
    if name and name.lower() in pair.base_name.lower():
        return True
    return False


def select_pair(
    pairs: Iterable[TradingPair],
    name: Optional[str] = None,
    symbol: Optional[str] = None,
) -> Optional[TradingPair]:
    """Pick the most liquid priced pair for the token.

    Args:
        pairs: Candidate pairs.
        name: Token name to match, if any.
        symbol: Token symbol to match, if any.

    Returns:
        The matching pair with the highest USD liquidity, or None.
    """
    candidates = [
        p for p in pairs
        if p.price_usd > 0 and matches_token(p, name, symbol)
    ]
    if not candidates:
        return None
    # max() keeps the first of equal-liquidity pairs
    return max(candidates, key=lambda p: p.liquidity_usd)


class DexScreenerProvider(Provider):
    """Searches DexScreener for one query term and prices the best pair."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        term: str,
        token_name: Optional[str] = None,
        token_symbol: Optional[str] = None,
        timeout: float = 8.0,
        url: str = DEXSCREENER_SEARCH_URL,
    ):
        super().__init__(client, timeout)
        self.term = term
        self.name = f"DexScreener:{term}"
        self._token_name = token_name
        self._token_symbol = token_symbol
        self._url = url

    async def fetch(self) -> Optional[float]:
        data = await self._get_json(self._url, params={"q": self.term})
        if data is None:
            return None

        pair = select_pair(parse_pairs(data), self._token_name, self._token_symbol)
        if pair is None:
            logger.info(f"[{self.name}] No matching pair with a price")
            return None

        logger.info(
            f"[{self.name}] ${pair.price_usd} on {pair.dex_id or 'unknown DEX'} "
            f"(liquidity ${pair.liquidity_usd:,.0f})"
        )
        return pair.price_usd
