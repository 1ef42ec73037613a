"""Shared fakes for tokenwatch tests."""

from typing import Callable, Optional

import httpx
import pytest

from tokenwatch.providers.base import Provider
from tokenwatch.providers.service import PriceService
from tokenwatch.providers.source import CachedSource


class FakeNotifier:
    """Records messages instead of sending them."""

    def __init__(self, ok: bool = True):
        self.ok = ok
        self.sent: list[tuple[int, str]] = []

    async def send_message(self, chat_id: int, text: str) -> bool:
        self.sent.append((chat_id, text))
        return self.ok

    def texts_for(self, chat_id: int) -> list[str]:
        return [text for cid, text in self.sent if cid == chat_id]


class StaticProvider(Provider):
    """Provider returning a settable value and counting calls."""

    def __init__(self, value: Optional[float], name: str = "static"):
        super().__init__(client=None)
        self.value = value
        self.name = name
        self.calls = 0

    async def fetch(self) -> Optional[float]:
        self.calls += 1
        return self.value


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_price_service(
    price: Optional[float] = 0.04,
    rate: Optional[float] = None,
    currency: str = "INR",
) -> PriceService:
    """Price service backed by static providers with caching disabled."""
    prices = CachedSource([StaticProvider(price, "price")], ttl=0)
    rates = None
    if rate is not None:
        rates = CachedSource([StaticProvider(rate, "rate")], ttl=0)
    return PriceService(prices, rates, currency=currency)


def set_price(service: PriceService, price: Optional[float]) -> None:
    service.prices.providers[0].value = price


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def dex_pair(price, liquidity=None, name="DeepNode", symbol="DN", dex="raydium") -> dict:
    record = {
        "dexId": dex,
        "priceUsd": None if price is None else str(price),
        "baseToken": {"name": name, "symbol": symbol},
    }
    if liquidity is not None:
        record["liquidity"] = {"usd": liquidity}
    return record


@pytest.fixture
def notifier():
    return FakeNotifier()
