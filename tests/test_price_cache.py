"""Tests for cached sources and the price service.

**Feature: price-cache**
"""

import asyncio

import httpx
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tokenwatch.config import Settings, TokenSettings
from tokenwatch.providers import CachedSource, DexScreenerProvider, PriceService, build_price_service
from tokenwatch.providers.service import build_price_providers
from tokenwatch.providers.source import CacheEntry

from conftest import FakeClock, StaticProvider, dex_pair, mock_client


class CountingHandler:
    def __init__(self, response_json=None, status=200):
        self.response_json = response_json
        self.status = status
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.response_json is None:
            return httpx.Response(self.status)
        return httpx.Response(self.status, json=self.response_json)


class TestCacheEntry:

    @given(
        age=st.floats(min_value=0, max_value=10_000, allow_nan=False),
        ttl=st.floats(min_value=0, max_value=10_000, allow_nan=False),
    )
    @settings(max_examples=100)
    def test_fresh_only_within_ttl(self, age: float, ttl: float):
        entry = CacheEntry(value=1.0, fetched_at=0.0)
        assert entry.is_fresh(age, ttl) == (age < ttl)

    def test_empty_entry_never_fresh(self):
        assert not CacheEntry().is_fresh(0.0, 1e9)


class TestCachedSource:

    def test_two_calls_within_ttl_issue_one_request(self):
        handler = CountingHandler({"pairs": [dex_pair("0.035", liquidity=100)]})
        clock = FakeClock()

        async def _run():
            async with mock_client(handler) as client:
                source = CachedSource([DexScreenerProvider(client, "deepnode")], ttl=120, clock=clock)
                first = await source.get()
                clock.advance(119)
                second = await source.get()
                return first, second

        first, second = asyncio.run(_run())

        assert first == second == 0.035
        assert len(handler.requests) == 1

    def test_refetches_after_ttl(self):
        provider = StaticProvider(0.03)
        clock = FakeClock()
        source = CachedSource([provider], ttl=120, clock=clock)

        assert asyncio.run(source.get()) == 0.03
        clock.advance(120)
        provider.value = 0.04
        assert asyncio.run(source.get()) == 0.04
        assert provider.calls == 2

    def test_failure_does_not_overwrite_cache(self):
        provider = StaticProvider(0.03)
        clock = FakeClock()
        source = CachedSource([provider], ttl=60, clock=clock)

        asyncio.run(source.get())
        clock.advance(61)
        provider.value = None

        # Stale data is not trusted
        assert asyncio.run(source.get()) is None
        assert source.cached == 0.03
        assert not source.is_fresh()

    def test_failure_is_not_cached(self):
        provider = StaticProvider(None)
        source = CachedSource([provider], ttl=60, clock=FakeClock())

        assert asyncio.run(source.get()) is None
        assert asyncio.run(source.get()) is None
        assert provider.calls == 2

    def test_falls_through_chain_in_order(self):
        dex_terms = [StaticProvider(None, "dex:a"), StaticProvider(None, "dex:b")]
        gecko = StaticProvider(0.05, "gecko")
        source = CachedSource([*dex_terms, gecko], ttl=60, clock=FakeClock())

        assert asyncio.run(source.get()) == 0.05
        assert [p.calls for p in (*dex_terms, gecko)] == [1, 1, 1]

    def test_fallback_value_used_and_cached(self):
        providers = [StaticProvider(None, "a"), StaticProvider(None, "b")]
        source = CachedSource(providers, ttl=1800, fallback=83.0, clock=FakeClock())

        assert asyncio.run(source.get()) == 83.0
        assert asyncio.run(source.get()) == 83.0
        assert all(p.calls == 1 for p in providers)

    def test_invalidate_forces_refetch(self):
        provider = StaticProvider(1.0)
        source = CachedSource([provider], ttl=60, clock=FakeClock())

        asyncio.run(source.get())
        source.invalidate()
        asyncio.run(source.get())
        assert provider.calls == 2


class TestPriceService:

    def test_snapshot_converts_with_rate(self):
        service = PriceService(
            CachedSource([StaticProvider(0.04)], ttl=0),
            CachedSource([StaticProvider(83.0)], ttl=0),
            currency="INR",
        )
        snapshot = asyncio.run(service.snapshot())

        assert snapshot.usd == 0.04
        assert snapshot.rate == 83.0
        assert snapshot.converted == pytest.approx(3.32)
        assert snapshot.currency == "INR"

    def test_snapshot_without_price(self):
        service = PriceService(
            CachedSource([StaticProvider(None)], ttl=0),
            CachedSource([StaticProvider(83.0)], ttl=0),
        )
        snapshot = asyncio.run(service.snapshot())

        assert snapshot.usd is None
        assert snapshot.converted is None
        assert snapshot.rate == 83.0
        assert not snapshot.available

    def test_snapshot_without_rate_source(self):
        service = PriceService(CachedSource([StaticProvider(0.04)], ttl=0))
        snapshot = asyncio.run(service.snapshot())

        assert snapshot.usd == 0.04
        assert snapshot.converted is None
        assert asyncio.run(service.get_rate()) is None


class TestBuildPriceService:

    def test_chain_has_one_provider_per_term_then_coingecko(self):
        config = Settings(token=TokenSettings(
            search_terms=["deepnode", "deep node"],
            coingecko_id="deepnode",
        ))
        names = [p.name for p in build_price_providers(config, client=None)]
        assert names == ["DexScreener:deepnode", "DexScreener:deep node", "CoinGecko:deepnode"]

    def test_fx_disabled(self):
        config = Settings.model_validate({"fx": {"enabled": False}})
        service = build_price_service(config, client=None)
        assert service.rates is None

    def test_uses_configured_ttls(self):
        config = Settings.model_validate({
            "monitor": {"price_cache_ttl": 30},
            "fx": {"cache_ttl": 600, "fallback_rate": 80.0},
        })
        service = build_price_service(config, client=None)
        assert service.prices.ttl == 30
        assert service.rates.ttl == 600
        assert service.rates.fallback == 80.0
