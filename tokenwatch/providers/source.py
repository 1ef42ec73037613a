"""Cached, fallback-aware value sources built from providers."""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from tokenwatch.providers.base import Provider

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """Last successfully fetched value and when it was fetched."""

    value: Optional[float] = None
    fetched_at: float = 0.0

    def is_fresh(self, now: float, ttl: float) -> bool:
        return self.value is not None and now - self.fetched_at < ttl


async def first_success(providers: Sequence[Provider]) -> Optional[float]:
    """Try providers in order and return the first value any of them yields.

    Args:
        providers: Providers in priority order.

    Returns:
        The first non-None value, or None if every provider came up empty.
    """
    for provider in providers:
        value = await provider.fetch()
        if value is not None:
            return value
        logger.debug(f"{provider.name} returned nothing, trying next provider")
    return None


class CachedSource:
    """A provider chain fronted by a time-to-live cache.

    Only successful fetches touch the cache. When the whole chain fails the
    source returns ``fallback`` (None unless configured); a non-None
    fallback is cached like a fetched value so the chain is not hammered
    on every call.
    """

    def __init__(
        self,
        providers: Sequence[Provider],
        ttl: float,
        name: str = "price",
        fallback: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the source.

        Args:
            providers: Provider chain in priority order.
            ttl: Seconds a fetched value stays trusted.
            name: Label used in log messages.
            fallback: Value returned (and cached) when every provider fails.
            clock: Monotonic time function, injectable for tests.
        """
        self.providers = list(providers)
        self.ttl = ttl
        self.name = name
        self.fallback = fallback
        self._clock = clock
        self._cache = CacheEntry()

    @property
    def cached(self) -> Optional[float]:
        """Last cached value regardless of freshness."""
        return self._cache.value

    def is_fresh(self) -> bool:
        return self._cache.is_fresh(self._clock(), self.ttl)

    def invalidate(self) -> None:
        self._cache = CacheEntry()

    async def get(self) -> Optional[float]:
        """Return the current value, from cache while fresh.

        Returns:
            The value, or the fallback (possibly None) if nothing could be fetched.
        """
        now = self._clock()
        if self._cache.is_fresh(now, self.ttl):
            logger.debug(f"Using cached {self.name}: {self._cache.value}")
            return self._cache.value

        value = await first_success(self.providers)
        if value is not None:
            self._cache = CacheEntry(value=value, fetched_at=self._clock())
            return value

        if self.fallback is not None:
            logger.warning(f"All {self.name} providers failed, using fallback {self.fallback}")
            self._cache = CacheEntry(value=self.fallback, fetched_at=self._clock())
            return self.fallback

        logger.warning(f"Could not fetch {self.name} from any provider")
        return None
