"""
Cache service for Solana Analytics.

This module provides the whole-value TTL caches owned by the long-lived
analytics service: the token list cache and the aggregated news cache.
"""

import logging
import time
from typing import Any, Awaitable, Callable, Dict, Generic, Optional, TypeVar

from solana_analytics.config import CacheConfig, get_cache_config

T = TypeVar('T')

logger = logging.getLogger(__name__)


class TimedCache(Generic[T]):
    """
    A single cached value with the time it was last refreshed.

    A failed refresh never clears or overwrites the existing entry. Concurrent
    refills are not serialized: racing requests may each refetch, and the
    last writer wins.
    """

    def __init__(self, name: str, ttl: float, clock: Callable[[], float] = time.time):
        """
        Initialize the cache.

        Args:
            name: Cache name for logging
            ttl: Time to live in seconds
            clock: Time source returning seconds since the epoch
        """
        self.name = name
        self.ttl = ttl
        self.clock = clock
        self.data: Optional[T] = None
        self.last_refreshed_at: Optional[float] = None
        self.hits = 0
        self.misses = 0

    def has_data(self) -> bool:
        """Check whether any value, fresh or stale, is held."""
        return self.last_refreshed_at is not None

    def is_fresh(self) -> bool:
        """Check whether the held value is within its TTL."""
        if self.last_refreshed_at is None:
            return False
        return self.clock() - self.last_refreshed_at < self.ttl

    def set(self, data: T) -> None:
        """Store a value and stamp it with the current time."""
        self.data = data
        self.last_refreshed_at = self.clock()

    def clear(self) -> None:
        """Drop the held value."""
        self.data = None
        self.last_refreshed_at = None

    async def get_or_fetch(
        self,
        fetch_func: Callable[[], Awaitable[T]],
        serve_stale: bool = True
    ) -> T:
        """
        Return the fresh value, or refetch and store it.

        Args:
            fetch_func: Async function producing a new value
            serve_stale: Return the expired value if the refetch fails

        Returns:
            Cached or freshly fetched value

        Raises:
            Exception: The refetch failure, when there is nothing to serve
        """
        if self.is_fresh():
            self.hits += 1
            logger.debug(f"Cache hit for {self.name}")
            return self.data

        self.misses += 1
        logger.debug(f"Cache miss for {self.name}, fetching fresh data")
        try:
            data = await fetch_func()
        except Exception as e:
            if serve_stale and self.has_data():
                logger.warning(f"Returning stale data for {self.name}: {str(e)}")
                return self.data
            raise

        self.set(data)
        return data

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        return {
            "name": self.name,
            "ttl": self.ttl,
            "hits": self.hits,
            "misses": self.misses,
            "last_refreshed_at": self.last_refreshed_at,
            "fresh": self.is_fresh(),
        }


class CacheService:
    """Holds the process-wide caches, created at service startup."""

    def __init__(
        self,
        config: Optional[CacheConfig] = None,
        clock: Callable[[], float] = time.time
    ):
        """
        Initialize the cache service.

        Args:
            config: Cache configuration. Defaults to environment-based config.
            clock: Time source shared by every cache
        """
        self.config = config or get_cache_config()
        self.token_list: TimedCache = TimedCache("token_list", self.config.token_list_ttl, clock)
        self.news: TimedCache = TimedCache("news", self.config.news_ttl, clock)

    def clear(self) -> None:
        """Drop every cached value."""
        self.token_list.clear()
        self.news.clear()

    def get_stats(self) -> Dict[str, Any]:
        """Get statistics for every cache."""
        return {
            "token_list": self.token_list.get_stats(),
            "news": self.news.get_stats(),
        }
