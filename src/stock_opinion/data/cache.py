"""Response caching for assembled analysis snapshots."""

import logging
import os
import time
from collections.abc import Callable
from typing import Any

import diskcache

from stock_opinion.utils.sanitize import normalize_symbol

logger = logging.getLogger(__name__)

DEFAULT_TTL = int(os.environ.get("CACHE_TTL", "300"))  # 5 minutes
DEFAULT_SIZE_LIMIT = int(os.environ.get("CACHE_SIZE_LIMIT", str(64 * 1024 * 1024)))


def cache_key(dataset: str, symbol: str) -> str:
    """Deterministic key: logical dataset name + uppercased ticker."""
    return f"{dataset}:{normalize_symbol(symbol)}"


class ResponseCache:
    """
    Key -> snapshot store with a fixed time-to-live.

    Each snapshot is stored atomically as one unit alongside its insertion
    time. Reads past the TTL behave exactly like misses. Capacity is bounded
    by diskcache's size limit with least-recently-used eviction.
    """

    def __init__(
        self,
        cache_dir: str | None = None,
        ttl: int = DEFAULT_TTL,
        size_limit: int = DEFAULT_SIZE_LIMIT,
        clock: Callable[[], float] = time.time,
    ):
        if cache_dir is None:
            cache_dir = os.environ.get("CACHE_DIR", ".cache/responses")
        self.cache: diskcache.Cache = diskcache.Cache(
            cache_dir,
            size_limit=size_limit,
            eviction_policy="least-recently-used",
        )
        self.ttl = ttl
        self._clock = clock

    def get(self, dataset: str, symbol: str) -> Any | None:
        """
        Get a cached snapshot.

        Returns:
            The stored payload, or None if absent or expired
        """
        key = cache_key(dataset, symbol)
        entry = self.cache.get(key)
        if not entry:
            return None

        age = self._clock() - entry["stored_at"]
        if age >= entry["ttl"]:
            logger.debug(f"cache expired: {key} (age={age:.1f}s)")
            self.cache.delete(key)
            return None

        logger.debug(f"cache hit: {key} (age={age:.1f}s)")
        return entry["payload"]

    def set(
        self,
        dataset: str,
        symbol: str,
        payload: Any,
        ttl: int | None = None,
    ) -> str:
        """
        Store a snapshot.

        Args:
            dataset: Logical dataset name (e.g. "stock_data")
            symbol: Ticker symbol
            payload: Snapshot to cache (must be picklable)
            ttl: TTL in seconds (default: the cache's TTL)

        Returns:
            The cache key used
        """
        key = cache_key(dataset, symbol)
        expire = ttl if ttl is not None else self.ttl
        entry = {
            "payload": payload,
            "stored_at": self._clock(),
            "ttl": expire,
        }
        self.cache.set(key, entry, expire=expire)
        return key

    def clear(self) -> None:
        """Clear all cached snapshots."""
        self.cache.clear()

    def close(self) -> None:
        self.cache.close()


# Process-wide instance injected into the tools
response_cache = ResponseCache()
