"""Bounded in-memory cache with time-based expiry and least-recently-used eviction.

Recency is tracked with an OrderedDict: the first key is the least recently used and the
last key the most recently used, so promotion and eviction are both O(1). Entries expire
lazily on lookup and eagerly through `sweep_expired()`, which the owner runs periodically.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from typing import TYPE_CHECKING

from models.cache_models import CacheEntry, CacheStatistics
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable

__all__: list[str] = ["ExpiringLRUCache"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class ExpiringLRUCache[V]:
    """Expiring LRU cache.

    The cache never raises from `get`, `set` or `sweep_expired`; an inconsistent entry is
    dropped and reported as a miss.

    Attributes:
        name (str): Cache name used in log messages.
        max_size (int): Maximum number of entries.
        ttl (float): Default time-to-live in seconds.
    """

    def __init__(
        self,
        *,
        max_size: int,
        ttl: float,
        name: str = "cache",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            max_size (int): Maximum number of entries. Must be positive.
            ttl (float): Default time-to-live in seconds. Must be positive.
            name (str): Cache name used in log messages.
            clock (Callable[[], float]): Time source returning seconds.

        Raises:
            ValueError: If `max_size` or `ttl` is not positive.
        """
        if max_size <= 0:
            msg: str = f"max_size must be positive: {max_size}"
            raise ValueError(msg)
        if ttl <= 0:
            msg = f"ttl must be positive: {ttl}"
            raise ValueError(msg)
        self.name: str = name
        self.max_size: int = max_size
        self.ttl: float = ttl
        self._clock: Callable[[], float] = clock
        self._entries: OrderedDict[str, CacheEntry[V]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        # Membership does not count as an access and does not check expiry.
        return key in self._entries

    @property
    def size(self) -> int:
        """Current number of entries, including expired ones not yet swept."""
        return len(self._entries)

    def keys(self) -> list[str]:
        """Return the keys ordered from least to most recently used."""
        return list(self._entries)

    def get(self, key: str) -> V | None:
        """Look up a value and promote it to most recently used.

        Args:
            key (str): Cache key.

        Returns:
            V | None: The cached value, or None if the key is unknown or the entry has expired.
        """
        entry: CacheEntry[V] | None = self._entries.get(key)
        if entry is None:
            return None

        now: float = self._clock()
        if entry.is_expired(now):
            self._discard(key)
            logger.debug("'%s': expired entry removed on lookup", self.name)
            return None

        try:
            self._entries.move_to_end(key)
        except KeyError:
            logger.warning("'%s': recency order lost key, treating as miss", self.name)
            self._discard(key)
            return None
        entry.last_accessed = now
        return entry.value

    def set(self, key: str, value: V, ttl: float | None = None) -> None:
        """Insert or replace a value and promote it to most recently used.

        When a new key is inserted into a full cache, the least recently used entry is evicted first.

        Args:
            key (str): Cache key.
            value (V): Value to store.
            ttl (float | None): Time-to-live in seconds. Uses the cache default when None.
        """
        now: float = self._clock()
        lifetime: float = self.ttl if ttl is None else ttl

        if key not in self._entries and len(self._entries) >= self.max_size:
            self._evict_oldest()

        self._entries[key] = CacheEntry(
            key=key,
            value=value,
            created_at=now,
            last_accessed=now,
            expires_at=now + lifetime,
        )
        self._entries.move_to_end(key)

    def delete(self, key: str) -> bool:
        """Remove a single entry.

        Returns:
            bool: True if the key was present.
        """
        return self._discard(key)

    def clear(self) -> None:
        """Remove every entry."""
        self._entries.clear()

    def sweep_expired(self) -> int:
        """Remove every entry whose expiry time has passed.

        Returns:
            int: Number of entries removed.
        """
        now: float = self._clock()
        expired: list[str] = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            self._discard(key)
        if expired:
            logger.debug("'%s': removed %d expired entries", self.name, len(expired))
        return len(expired)

    def stats(self) -> CacheStatistics:
        """Return the current size and configuration."""
        return CacheStatistics(size=len(self._entries), max_size=self.max_size, ttl=self.ttl)

    def _evict_oldest(self) -> None:
        if not self._entries:
            return
        self._entries.popitem(last=False)
        logger.debug("'%s': evicted least recently used entry", self.name)

    def _discard(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None
