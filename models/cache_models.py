"""Models for in-memory cache data.

Defines the generic cache entry stored by the expiring LRU cache and the statistics
snapshot each cache reports.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__: list[str] = [
    "CacheEntry",
    "CacheStatistics",
    "DetectionCacheValue",
]


@dataclass
class CacheEntry[V]:
    """A single cache entry.

    Timestamps are monotonic seconds taken from the owning cache's clock.

    Attributes:
        key (str): Cache key identifier.
        value (V): Cached value.
        created_at (float): Insertion timestamp.
        last_accessed (float): Timestamp of the most recent read or write.
        expires_at (float): Timestamp after which the entry is no longer returned.
    """

    key: str
    value: V
    created_at: float
    last_accessed: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        """Check whether the entry has expired at the given time.

        Args:
            now (float): Current timestamp.

        Returns:
            bool: True if `now` is strictly past `expires_at`.
        """
        return now > self.expires_at


@dataclass(frozen=True)
class DetectionCacheValue:
    """Language detection result as stored in the detection cache.

    Attributes:
        language (str): Detected language code.
        confidence (float): Detection confidence score (0.0 to 1.0).
    """

    language: str
    confidence: float


@dataclass
class CacheStatistics:
    """Cache usage statistics.

    Attributes:
        size (int): Current number of entries.
        max_size (int): Maximum number of entries.
        ttl (float): Default time-to-live in seconds.
        confidence_threshold (float | None): Minimum confidence required for insertion (detection cache only).
    """

    size: int = 0
    max_size: int = 0
    ttl: float = 0.0
    confidence_threshold: float | None = None
