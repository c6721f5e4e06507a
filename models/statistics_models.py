"""Models for performance statistics.

Defines the per-operation aggregate recorded by the performance monitor and the
snapshot returned to status-reporting callers.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum

__all__: list[str] = [
    "OperationKind",
    "OperationSnapshot",
    "OperationStats",
    "StatisticsSnapshot",
]


class OperationKind(StrEnum):
    """Kinds of external operations tracked by the performance monitor."""

    TRANSLATION = "translation"
    LANGUAGE_DETECTION = "language_detection"


@dataclass
class OperationStats:
    """Aggregate counters for one kind of operation.

    Attributes:
        total_requests (int): Every recorded request, cache hits included.
        success_requests (int): Successful requests that reached the external service.
        failed_requests (int): Failed requests that reached the external service.
        cache_hits (int): Requests answered from the cache.
        cache_misses (int): Requests that were not answered from the cache.
        response_times (deque[float]): Latency history in milliseconds for successful requests.
        last_updated (datetime): Timestamp of the most recent record.
    """

    total_requests: int = 0
    success_requests: int = 0
    failed_requests: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    response_times: deque[float] = field(default_factory=deque)
    last_updated: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass(frozen=True)
class OperationSnapshot:
    """Derived figures for one kind of operation.

    Attributes:
        total_requests (int): Every recorded request, cache hits included.
        success_rate (float): Success percentage (0 to 100).
        average_response_time (float): Mean latency in milliseconds.
        cache_hit_rate (float): Cache hit percentage (0 to 100).
        last_updated (datetime): Timestamp of the most recent record.
    """

    total_requests: int
    success_rate: float
    average_response_time: float
    cache_hit_rate: float
    last_updated: datetime


@dataclass(frozen=True)
class StatisticsSnapshot:
    """Statistics for both operation kinds.

    Attributes:
        translation (OperationSnapshot): Translation figures.
        language_detection (OperationSnapshot): Language detection figures.
    """

    translation: OperationSnapshot
    language_detection: OperationSnapshot
