"""Performance statistics for language detection and translation requests.

The aggregates are plain OperationStats dataclasses. The module-level functions take an
aggregate explicitly and derive rates from it; PerformanceMonitor owns one aggregate per
operation kind and is the statistics sink injected into the translation manager.
"""

from __future__ import annotations

import time
from collections import deque
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Final

from models.statistics_models import OperationKind, OperationSnapshot, OperationStats, StatisticsSnapshot
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

__all__: list[str] = [
    "PerformanceMonitor",
    "average_response_time",
    "cache_hit_rate",
    "new_operation_stats",
    "record_request",
    "snapshot",
    "success_rate",
]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

DEFAULT_HISTORY_LIMIT: Final[int] = 1000


def new_operation_stats(history_limit: int = DEFAULT_HISTORY_LIMIT) -> OperationStats:
    """Create an empty aggregate whose latency history keeps at most `history_limit` samples."""
    return OperationStats(response_times=deque(maxlen=history_limit))


def record_request(stats: OperationStats, *, success: bool, latency_ms: float, from_cache: bool) -> None:
    """Record one request in the aggregate.

    A cache hit only counts towards the total and the hit counter. Any other request counts
    as a cache miss and as a success or failure; successful latencies go to the history.

    Args:
        stats (OperationStats): Aggregate to update.
        success (bool): Whether the request succeeded.
        latency_ms (float): Request latency in milliseconds.
        from_cache (bool): Whether the request was answered from the cache.
    """
    stats.total_requests += 1
    stats.last_updated = datetime.now(UTC)

    if from_cache:
        stats.cache_hits += 1
        return
    stats.cache_misses += 1

    if success:
        stats.success_requests += 1
        stats.response_times.append(latency_ms)
    else:
        stats.failed_requests += 1


def success_rate(stats: OperationStats) -> float:
    """Success percentage over requests that reached the service, 100 when there were none."""
    completed: int = stats.success_requests + stats.failed_requests
    if completed == 0:
        return 100.0
    return stats.success_requests / completed * 100


def average_response_time(stats: OperationStats) -> float:
    """Mean latency in milliseconds over the history, 0 when empty."""
    if not stats.response_times:
        return 0.0
    return sum(stats.response_times) / len(stats.response_times)


def cache_hit_rate(stats: OperationStats) -> float:
    """Cache hit percentage, 0 when nothing was recorded."""
    total: int = stats.cache_hits + stats.cache_misses
    if total == 0:
        return 0.0
    return stats.cache_hits / total * 100


def snapshot(stats: OperationStats) -> OperationSnapshot:
    return OperationSnapshot(
        total_requests=stats.total_requests,
        success_rate=success_rate(stats),
        average_response_time=average_response_time(stats),
        cache_hit_rate=cache_hit_rate(stats),
        last_updated=stats.last_updated,
    )


class PerformanceMonitor:
    """Statistics sink for detection and translation requests.

    Attributes:
        history_limit (int): Maximum number of latency samples kept per operation kind.
    """

    def __init__(self, history_limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        if history_limit <= 0:
            msg: str = f"history_limit must be positive: {history_limit}"
            raise ValueError(msg)
        self.history_limit: int = history_limit
        self._stats: dict[OperationKind, OperationStats] = {}
        self.reset_stats(log=False)

    def stats_for(self, kind: OperationKind) -> OperationStats:
        """Return the live aggregate for an operation kind."""
        return self._stats[kind]

    def record_language_detection_request(self, success: bool, latency_ms: float, from_cache: bool = False) -> None:  # noqa: FBT001
        record_request(
            self._stats[OperationKind.LANGUAGE_DETECTION],
            success=success,
            latency_ms=latency_ms,
            from_cache=from_cache,
        )

    def record_translation_request(self, success: bool, latency_ms: float, from_cache: bool = False) -> None:  # noqa: FBT001
        record_request(
            self._stats[OperationKind.TRANSLATION],
            success=success,
            latency_ms=latency_ms,
            from_cache=from_cache,
        )

    def success_rate(self, kind: OperationKind) -> float:
        return success_rate(self._stats[kind])

    def average_response_time(self, kind: OperationKind) -> float:
        return average_response_time(self._stats[kind])

    def cache_hit_rate(self, kind: OperationKind) -> float:
        return cache_hit_rate(self._stats[kind])

    def get_stats(self) -> StatisticsSnapshot:
        """Return derived figures for both operation kinds."""
        return StatisticsSnapshot(
            translation=snapshot(self._stats[OperationKind.TRANSLATION]),
            language_detection=snapshot(self._stats[OperationKind.LANGUAGE_DETECTION]),
        )

    def reset_stats(self, *, log: bool = True) -> None:
        """Discard every recorded request."""
        self._stats = {kind: new_operation_stats(self.history_limit) for kind in OperationKind}
        if log:
            logger.info("Performance statistics have been reset")

    def log_stats(self) -> None:
        """Write the current figures to the log. Called by the periodic statistics flush."""
        current: StatisticsSnapshot = self.get_stats()
        for name, figures in (
            ("Translation", current.translation),
            ("Language detection", current.language_detection),
        ):
            logger.info(
                "%s statistics: requests=%d, success rate=%.2f%%, average response=%.2f ms, cache hit rate=%.2f%%",
                name,
                figures.total_requests,
                figures.success_rate,
                figures.average_response_time,
                figures.cache_hit_rate,
            )

    @staticmethod
    def start_timer() -> float:
        """Return a monotonic start mark for `end_timer()`."""
        return time.perf_counter()

    @staticmethod
    def end_timer(start: float) -> float:
        """Return the milliseconds elapsed since `start`."""
        return (time.perf_counter() - start) * 1000
