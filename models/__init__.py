"""Data models for the chat translator.

This package contains dataclass definitions for configuration, cache entries,
detection and translation results, and performance statistics.
"""

from __future__ import annotations

from models.cache_models import CacheEntry, CacheStatistics, DetectionCacheValue
from models.config_models import Config
from models.statistics_models import OperationKind, OperationSnapshot, OperationStats, StatisticsSnapshot
from models.translation_models import DetectionResult, TranslationResult

__all__: list[str] = [
    "CacheEntry",
    "CacheStatistics",
    "Config",
    "DetectionCacheValue",
    "DetectionResult",
    "OperationKind",
    "OperationSnapshot",
    "OperationStats",
    "StatisticsSnapshot",
    "TranslationResult",
]
