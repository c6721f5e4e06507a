from __future__ import annotations

import time
from typing import TYPE_CHECKING, ClassVar

from core.cache.expiring_lru import ExpiringLRUCache
from models.cache_models import CacheStatistics, DetectionCacheValue
from models.translation_models import DetectionResult
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable

__all__: list[str] = ["LanguageDetectionCache"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class LanguageDetectionCache:
    """Cache of language detection results, gated by a confidence threshold.

    Only results whose confidence reaches the threshold are stored, so low-confidence guesses
    are asked again next time instead of being served from the cache.

    The key is the first `KEY_LENGTH` characters of the text. Two long texts that share
    that prefix share one entry.

    Attributes:
        KEY_LENGTH (ClassVar[int]): Number of leading characters used as the cache key.
        confidence_threshold (float): Minimum confidence required for insertion.
    """

    KEY_LENGTH: ClassVar[int] = 100

    def __init__(
        self,
        *,
        max_size: int = 2000,
        ttl: float = 7 * 24 * 60 * 60,
        confidence_threshold: float = 0.8,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if not 0.0 <= confidence_threshold <= 1.0:
            msg: str = f"confidence_threshold must be between 0 and 1: {confidence_threshold}"
            raise ValueError(msg)
        self.confidence_threshold: float = confidence_threshold
        self._cache: ExpiringLRUCache[DetectionCacheValue] = ExpiringLRUCache(
            max_size=max_size, ttl=ttl, name="language_detection", clock=clock
        )
        logger.info(
            "Language detection cache initialized (max size: %d, TTL: %.1f days, confidence threshold: %.2f)",
            max_size,
            ttl / (24 * 60 * 60),
            confidence_threshold,
        )

    def __len__(self) -> int:
        return len(self._cache)

    @classmethod
    def generate_key(cls, text: str) -> str:
        return StringUtils.truncate(text, cls.KEY_LENGTH)

    def lookup(self, text: str) -> DetectionResult | None:
        """Look up the detected language of the text.

        Args:
            text (str): Text whose language was detected earlier.

        Returns:
            DetectionResult | None: The cached result flagged `from_cache=True`, or None on a miss.
        """
        cached: DetectionCacheValue | None = self._cache.get(self.generate_key(text))
        if cached is None:
            return None
        return DetectionResult(language=cached.language, confidence=cached.confidence, from_cache=True)

    def record(self, text: str, result: DetectionResult) -> bool:
        """Store a detection result if its confidence reaches the threshold.

        Args:
            text (str): Text that was analysed.
            result (DetectionResult): Detection result from the engine.

        Returns:
            bool: True if the result was stored, False if it was rejected by the threshold.
        """
        # NaN never reaches the threshold
        if not result.confidence >= self.confidence_threshold:
            logger.debug(
                "Detection not cached due to low confidence ('%s', %.2f)", result.language, result.confidence
            )
            return False

        self._cache.set(
            self.generate_key(text), DetectionCacheValue(language=result.language, confidence=result.confidence)
        )
        logger.debug("Detection cached: '%s' (confidence: %.2f)", result.language, result.confidence)
        return True

    def sweep_expired(self) -> int:
        return self._cache.sweep_expired()

    def clear(self) -> None:
        self._cache.clear()
        logger.info("Language detection cache cleared")

    def stats(self) -> CacheStatistics:
        statistics: CacheStatistics = self._cache.stats()
        statistics.confidence_threshold = self.confidence_threshold
        return statistics
