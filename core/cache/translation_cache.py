from __future__ import annotations

import time
from typing import TYPE_CHECKING, ClassVar

from core.cache.expiring_lru import ExpiringLRUCache
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable

    from models.cache_models import CacheStatistics

__all__: list[str] = ["TranslationCache"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class TranslationCache:
    """Cache of translated text keyed by source text and language pair.

    Every successful translation is stored. The key combines the first `KEY_LENGTH`
    characters of the text with the source and target language codes.

    Attributes:
        KEY_LENGTH (ClassVar[int]): Number of leading characters of the text used in the key.
    """

    KEY_LENGTH: ClassVar[int] = 50

    def __init__(
        self,
        *,
        max_size: int = 1000,
        ttl: float = 24 * 60 * 60,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._cache: ExpiringLRUCache[str] = ExpiringLRUCache(max_size=max_size, ttl=ttl, name="translation", clock=clock)
        logger.info("Translation cache initialized (max size: %d, TTL: %.1f hours)", max_size, ttl / (60 * 60))

    def __len__(self) -> int:
        return len(self._cache)

    @classmethod
    def generate_key(cls, text: str, source_lang: str, target_lang: str) -> str:
        return f"{StringUtils.truncate(text, cls.KEY_LENGTH)}|{source_lang}|{target_lang}"

    def lookup(self, text: str, source_lang: str, target_lang: str) -> str | None:
        """Look up a cached translation.

        Returns:
            str | None: The translated text, or None on a miss.
        """
        return self._cache.get(self.generate_key(text, source_lang, target_lang))

    def record(self, text: str, source_lang: str, target_lang: str, translated_text: str) -> None:
        """Store a translation unconditionally."""
        self._cache.set(self.generate_key(text, source_lang, target_lang), translated_text)
        logger.debug("Translation cached (%s > %s)", source_lang, target_lang)

    def sweep_expired(self) -> int:
        return self._cache.sweep_expired()

    def clear(self) -> None:
        self._cache.clear()
        logger.info("Translation cache cleared")

    def stats(self) -> CacheStatistics:
        return self._cache.stats()
