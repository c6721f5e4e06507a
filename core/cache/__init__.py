"""In-memory cache package.

Provides the expiring LRU cache and its two specializations for language detection
results and translated text.
"""

from __future__ import annotations

from core.cache.detection_cache import LanguageDetectionCache
from core.cache.expiring_lru import ExpiringLRUCache
from core.cache.translation_cache import TranslationCache

__all__: list[str] = ["ExpiringLRUCache", "LanguageDetectionCache", "TranslationCache"]
