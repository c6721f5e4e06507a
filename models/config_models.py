"""Configuration data models for the chat translator.

This module defines data classes representing the sections of the INI configuration file:
general behaviour, the translation service, both in-memory caches, the retry policy
and the statistics sink. Each data class holds the defaults that apply when a key is
missing from the file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

__all__: list[str] = [
    "DEFAULT_API_URL",
    "DEFAULT_SUPPORTED_LANGUAGES",
    "CacheSection",
    "Config",
    "DetectionCacheSection",
    "General",
    "Retry",
    "Statistics",
    "Translation",
]

DEFAULT_API_URL: Final[str] = "https://translation.googleapis.com/language/translate/v2"

DEFAULT_SUPPORTED_LANGUAGES: Final[tuple[str, ...]] = (
    "en",
    "ja",
    "es",
    "fr",
    "de",
    "zh",
    "ko",
    "ru",
    "it",
    "pt",
    "ar",
    "hi",
    "th",
    "vi",
)


@dataclass
class General:
    DEBUG: bool = False
    LOG_FILE: str = ""
    LOG_LEVEL: str = "INFO"
    SCRIPT_NAME: str = ""


@dataclass
class Translation:
    ENGINE: str = "google_v2"
    API_URL: str = DEFAULT_API_URL
    REQUEST_TIMEOUT: float = 10.0
    DEFAULT_TARGET_LANGUAGE: str = "ja"
    SUPPORTED_LANGUAGES: list[str] = field(default_factory=lambda: list(DEFAULT_SUPPORTED_LANGUAGES))


@dataclass
class CacheSection:
    MAX_SIZE: int = 1000
    TTL_SECONDS: int = 24 * 60 * 60
    SWEEP_INTERVAL: int = 30 * 60


@dataclass
class DetectionCacheSection(CacheSection):
    MAX_SIZE: int = 2000
    TTL_SECONDS: int = 7 * 24 * 60 * 60
    SWEEP_INTERVAL: int = 60 * 60
    CONFIDENCE_THRESHOLD: float = 0.8


@dataclass
class Retry:
    MAX_RETRIES: int = 2
    BASE_DELAY: float = 0.5


@dataclass
class Statistics:
    HISTORY_LIMIT: int = 1000
    LOG_INTERVAL: int = 60 * 60


@dataclass
class Config:
    GENERAL: General = field(default_factory=General)
    TRANSLATION: Translation = field(default_factory=Translation)
    DETECTION_CACHE: DetectionCacheSection = field(default_factory=DetectionCacheSection)
    TRANSLATION_CACHE: CacheSection = field(default_factory=CacheSection)
    RETRY: Retry = field(default_factory=Retry)
    STATISTICS: Statistics = field(default_factory=Statistics)
