from __future__ import annotations

from typing import TYPE_CHECKING

from core.cache.detection_cache import LanguageDetectionCache
from core.cache.translation_cache import TranslationCache
from core.stats.performance_monitor import PerformanceMonitor
from core.trans.engines import GoogleV2Translation  # noqa: F401
from core.trans.interface import (
    EmptyContentError,
    NotSupportedLanguagesError,
    TransInterface,
    TranslateExceptionError,
)
from core.trans.retry import RetryHandler
from models.translation_models import DetectionResult, TranslationResult
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging

    from models.cache_models import CacheStatistics
    from models.config_models import Config


__all__: list[str] = ["TransManager"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class TransManager:
    """Orchestrator for language detection and translation requests.

    A request is validated, its source language is detected unless given, and the text is
    translated unless source and target are the same. Both service calls go through the
    retry handler and are fronted by their own cache. Every outcome is reported to the
    performance monitor. Service failures are logged, counted and raised to the caller
    unchanged; there is no fallback to the original text.

    Attributes:
        config (Config): Application configuration.
        engine (TransInterface): Detection and translation engine.
        detection_cache (LanguageDetectionCache): Cache of confident detection results.
        translation_cache (TranslationCache): Cache of translated text.
        retry_handler (RetryHandler): Retry policy wrapped around every engine call.
        monitor (PerformanceMonitor): Statistics sink.
    """

    def __init__(
        self,
        config: Config,
        engine: TransInterface,
        *,
        detection_cache: LanguageDetectionCache | None = None,
        translation_cache: TranslationCache | None = None,
        retry_handler: RetryHandler | None = None,
        monitor: PerformanceMonitor | None = None,
    ) -> None:
        """Initialize the TransManager.

        Collaborators that are not given are built from the configuration.

        Args:
            config (Config): The configuration object.
            engine (TransInterface): An initialized translation engine.
            detection_cache (LanguageDetectionCache | None): Detection cache to use.
            translation_cache (TranslationCache | None): Translation cache to use.
            retry_handler (RetryHandler | None): Retry handler to use.
            monitor (PerformanceMonitor | None): Statistics sink to report to.
        """
        self.config: Config = config
        self.engine: TransInterface = engine
        # Caches define __len__, so an empty one is falsy; compare against None.
        if detection_cache is None:
            detection_cache = LanguageDetectionCache(
                max_size=config.DETECTION_CACHE.MAX_SIZE,
                ttl=config.DETECTION_CACHE.TTL_SECONDS,
                confidence_threshold=config.DETECTION_CACHE.CONFIDENCE_THRESHOLD,
            )
        if translation_cache is None:
            translation_cache = TranslationCache(
                max_size=config.TRANSLATION_CACHE.MAX_SIZE,
                ttl=config.TRANSLATION_CACHE.TTL_SECONDS,
            )
        if retry_handler is None:
            retry_handler = RetryHandler(max_retries=config.RETRY.MAX_RETRIES, base_delay=config.RETRY.BASE_DELAY)
        if monitor is None:
            monitor = PerformanceMonitor(config.STATISTICS.HISTORY_LIMIT)

        self.detection_cache: LanguageDetectionCache = detection_cache
        self.translation_cache: TranslationCache = translation_cache
        self.retry_handler: RetryHandler = retry_handler
        self.monitor: PerformanceMonitor = monitor
        logger.debug("Registered translation engines: %s", TransInterface.registered)

    @classmethod
    def create_engine(cls, config: Config) -> TransInterface:
        """Instantiate and initialize the engine named by `TRANSLATION.ENGINE`.

        Raises:
            TranslateExceptionError: If no engine is registered under that name.
        """
        engine_cls: type[TransInterface] | None = TransInterface.registered.get(config.TRANSLATION.ENGINE)
        if engine_cls is None:
            logger.critical("Translation class not found: '%s'", config.TRANSLATION.ENGINE)
            msg: str = f"Unknown translation engine: '{config.TRANSLATION.ENGINE}'"
            raise TranslateExceptionError(msg)
        engine: TransInterface = engine_cls()
        engine.initialize(config)
        logger.info("Translation engine initialized: '%s'", engine.engine_name)
        return engine

    @property
    def supported_languages(self) -> list[str]:
        return self.config.TRANSLATION.SUPPORTED_LANGUAGES

    def is_available(self) -> bool:
        """Check whether the engine can accept requests."""
        return self.engine.is_available

    def _validate_content(self, text: str) -> None:
        if StringUtils.is_blank(text):
            msg = "No characters to translate"
            raise EmptyContentError(msg)

    def _validate_target_language(self, target_language: str) -> None:
        if target_language not in self.supported_languages:
            msg: str = f"Unsupported target language: '{target_language}'"
            raise NotSupportedLanguagesError(msg)

    async def detect_language(self, text: str) -> DetectionResult:
        """Detect the language of the text, consulting the detection cache first.

        A fresh result is cached only when its confidence reaches the configured threshold.

        Args:
            text (str): Text to analyze.

        Returns:
            DetectionResult: Detected language, its confidence and whether it came from the cache.

        Raises:
            EmptyContentError: If the text is empty or blank.
            TranslateExceptionError: If the detection service fails, after retries where applicable.
        """
        self._validate_content(text)
        start: float = self.monitor.start_timer()

        cached: DetectionResult | None = self.detection_cache.lookup(text)
        if cached is not None:
            self.monitor.record_language_detection_request(success=True, latency_ms=0.0, from_cache=True)
            logger.debug("Language detection cache hit: '%s'", cached.language)
            return cached

        try:
            result: DetectionResult = await self.retry_handler.invoke(
                lambda: self.engine.detect_language(text),
                description="Language detection",
            )
        except Exception as err:
            self.monitor.record_language_detection_request(
                success=False, latency_ms=self.monitor.end_timer(start), from_cache=False
            )
            logger.error("Language detection failed: %s", err)
            raise

        self.monitor.record_language_detection_request(
            success=True, latency_ms=self.monitor.end_timer(start), from_cache=False
        )
        self.detection_cache.record(text, result)
        logger.debug("Detected language: '%s' (confidence: %.2f)", result.language, result.confidence)
        return result

    async def translate_text(
        self, text: str, target_language: str | None = None, source_language: str | None = None
    ) -> TranslationResult:
        """Translate the text into the target language.

        When the source language is not given it is detected. When source and target are the
        same the original text is returned without calling the translation service.

        Args:
            text (str): Text to translate.
            target_language (str | None): Target language code. Defaults to `TRANSLATION.DEFAULT_TARGET_LANGUAGE`.
            source_language (str | None): Source language code. Detected when None.

        Returns:
            TranslationResult: The translated text and how it was obtained.

        Raises:
            EmptyContentError: If the text is empty or blank.
            NotSupportedLanguagesError: If the target language is not supported.
            TranslateExceptionError: If a service call fails, after retries where applicable.
        """
        target: str = target_language or self.config.TRANSLATION.DEFAULT_TARGET_LANGUAGE
        self._validate_content(text)
        self._validate_target_language(target)

        confidence: float | None = None
        language_from_cache: bool = False
        if source_language:
            source: str = source_language
        else:
            detection: DetectionResult = await self.detect_language(text)
            source = detection.language
            confidence = detection.confidence
            language_from_cache = detection.from_cache

        if source == target:
            logger.debug("Source and target language are both '%s', skipping translation", source)
            return TranslationResult(
                translated_text=text,
                source_language=source,
                target_language=target,
                confidence=confidence,
                from_cache=False,
                language_from_cache=language_from_cache,
            )

        translated_text, from_cache = await self._translate(text, source, target)
        return TranslationResult(
            translated_text=translated_text,
            source_language=source,
            target_language=target,
            confidence=confidence,
            from_cache=from_cache,
            language_from_cache=language_from_cache,
        )

    async def _translate(self, text: str, source: str, target: str) -> tuple[str, bool]:
        """Return the translated text and whether it was served from the cache."""
        start: float = self.monitor.start_timer()

        cached: str | None = self.translation_cache.lookup(text, source, target)
        if cached is not None:
            self.monitor.record_translation_request(success=True, latency_ms=0.0, from_cache=True)
            logger.debug("Translation cache hit: '%s'", StringUtils.excerpt(cached))
            return cached, True

        logger.debug("Using translation engine. Source: '%s', Target: '%s'", source, target)
        try:
            translated: str = await self.retry_handler.invoke(
                lambda: self.engine.translation(content=text, tgt_lang=target, src_lang=source),
                description="Translation",
            )
        except Exception as err:
            self.monitor.record_translation_request(
                success=False, latency_ms=self.monitor.end_timer(start), from_cache=False
            )
            logger.error("Translation failed (src: '%s', tgt: '%s'): %s", source, target, err)
            raise

        self.monitor.record_translation_request(success=True, latency_ms=self.monitor.end_timer(start), from_cache=False)
        self.translation_cache.record(text, source, target, translated)
        logger.debug(
            "Final translation result (src: '%s', tgt: '%s'): %s", source, target, StringUtils.excerpt(translated)
        )
        return translated, False

    def get_stats(self) -> dict[str, CacheStatistics]:
        """Return the statistics of both caches keyed by cache name."""
        return {
            "language_detection": self.detection_cache.stats(),
            "translation": self.translation_cache.stats(),
        }

    def clear_caches(self) -> None:
        """Discard every cached detection and translation."""
        self.detection_cache.clear()
        self.translation_cache.clear()
        logger.info("All translation caches have been cleared")

    def sweep_expired(self) -> int:
        """Remove expired entries from both caches.

        Returns:
            int: Total number of entries removed.
        """
        return self.detection_cache.sweep_expired() + self.translation_cache.sweep_expired()

    async def shutdown(self) -> None:
        """Close the translation engine."""
        logger.info("Class '%s' termination process started.", self.__class__.__name__)
        await self.engine.close()
        logger.info("Class '%s' termination process completed.", self.__class__.__name__)
