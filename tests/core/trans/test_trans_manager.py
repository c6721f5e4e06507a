"""Unit tests for core.trans.manager module."""

from __future__ import annotations

import asyncio
from typing import ClassVar

import pytest

from core.cache.detection_cache import LanguageDetectionCache
from core.cache.translation_cache import TranslationCache
from core.stats.performance_monitor import PerformanceMonitor
from core.trans.interface import (
    EmptyContentError,
    ErrorKind,
    NotSupportedLanguagesError,
    TransInterface,
    TranslateExceptionError,
    TranslationServiceError,
)
from core.trans.manager import TransManager
from core.trans.retry import RetryHandler
from models.config_models import Config
from models.statistics_models import OperationKind
from models.translation_models import DetectionResult, TranslationResult


class DummyEngine(TransInterface):
    """Scripted engine. An empty engine name keeps it out of the engine registry."""

    detect_outcomes: ClassVar[list[DetectionResult | Exception]] = []
    translation_outcomes: ClassVar[list[str | Exception]] = []
    detect_calls: ClassVar[list[str]] = []
    translation_calls: ClassVar[list[tuple[str, str, str]]] = []
    available: ClassVar[bool] = True
    close_called: ClassVar[bool] = False

    @property
    def is_available(self) -> bool:
        return type(self).available

    @staticmethod
    def fetch_engine_name() -> str:
        return ""

    def initialize(self, config) -> None:
        _ = config

    async def detect_language(self, content: str) -> DetectionResult:
        type(self).detect_calls.append(content)
        outcome: DetectionResult | Exception = type(self).detect_outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def translation(self, content: str, tgt_lang: str, src_lang: str) -> str:
        type(self).translation_calls.append((content, tgt_lang, src_lang))
        outcome: str | Exception = type(self).translation_outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def close(self) -> None:
        type(self).close_called = True


async def no_sleep(delay: float) -> None:
    _ = delay


@pytest.fixture(autouse=True)
def reset_engine_state() -> None:
    DummyEngine.detect_outcomes = []
    DummyEngine.translation_outcomes = []
    DummyEngine.detect_calls = []
    DummyEngine.translation_calls = []
    DummyEngine.available = True
    DummyEngine.close_called = False


@pytest.fixture
def config() -> Config:
    return Config()


@pytest.fixture
def monitor() -> PerformanceMonitor:
    return PerformanceMonitor()


@pytest.fixture
def manager(config: Config, monitor: PerformanceMonitor) -> TransManager:
    return TransManager(
        config,
        DummyEngine(),
        detection_cache=LanguageDetectionCache(max_size=100, ttl=3600, confidence_threshold=0.8),
        translation_cache=TranslationCache(max_size=100, ttl=3600),
        retry_handler=RetryHandler(max_retries=2, base_delay=0.5, sleep=no_sleep),
        monitor=monitor,
    )


def transient() -> TranslationServiceError:
    return TranslationServiceError("HTTP 503", kind=ErrorKind.TRANSIENT, status=503)


@pytest.mark.asyncio
async def test_translate_then_serve_from_caches(manager: TransManager, monitor: PerformanceMonitor) -> None:
    DummyEngine.detect_outcomes = [DetectionResult(language="en", confidence=0.95)]
    DummyEngine.translation_outcomes = ["こんにちは"]

    first: TranslationResult = await manager.translate_text("Hello", target_language="ja")
    second: TranslationResult = await manager.translate_text("Hello", target_language="ja")

    assert first == TranslationResult(
        translated_text="こんにちは",
        source_language="en",
        target_language="ja",
        confidence=0.95,
        from_cache=False,
        language_from_cache=False,
    )
    assert second.translated_text == "こんにちは"
    assert second.from_cache is True
    assert second.language_from_cache is True
    assert second.confidence == 0.95
    assert DummyEngine.detect_calls == ["Hello"]
    assert len(DummyEngine.translation_calls) == 1

    assert monitor.cache_hit_rate(OperationKind.TRANSLATION) == 50.0
    assert monitor.cache_hit_rate(OperationKind.LANGUAGE_DETECTION) == 50.0
    assert monitor.success_rate(OperationKind.TRANSLATION) == 100.0


@pytest.mark.asyncio
async def test_default_target_language_is_used(manager: TransManager, config: Config) -> None:
    DummyEngine.detect_outcomes = [DetectionResult(language="en", confidence=0.9)]
    DummyEngine.translation_outcomes = ["やあ"]

    result: TranslationResult = await manager.translate_text("Hi")

    assert result.target_language == config.TRANSLATION.DEFAULT_TARGET_LANGUAGE
    assert DummyEngine.translation_calls == [("Hi", "ja", "en")]


@pytest.mark.asyncio
async def test_same_language_short_circuits(manager: TransManager, monitor: PerformanceMonitor) -> None:
    DummyEngine.detect_outcomes = [DetectionResult(language="ja", confidence=0.99)]

    result: TranslationResult = await manager.translate_text("こんにちは", target_language="ja")

    assert result == TranslationResult(
        translated_text="こんにちは",
        source_language="ja",
        target_language="ja",
        confidence=0.99,
        from_cache=False,
        language_from_cache=False,
    )
    assert result.is_translated is False
    assert DummyEngine.translation_calls == []
    assert len(manager.translation_cache) == 0
    assert monitor.get_stats().translation.total_requests == 0
    assert monitor.get_stats().language_detection.total_requests == 1


@pytest.mark.asyncio
async def test_explicit_source_skips_detection(manager: TransManager, monitor: PerformanceMonitor) -> None:
    DummyEngine.translation_outcomes = ["Bonjour"]

    result: TranslationResult = await manager.translate_text("Hello", target_language="fr", source_language="en")

    assert result.translated_text == "Bonjour"
    assert result.confidence is None
    assert result.language_from_cache is False
    assert DummyEngine.detect_calls == []
    assert monitor.get_stats().language_detection.total_requests == 0


@pytest.mark.asyncio
async def test_explicit_source_equal_to_target_returns_original(manager: TransManager) -> None:
    result: TranslationResult = await manager.translate_text("Hello", target_language="en", source_language="en")

    assert result.translated_text == "Hello"
    assert result.from_cache is False
    assert DummyEngine.translation_calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
async def test_blank_text_is_rejected_without_service_calls(
    manager: TransManager, monitor: PerformanceMonitor, text: str
) -> None:
    with pytest.raises(EmptyContentError):
        await manager.translate_text(text, target_language="ja")

    assert DummyEngine.detect_calls == []
    assert monitor.get_stats().language_detection.total_requests == 0


@pytest.mark.asyncio
async def test_unsupported_target_language_is_rejected(manager: TransManager) -> None:
    with pytest.raises(NotSupportedLanguagesError):
        await manager.translate_text("Hello", target_language="xx")

    assert DummyEngine.detect_calls == []


@pytest.mark.asyncio
async def test_low_confidence_detection_is_not_cached(manager: TransManager) -> None:
    DummyEngine.detect_outcomes = [
        DetectionResult(language="en", confidence=0.4),
        DetectionResult(language="en", confidence=0.4),
    ]

    first: DetectionResult = await manager.detect_language("ok")
    second: DetectionResult = await manager.detect_language("ok")

    assert first.from_cache is False
    assert second.from_cache is False
    assert len(DummyEngine.detect_calls) == 2
    assert len(manager.detection_cache) == 0


@pytest.mark.asyncio
async def test_transient_detection_failure_is_retried(manager: TransManager, monitor: PerformanceMonitor) -> None:
    DummyEngine.detect_outcomes = [transient(), DetectionResult(language="en", confidence=0.9)]

    result: DetectionResult = await manager.detect_language("Hello")

    assert result.language == "en"
    assert len(DummyEngine.detect_calls) == 2
    assert monitor.success_rate(OperationKind.LANGUAGE_DETECTION) == 100.0


@pytest.mark.asyncio
async def test_detection_failure_propagates_original_error(
    manager: TransManager, monitor: PerformanceMonitor
) -> None:
    fatal = TranslationServiceError.from_status(403, "forbidden")
    DummyEngine.detect_outcomes = [fatal]

    with pytest.raises(TranslationServiceError) as exc_info:
        await manager.translate_text("Hello", target_language="ja")

    assert exc_info.value is fatal
    assert DummyEngine.translation_calls == []
    detection = monitor.stats_for(OperationKind.LANGUAGE_DETECTION)
    assert detection.failed_requests == 1
    assert detection.cache_misses == 1
    assert monitor.get_stats().translation.total_requests == 0


@pytest.mark.asyncio
async def test_translation_failure_after_retries_is_counted_and_raised(
    manager: TransManager, monitor: PerformanceMonitor
) -> None:
    errors: list[Exception] = [transient(), transient(), transient()]
    DummyEngine.translation_outcomes = list(errors)

    with pytest.raises(TranslationServiceError) as exc_info:
        await manager.translate_text("Hello", target_language="ja", source_language="en")

    assert exc_info.value is errors[-1]
    assert len(DummyEngine.translation_calls) == 3
    assert monitor.success_rate(OperationKind.TRANSLATION) == 0.0
    assert monitor.stats_for(OperationKind.TRANSLATION).failed_requests == 1
    assert len(manager.translation_cache) == 0


@pytest.mark.asyncio
async def test_detection_cache_hit_is_reported(manager: TransManager, monitor: PerformanceMonitor) -> None:
    manager.detection_cache.record("Hello", DetectionResult(language="en", confidence=0.9))

    result: DetectionResult = await manager.detect_language("Hello")

    assert result.from_cache is True
    detection = monitor.stats_for(OperationKind.LANGUAGE_DETECTION)
    assert detection.cache_hits == 1
    assert detection.success_requests == 0


@pytest.mark.asyncio
async def test_clear_caches_and_stats(manager: TransManager) -> None:
    DummyEngine.detect_outcomes = [DetectionResult(language="en", confidence=0.9)]
    DummyEngine.translation_outcomes = ["こんにちは"]
    await manager.translate_text("Hello", target_language="ja")

    stats = manager.get_stats()
    assert stats["language_detection"].size == 1
    assert stats["translation"].size == 1
    assert stats["language_detection"].confidence_threshold == 0.8

    manager.clear_caches()

    assert manager.get_stats()["translation"].size == 0
    assert manager.sweep_expired() == 0


@pytest.mark.asyncio
async def test_is_available_and_shutdown(manager: TransManager) -> None:
    assert manager.is_available() is True
    DummyEngine.available = False
    assert manager.is_available() is False

    await manager.shutdown()

    assert DummyEngine.close_called is True


def test_collaborators_are_built_from_config(config: Config) -> None:
    config.TRANSLATION_CACHE.MAX_SIZE = 7
    config.RETRY.MAX_RETRIES = 4

    manager = TransManager(config, DummyEngine())

    assert manager.translation_cache.stats().max_size == 7
    assert manager.detection_cache.stats().max_size == config.DETECTION_CACHE.MAX_SIZE
    assert manager.retry_handler.max_retries == 4
    assert manager.monitor.history_limit == config.STATISTICS.HISTORY_LIMIT


def test_create_engine_rejects_unknown_name(config: Config) -> None:
    config.TRANSLATION.ENGINE = "unknown"

    with pytest.raises(TranslateExceptionError):
        TransManager.create_engine(config)


def test_create_engine_initializes_registered_engine(monkeypatch: pytest.MonkeyPatch, config: Config) -> None:
    monkeypatch.setattr(TransInterface, "registered", {"dummy": DummyEngine})
    config.TRANSLATION.ENGINE = "dummy"

    engine: TransInterface = TransManager.create_engine(config)

    assert isinstance(engine, DummyEngine)


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now: float = now

    def __call__(self) -> float:
        return self.now


class GatedEngine(DummyEngine):
    """Translation suspends until the gate opens, so requests can overlap."""

    gate: ClassVar[asyncio.Event]
    entered: ClassVar[asyncio.Event]

    async def translation(self, content: str, tgt_lang: str, src_lang: str) -> str:
        type(self).translation_calls.append((content, tgt_lang, src_lang))
        type(self).entered.set()
        await type(self).gate.wait()
        return f"{content} [{tgt_lang}]"


@pytest.fixture
def gated_engine() -> GatedEngine:
    GatedEngine.gate = asyncio.Event()
    GatedEngine.entered = asyncio.Event()
    return GatedEngine()


@pytest.mark.asyncio
async def test_overlapping_identical_requests_stay_consistent(
    config: Config, monitor: PerformanceMonitor, gated_engine: GatedEngine
) -> None:
    manager = TransManager(
        config,
        gated_engine,
        translation_cache=TranslationCache(max_size=100, ttl=3600),
        retry_handler=RetryHandler(max_retries=0, base_delay=0, sleep=no_sleep),
        monitor=monitor,
    )

    async def release() -> None:
        await GatedEngine.entered.wait()
        GatedEngine.gate.set()

    first, second, _ = await asyncio.gather(
        manager.translate_text("Hello", target_language="ja", source_language="en"),
        manager.translate_text("Hello", target_language="ja", source_language="en"),
        release(),
    )

    assert first.translated_text == second.translated_text == "Hello [ja]"
    # Both requests missed the cache before either finished, so both called the engine
    assert len(DummyEngine.translation_calls) == 2
    assert len(manager.translation_cache) == 1
    assert manager.translation_cache.lookup("Hello", "en", "ja") == "Hello [ja]"
    assert monitor.stats_for(OperationKind.TRANSLATION).success_requests == 2


@pytest.mark.asyncio
async def test_sweep_while_request_is_suspended(
    config: Config, monitor: PerformanceMonitor, gated_engine: GatedEngine
) -> None:
    clock = FakeClock()
    manager = TransManager(
        config,
        gated_engine,
        translation_cache=TranslationCache(max_size=100, ttl=10.0, clock=clock),
        retry_handler=RetryHandler(max_retries=0, base_delay=0, sleep=no_sleep),
        monitor=monitor,
    )
    manager.translation_cache.record("Old", "en", "ja", "古い")
    clock.now = 20.0

    pending = asyncio.create_task(manager.translate_text("Hello", target_language="ja", source_language="en"))
    await GatedEngine.entered.wait()

    assert manager.sweep_expired() == 1
    assert len(manager.translation_cache) == 0

    GatedEngine.gate.set()
    result: TranslationResult = await pending

    assert result.translated_text == "Hello [ja]"
    assert result.from_cache is False
    assert len(manager.translation_cache) == 1
    assert manager.translation_cache.lookup("Hello", "en", "ja") == "Hello [ja]"
