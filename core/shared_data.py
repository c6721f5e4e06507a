"""Shared data management for the translation service.

This module defines the SharedData class, which builds the translation service from the
configuration and owns its lifecycle: the performance monitor, both caches, the retry
handler, the translation engine and the TransManager that ties them together, plus the
periodic tasks that sweep the caches and flush statistics to the log.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from core.trans.manager import TransManager
from utils.logger_utils import LoggerUtils
from utils.periodic_task import PeriodicTask

if TYPE_CHECKING:
    import logging

    from core.cache.detection_cache import LanguageDetectionCache
    from core.cache.translation_cache import TranslationCache
    from core.stats.performance_monitor import PerformanceMonitor
    from core.trans.interface import TransInterface
    from core.trans.retry import RetryHandler
    from models.config_models import Config


__all__: list[str] = ["SharedData"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


@dataclass
class SharedData:
    _config: Config = field()
    _engine: TransInterface | None = field(default=None)
    _monitor: PerformanceMonitor = field(init=False)
    _detection_cache: LanguageDetectionCache = field(init=False)
    _translation_cache: TranslationCache = field(init=False)
    _retry_handler: RetryHandler = field(init=False)
    _trans_manager: TransManager = field(init=False)
    _tasks: list[PeriodicTask] = field(init=False, default_factory=list)

    def __post_init__(self) -> None:
        config: Config = self._config
        if self._engine is None:
            self._engine = TransManager.create_engine(config)
        self._trans_manager = TransManager(config, self._engine)
        self._monitor = self._trans_manager.monitor
        self._detection_cache = self._trans_manager.detection_cache
        self._translation_cache = self._trans_manager.translation_cache
        self._retry_handler = self._trans_manager.retry_handler
        self._tasks = [
            PeriodicTask(
                "language_detection_cache_sweep",
                config.DETECTION_CACHE.SWEEP_INTERVAL,
                self._sweep_detection_cache,
            ),
            PeriodicTask(
                "translation_cache_sweep",
                config.TRANSLATION_CACHE.SWEEP_INTERVAL,
                self._sweep_translation_cache,
            ),
            PeriodicTask("statistics_log", config.STATISTICS.LOG_INTERVAL, self._monitor.log_stats),
        ]

    async def component_load(self) -> None:
        """Start the cache sweeps and the statistics flush."""
        for task in self._tasks:
            task.start()
        logger.debug("'%s' component loaded", self.__class__.__name__)

    async def component_teardown(self) -> None:
        """Stop the periodic tasks, flush statistics and close the engine."""
        for task in self._tasks:
            await task.cancel()
        self._monitor.log_stats()
        await self._trans_manager.shutdown()
        logger.debug("'%s' component unloaded", self.__class__.__name__)

    def _sweep_detection_cache(self) -> None:
        removed: int = self._detection_cache.sweep_expired()
        if removed:
            logger.info("Removed %d expired language detection cache entries", removed)

    def _sweep_translation_cache(self) -> None:
        removed: int = self._translation_cache.sweep_expired()
        if removed:
            logger.info("Removed %d expired translation cache entries", removed)

    @property
    def config(self) -> Config:
        return self._config

    @property
    def monitor(self) -> PerformanceMonitor:
        return self._monitor

    @property
    def detection_cache(self) -> LanguageDetectionCache:
        return self._detection_cache

    @property
    def translation_cache(self) -> TranslationCache:
        return self._translation_cache

    @property
    def trans_manager(self) -> TransManager:
        return self._trans_manager

    @property
    def tasks(self) -> list[PeriodicTask]:
        return self._tasks
