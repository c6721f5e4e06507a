"""Performance statistics for detection and translation requests."""

from core.stats.performance_monitor import PerformanceMonitor

__all__: list[str] = ["PerformanceMonitor"]
