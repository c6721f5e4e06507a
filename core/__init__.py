"""Core services of the chat translator.

This package contains the shared data container that wires the translation service
together, the in-memory caches, the translation engines and orchestrator, and the
performance statistics.
"""

from core.shared_data import SharedData
from core.version import VERSION

__all__: list[str] = [
    "VERSION",
    "SharedData",
]
