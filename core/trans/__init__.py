"""Translation orchestration, engines and retry policy.

This package provides language detection and translation through pluggable engine
implementations, fronted by in-memory caches and wrapped in a bounded retry policy.
"""

from core.trans.interface import (
    EmptyContentError,
    ErrorKind,
    NotSupportedLanguagesError,
    TransInterface,
    TranslateExceptionError,
    TranslationServiceError,
    TranslationValidationError,
)
from core.trans.manager import TransManager
from core.trans.retry import RetryHandler

__all__: list[str] = [
    "EmptyContentError",
    "ErrorKind",
    "NotSupportedLanguagesError",
    "RetryHandler",
    "TransInterface",
    "TransManager",
    "TranslateExceptionError",
    "TranslationServiceError",
    "TranslationValidationError",
]
