"""This module defines the abstract base class for translation engines and the translation error taxonomy.

Engines talk to an external detection/translation service and translate every failure into a
TranslationServiceError tagged with an ErrorKind. The tag is assigned once, at the engine
boundary, and the rest of the application only reads it.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, ClassVar

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.config_models import Config
    from models.translation_models import DetectionResult

__all__: list[str] = [
    "EmptyContentError",
    "ErrorKind",
    "NotSupportedLanguagesError",
    "TransInterface",
    "TranslateExceptionError",
    "TranslationServiceError",
    "TranslationValidationError",
    "classify_status",
]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class ErrorKind(Enum):
    """Classification of a service failure.

    TRANSIENT and RATE_LIMITED failures may succeed when retried; FATAL failures never will.
    """

    TRANSIENT = "transient"
    RATE_LIMITED = "rate_limited"
    FATAL = "fatal"

    @property
    def retryable(self) -> bool:
        match self:
            case ErrorKind.TRANSIENT | ErrorKind.RATE_LIMITED:
                return True
            case ErrorKind.FATAL:
                return False


def classify_status(status: int) -> ErrorKind:
    """Map an HTTP status code of a failed response to an ErrorKind.

    Args:
        status (int): HTTP status code (expected to be 400 or above).

    Returns:
        ErrorKind: RATE_LIMITED for 429, TRANSIENT for 5xx, FATAL otherwise.
    """
    if status == 429:
        return ErrorKind.RATE_LIMITED
    if status >= 500:
        return ErrorKind.TRANSIENT
    return ErrorKind.FATAL


class TranslateExceptionError(Exception):
    """An error occurred during the translation process."""


class TranslationValidationError(TranslateExceptionError, ValueError):
    """The request was rejected before contacting the service."""


class EmptyContentError(TranslationValidationError):
    """The text to detect or translate is empty or blank."""


class NotSupportedLanguagesError(TranslationValidationError):
    """An unsupported language code was specified."""


class TranslationServiceError(TranslateExceptionError):
    """The external detection/translation service failed.

    Attributes:
        kind (ErrorKind): Failure classification.
        status (int | None): HTTP status code, None for network-level failures.
    """

    def __init__(self, message: str, *, kind: ErrorKind, status: int | None = None) -> None:
        super().__init__(message)
        self.kind: ErrorKind = kind
        self.status: int | None = status

    @classmethod
    def from_status(cls, status: int, message: str) -> TranslationServiceError:
        """Build an error whose kind is derived from an HTTP status code."""
        return cls(message, kind=classify_status(status), status=status)

    @property
    def retryable(self) -> bool:
        return self.kind.retryable

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({str(self)!r}, kind={self.kind.name}, status={self.status!r})"


class TransInterface(ABC):
    """Abstract base class for translation engines.

    Subclasses register themselves under the name returned by `fetch_engine_name()` and are
    selected by the `TRANSLATION.ENGINE` setting.

    Attributes:
        registered (ClassVar[dict[str, type[TransInterface]]]): Registered engine classes keyed by name.
    """

    registered: ClassVar[dict[str, type[TransInterface]]] = {}

    def __init_subclass__(cls, **kwargs) -> None:
        """Register the subclass under its distinguished name.

        Engines returning an empty name are allowed but not registered.
        """
        super().__init_subclass__(**kwargs)
        if not hasattr(cls, "fetch_engine_name") or not callable(cls.fetch_engine_name):
            msg = "Subclasses of TransInterface must implement the static method fetch_engine_name()."
            raise TypeError(msg)

        if not isinstance(cls.fetch_engine_name(), str) or cls.fetch_engine_name() == "":
            return

        if cls.fetch_engine_name() in cls.registered:
            msg: str = f"A translation engine with the name '{cls.fetch_engine_name()}' is already registered."
            raise ValueError(msg)

        cls.registered[cls.fetch_engine_name()] = cls

    @property
    def engine_name(self) -> str:
        return self.fetch_engine_name()

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Check if the translation engine is available.

        Returns:
            bool: True if the engine has been initialized and not closed.
        """
        raise NotImplementedError

    @staticmethod
    @abstractmethod
    def fetch_engine_name() -> str:
        """Fetch the distinguished name of the translation engine.

        Called during class registration in __init_subclass__, so it must be available at
        subclass definition time.

        Returns:
            str: The distinguished name of the translation engine.
        """
        raise NotImplementedError

    @abstractmethod
    def initialize(self, config: Config) -> None:
        """Initialize the engine with the given configuration.

        Args:
            config (Config): Configuration object containing settings for the translation engine.
        """
        raise NotImplementedError

    @abstractmethod
    async def detect_language(self, content: str) -> DetectionResult:
        """Detect the language of the input text.

        Args:
            content (str): Text to analyze.

        Returns:
            DetectionResult: Detected language code and confidence.

        Raises:
            TranslationServiceError: If the service call fails.
        """
        raise NotImplementedError

    @abstractmethod
    async def translation(self, content: str, tgt_lang: str, src_lang: str) -> str:
        """Translate input text to the target language.

        Args:
            content (str): Text to be translated.
            tgt_lang (str): Target language code.
            src_lang (str): Source language code.

        Returns:
            str: Translated text.

        Raises:
            TranslationServiceError: If the service call fails.
        """
        raise NotImplementedError

    @abstractmethod
    async def close(self) -> None:
        """Release resources held by the engine."""
        raise NotImplementedError

    def get_authentication_key(self) -> str:
        """Retrieve the authentication key from environment variables.

        The key is read from a variable named after the engine with the suffix "_API_OAUTH".
        For the engine "google_v2" the variable is "GOOGLE_V2_API_OAUTH".

        Returns:
            str: The authentication key, or an empty string if the environment variable is not set.
        """
        return os.getenv(f"{self.fetch_engine_name().upper()}_API_OAUTH", "")
