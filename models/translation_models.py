"""Models for translation-related data.

Defines DetectionResult and TranslationResult dataclasses returned by the translation orchestrator.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__: list[str] = ["DetectionResult", "TranslationResult"]


@dataclass
class DetectionResult:
    """Language detection result.

    Attributes:
        language (str): Detected language code.
        confidence (float): Detection confidence score (0.0 to 1.0).
        from_cache (bool): Whether the result was served from the detection cache.
    """

    language: str
    confidence: float
    from_cache: bool = False


@dataclass
class TranslationResult:
    """Translation result handed to the chat delivery surface.

    `confidence` and `language_from_cache` only carry information when the source language
    was auto-detected. With an explicit source language they are None and False.

    Attributes:
        translated_text (str): Translated text, or the original text when no translation was needed.
        source_language (str): Source language code (given or detected).
        target_language (str): Target language code.
        confidence (float | None): Detection confidence, None if the source language was explicit.
        from_cache (bool): Whether the translation was served from the translation cache.
        language_from_cache (bool): Whether the detected language was served from the detection cache.
    """

    translated_text: str
    source_language: str
    target_language: str
    confidence: float | None = None
    from_cache: bool = False
    language_from_cache: bool = False

    def __str__(self) -> str:
        return self.translated_text

    @property
    def is_translated(self) -> bool:
        """Check whether the text was actually translated.

        Returns:
            bool: False when source and target languages are the same.
        """
        return self.source_language != self.target_language
