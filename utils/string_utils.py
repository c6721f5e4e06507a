from __future__ import annotations

from typing import Final

__all__: list[str] = ["StringUtils"]

LOG_EXCERPT_LENGTH: Final[int] = 30


class StringUtils:
    """Utility class for the small string operations shared by caches and the orchestrator."""

    @staticmethod
    def ensure_str(value: str | None) -> str:
        """Ensure that the value is a string, returning an empty string if None.

        Args:
            value (str | None): The value to ensure as a string.

        Returns:
            str: The value as a string, or empty string if None.
        """
        if not isinstance(value, str):
            value = str(value) if value is not None else ""
        return value

    @staticmethod
    def is_blank(value: str | None) -> bool:
        """Check whether the value is None, empty, or whitespace only."""
        return not StringUtils.ensure_str(value).strip()

    @staticmethod
    def truncate(value: str, limit: int) -> str:
        """Return at most the first `limit` characters of the value.

        Args:
            value (str): The string to truncate.
            limit (int): Maximum number of characters. Zero or negative means no limit.

        Returns:
            str: The truncated string.
        """
        value = StringUtils.ensure_str(value)
        if limit <= 0 or len(value) <= limit:
            return value
        return value[:limit]

    @staticmethod
    def excerpt(value: str, limit: int = LOG_EXCERPT_LENGTH) -> str:
        """Shorten the value for log output, appending an ellipsis when it was cut."""
        value = StringUtils.ensure_str(value)
        if len(value) <= limit:
            return value
        return f"{value[:limit]}..."
