"""Bounded retry with exponential backoff for external service calls.

Failures are classified by the ErrorKind carried on TranslationServiceError. Retryable
failures are attempted again after a non-blocking wait; fatal failures and exceptions of
any other type are raised immediately.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from core.trans.interface import TranslationServiceError
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Awaitable, Callable

__all__: list[str] = ["RetryHandler"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

DEFAULT_MAX_RETRIES: int = 2
DEFAULT_BASE_DELAY: float = 0.5


class RetryHandler:
    """Invoke a coroutine factory with bounded retries.

    Attempt 0 runs immediately. Retry n (1-based) waits `base_delay * 2 ** (n - 1)` seconds.
    At most `max_retries` retries follow the first attempt. When the budget is exhausted the
    last observed error is raised unchanged.

    Attributes:
        max_retries (int): Default number of retries after the first attempt.
        base_delay (float): Default delay in seconds before the first retry.
    """

    def __init__(
        self,
        max_retries: int = DEFAULT_MAX_RETRIES,
        base_delay: float = DEFAULT_BASE_DELAY,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._validate(max_retries, base_delay)
        self.max_retries: int = max_retries
        self.base_delay: float = base_delay
        self._sleep: Callable[[float], Awaitable[None]] = sleep

    @staticmethod
    def _validate(max_retries: int, base_delay: float) -> None:
        if max_retries < 0:
            msg: str = f"max_retries must not be negative: {max_retries}"
            raise ValueError(msg)
        if base_delay < 0:
            msg = f"base_delay must not be negative: {base_delay}"
            raise ValueError(msg)

    @staticmethod
    def is_retryable(err: BaseException) -> bool:
        """Check whether an error may succeed when retried.

        Args:
            err (BaseException): Error raised by the operation.

        Returns:
            bool: True only for TranslationServiceError with a retryable kind.
        """
        match err:
            case TranslationServiceError(kind=kind):
                return kind.retryable
            case _:
                return False

    @staticmethod
    def backoff_delay(retry: int, base_delay: float) -> float:
        """Return the wait before the given retry.

        Args:
            retry (int): Retry number starting at 1.
            base_delay (float): Delay before the first retry.

        Returns:
            float: Seconds to wait.
        """
        return base_delay * (2 ** (retry - 1))

    async def invoke[T](
        self,
        operation: Callable[[], Awaitable[T]],
        *,
        max_retries: int | None = None,
        base_delay: float | None = None,
        description: str = "operation",
    ) -> T:
        """Run the operation, retrying retryable failures.

        Args:
            operation (Callable[[], Awaitable[T]]): Zero-argument callable returning a fresh awaitable per attempt.
            max_retries (int | None): Retries after the first attempt. Uses the handler default when None.
            base_delay (float | None): Delay before the first retry. Uses the handler default when None.
            description (str): Label used in log messages.

        Returns:
            T: The operation's result.

        Raises:
            Exception: The fatal error, or the last retryable error once the budget is exhausted.
        """
        retries: int = self.max_retries if max_retries is None else max_retries
        delay_base: float = self.base_delay if base_delay is None else base_delay
        self._validate(retries, delay_base)

        attempt: int = 0
        while True:
            try:
                return await operation()
            except Exception as err:
                if not self.is_retryable(err):
                    logger.debug("%s failed with a non-retryable error: %r", description, err)
                    raise
                if attempt >= retries:
                    logger.warning("%s failed after %d attempts: %s", description, attempt + 1, err)
                    raise

                attempt += 1
                delay: float = self.backoff_delay(attempt, delay_base)
                logger.info(
                    "%s failed (%s), retrying in %.2f sec (retry %d/%d)", description, err, delay, attempt, retries
                )
                if delay > 0:
                    await self._sleep(delay)
