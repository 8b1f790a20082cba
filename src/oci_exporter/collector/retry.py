"""Retry policy for provider calls, built on tenacity."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, TypeVar

import tenacity
from loguru import logger

from oci_exporter.utils.exceptions import RateLimitError

T = TypeVar("T")


def is_rate_limit_error(exc: BaseException) -> bool:
    """True for throttling signals: RateLimitError, HTTP 429, or a TooManyRequests error code."""
    if isinstance(exc, RateLimitError):
        return True
    if getattr(exc, "status", None) == 429:
        return True
    return "TooManyRequests" in str(exc)


def exponential_backoff(attempt: int) -> float:
    """2**attempt seconds, attempt counting from 0."""
    return float(2**attempt)


def _log_retry_attempt(retry_state: tenacity.RetryCallState) -> None:
    """Log when a retry attempt is made."""
    delay = retry_state.next_action.sleep if retry_state.next_action else 0
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(f"Rate limit hit (attempt {retry_state.attempt_number}): {exc}. Backing off for {delay:.0f}s")


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    backoff: Callable[[int], float] = exponential_backoff
    is_retryable: Callable[[BaseException], bool] = is_rate_limit_error
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep

    def _wait(self, retry_state: tenacity.RetryCallState) -> float:
        # tenacity numbers attempts from 1; the backoff function counts from 0
        return self.backoff(retry_state.attempt_number - 1)

    def retrying(self) -> tenacity.AsyncRetrying:
        return tenacity.AsyncRetrying(
            stop=tenacity.stop_after_attempt(self.max_attempts),
            wait=self._wait,
            retry=tenacity.retry_if_exception(self.is_retryable),
            before_sleep=_log_retry_attempt,
            sleep=self.sleep,
            reraise=True,
        )

    async def call(self, fn: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """Run `fn`, retrying retryable errors; the last error is re-raised once attempts run out."""
        return await self.retrying()(fn, *args, **kwargs)
