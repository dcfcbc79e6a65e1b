from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import structlog

from ..core.errors import WIError


logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    max_attempts: int = 3
    base_delay_ms: int = 1000

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.base_delay_ms < 0:
            raise ValueError("base_delay_ms must be >= 0")

    @classmethod
    def from_settings(cls, settings: Any) -> "RetryPolicy":
        return cls(max_attempts=settings.retries, base_delay_ms=settings.retry_base_delay_ms)


def backoff_delay_ms(attempt: int, base_delay_ms: int) -> float:
    """Exponential delay for ``attempt`` (1-based) plus up to one second of jitter."""
    return base_delay_ms * (2 ** (attempt - 1)) + random.uniform(0, 1000)


async def with_retry(
    operation: Callable[[], Awaitable[Any]],
    max_attempts: int = 3,
    base_delay_ms: int = 1000,
    tool_name: str | None = None,
) -> Any:
    """Run ``operation`` until it succeeds or the attempt budget is spent.

    - a WIError with retryable=False is re-raised at once, even on attempt 1
    - the failure from the last attempt propagates unchanged
    """
    attempt = 0
    while True:
        attempt += 1
        try:
            return await operation()
        except Exception as exc:  # noqa: BLE001 - retry policy decides what propagates
            if isinstance(exc, WIError) and not exc.retryable:
                raise
            if attempt >= max_attempts:
                raise

            delay_ms = backoff_delay_ms(attempt, base_delay_ms)
            logger.warning(
                "retrying_operation",
                tool=tool_name,
                attempt=attempt,
                max_attempts=max_attempts,
                delay_ms=round(delay_ms),
                error=str(exc),
            )
            await asyncio.sleep(delay_ms / 1000.0)
