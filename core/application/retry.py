"""Retry loop for compensating actions."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RetryPolicy:
    """Retry policy for a compensating step."""

    max_attempts: int = 3
    backoff_seconds: float = 0.0


class RetryExhausted(Exception):
    """Every attempt allowed by the policy failed."""

    def __init__(self, name: str, attempts: int, last_error: Optional[BaseException]):
        super().__init__(f"{name} failed after {attempts} attempt(s): {last_error}")
        self.name = name
        self.attempts = attempts
        self.last_error = last_error


async def run_with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    name: str,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    log_prefix: str = "",
) -> T:
    """Run ``operation`` until it succeeds or the policy runs out of attempts.

    Exceptions outside ``retry_on`` propagate immediately.

    Args:
        operation: Zero-argument coroutine function to run
        policy: Attempts and backoff between them
        name: Operation name used in logs and in RetryExhausted
        retry_on: Exception types that count as a failed attempt
        log_prefix: Prefix for log lines (usually ``[execution_id]``)

    Returns:
        The operation's result

    Raises:
        RetryExhausted: If the last allowed attempt also failed
    """
    last_error: Optional[BaseException] = None
    attempts = 0

    for attempt in range(1, policy.max_attempts + 1):
        attempts = attempt
        try:
            result = await operation()
            if attempt > 1:
                logger.info(f"{log_prefix} {name} succeeded on attempt {attempt}")
            return result
        except retry_on as exc:
            last_error = exc
            logger.warning(
                f"{log_prefix} {name} attempt {attempt}/{policy.max_attempts} failed: {exc}"
            )

            # If we have more attempts, wait before retry
            if attempt < policy.max_attempts and policy.backoff_seconds > 0:
                await asyncio.sleep(policy.backoff_seconds)

    raise RetryExhausted(name=name, attempts=attempts, last_error=last_error)
