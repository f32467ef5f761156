"""Retry helper for flaky elements and actions.

Three resilience patterns against an unpredictable remote UI:
- retry(): repeat the same action under a backoff policy
- wait_for_condition(): poll until a state becomes true
- try_strategies(): try alternative actions in order
"""

import asyncio
import inspect
import time
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Optional, TypeVar

import structlog

from .models import RetryPolicy

logger = structlog.get_logger()

T = TypeVar("T")


class ResilienceError(Exception):
    """Base class for terminal failures of the resilience helpers."""

    def __init__(self, label: str, message: str):
        self.label = label
        super().__init__(message)


class RetryExhausted(ResilienceError):
    """Raised when every bounded attempt of a retried operation failed."""

    def __init__(self, label: str, attempts: int, last_error: BaseException):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(label, f"All {attempts} attempts failed for {label}: {last_error}")


class ConditionTimeout(ResilienceError):
    """Raised when a polled condition never became true before the deadline."""

    def __init__(self, label: str, timeout_ms: int):
        self.timeout_ms = timeout_ms
        super().__init__(label, f"Timeout waiting for condition: {label} (after {timeout_ms}ms)")


class AllStrategiesFailed(ResilienceError):
    """Raised when every fallback strategy failed."""

    def __init__(self, label: str, attempted: int, last_error: BaseException):
        self.attempted = attempted
        self.last_error = last_error
        super().__init__(label, f"All strategies failed for {label}: {last_error}")


class RetryHelper:
    """Executes fallible async operations with retry, polling and fallback.

    Example:
        helper = RetryHelper(max_attempts=3, interval_ms=1000)

        await helper.retry(lambda: page.click("#submit"), "Click submit")
        await helper.wait_for_condition(lambda: page.is_visible(".cart"), "cart visible")
        await helper.try_strategies(
            [lambda: page.click("text=Add"), lambda: page.click(".add-to-cart")],
            "Add to cart",
        )
    """

    def __init__(
        self,
        max_attempts: int = 3,
        interval_ms: int = 1000,
        backoff_multiplier: float = 1.5,
        policy: Optional[RetryPolicy] = None,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
    ):
        """Initialize the helper.

        Args:
            max_attempts: Attempts per retry() call
            interval_ms: Delay before the second attempt
            backoff_multiplier: Factor applied to the delay after each failed attempt
            policy: Full policy, takes precedence over the individual arguments
            sleep: Coroutine function taking seconds, defaults to asyncio.sleep
        """
        self.policy = policy or RetryPolicy(
            max_attempts=max_attempts,
            initial_interval_ms=interval_ms,
            backoff_multiplier=backoff_multiplier,
        )
        self._sleep = sleep or asyncio.sleep
        self.log = logger.bind(component="retry_helper")

    @classmethod
    def from_config(cls, config, **kwargs) -> "RetryHelper":
        """Build a helper from the ``retries.*`` configuration keys."""
        return cls(
            max_attempts=config.get("retries.element_retries", 3),
            interval_ms=config.get("retries.interval_ms", 1000),
            backoff_multiplier=config.get("retries.backoff_multiplier", 1.5),
            **kwargs,
        )

    async def retry(
        self,
        operation: Callable[[], Awaitable[T]],
        label: str,
        *,
        max_attempts: Optional[int] = None,
        interval_ms: Optional[int] = None,
        backoff_multiplier: Optional[float] = None,
    ) -> T:
        """Await ``operation`` until it succeeds or the attempts run out.

        The backoff interval starts fresh on every call.

        Args:
            operation: Zero-argument coroutine function
            label: Action name used in logs and errors
            max_attempts: Override the policy for this call
            interval_ms: Override the initial interval for this call
            backoff_multiplier: Override the multiplier for this call

        Returns:
            The operation's result from the first successful attempt

        Raises:
            RetryExhausted: If every attempt failed
        """
        policy = RetryPolicy(
            max_attempts=max_attempts if max_attempts is not None else self.policy.max_attempts,
            initial_interval_ms=interval_ms if interval_ms is not None else self.policy.initial_interval_ms,
            backoff_multiplier=(
                backoff_multiplier if backoff_multiplier is not None else self.policy.backoff_multiplier
            ),
        )

        current_interval = float(policy.initial_interval_ms)
        last_error: Optional[BaseException] = None

        for attempt in range(1, policy.max_attempts + 1):
            try:
                return await operation()
            except Exception as e:
                last_error = e
                self.log.warning(
                    "Attempt failed",
                    action=label,
                    attempt=attempt,
                    max_attempts=policy.max_attempts,
                    error=str(e),
                )

                if attempt < policy.max_attempts:
                    self.log.debug("Retrying", action=label, delay_ms=current_interval)
                    await self._sleep(current_interval / 1000)
                    current_interval *= policy.backoff_multiplier

        raise RetryExhausted(label, policy.max_attempts, last_error) from last_error

    async def wait_for_condition(
        self,
        predicate: Callable[[], Any],
        label: str,
        *,
        timeout_ms: int = 30000,
        interval_ms: int = 500,
    ) -> bool:
        """Poll ``predicate`` until it returns a truthy value.

        ``predicate`` may be a plain function or a coroutine function. An exception
        raised by it is logged and counts as a false poll.

        Raises:
            ConditionTimeout: If the deadline passes without a truthy result
        """
        start = time.monotonic()
        deadline = start + timeout_ms / 1000
        polls = 0

        while time.monotonic() < deadline:
            polls += 1
            try:
                result = predicate()
                if inspect.isawaitable(result):
                    result = await result
                if result:
                    self.log.debug(
                        "Condition met",
                        condition=label,
                        polls=polls,
                        elapsed_ms=int((time.monotonic() - start) * 1000),
                    )
                    return True
            except Exception as e:
                self.log.info("Error checking condition", condition=label, error=str(e))

            await asyncio.sleep(interval_ms / 1000)

        self.log.warning("Condition timed out", condition=label, timeout_ms=timeout_ms, polls=polls)
        raise ConditionTimeout(label, timeout_ms)

    async def try_strategies(
        self,
        strategies: Sequence[Callable[[], Awaitable[T]]],
        label: str,
    ) -> T:
        """Await each strategy in order and return the first success.

        Raises:
            ValueError: If ``strategies`` is empty
            AllStrategiesFailed: If every strategy failed
        """
        if not strategies:
            raise ValueError(f"No strategies given for {label}")

        last_error: Optional[BaseException] = None
        total = len(strategies)

        for index, strategy in enumerate(strategies, start=1):
            try:
                result = await strategy()
                if index > 1:
                    self.log.info("Fallback strategy succeeded", action=label, strategy=index)
                return result
            except Exception as e:
                last_error = e
                self.log.warning(
                    "Strategy failed",
                    action=label,
                    strategy=index,
                    total=total,
                    error=str(e),
                )

        raise AllStrategiesFailed(label, total, last_error) from last_error
