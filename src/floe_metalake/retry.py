"""Transport retries for HTTPClient.

HTTPClient wraps its single-send method with create_retry_decorator(). A
request is resent only when it failed before reaching the service
(MetalakeConnectionError); anything the service answered, error or not,
passes straight through. A CircuitBreaker shared by all requests of one
client stops sending once the service has been unreachable for several
requests in a row, and lets a trial request through after a cool-down.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import wraps
from typing import ParamSpec, TypeVar

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from floe_metalake.config import RetryConfig
from floe_metalake.errors import CircuitOpenError, MetalakeConnectionError
from floe_metalake.observability import log_retry_attempt

P = ParamSpec("P")
R = TypeVar("R")

DEFAULT_RETRY_EXCEPTIONS: tuple[type[Exception], ...] = (MetalakeConnectionError,)


@dataclass
class CircuitBreaker:
    """Counts requests in a row that exhausted their retries.

    The breaker opens once failure_count reaches threshold. After
    reset_timeout seconds it lets a trial request through: a success closes
    it, another failure opens it for a further reset_timeout. A threshold of
    0 disables it.

    Example:
        >>> breaker = CircuitBreaker(threshold=1)
        >>> breaker.record_failure()
        >>> breaker.is_open
        True
    """

    threshold: int
    reset_timeout: float = 30.0
    failure_count: int = 0
    opened_at: float | None = None
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)

    @property
    def is_open(self) -> bool:
        """True while calls must fail fast; False once a trial call may go through."""
        if self.opened_at is None:
            return False
        return self.clock() - self.opened_at < self.reset_timeout

    def record_failure(self) -> None:
        if not self.threshold:
            return
        self.failure_count += 1
        if self.failure_count >= self.threshold:
            self.opened_at = self.clock()

    def record_success(self) -> None:
        self.failure_count = 0
        self.opened_at = None

    reset = record_success


def create_retry_decorator(
    config: RetryConfig,
    *,
    retry_exceptions: tuple[type[Exception], ...] | None = None,
    operation_name: str | None = None,
    circuit_breaker: CircuitBreaker | None = None,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Build a decorator that resends on transport failure.

    Args:
        config: Attempts and backoff.
        retry_exceptions: Exceptions that mean "not delivered". Defaults to
            MetalakeConnectionError.
        operation_name: Name used in retry log events. Defaults to the
            function name.
        circuit_breaker: Breaker to consult before, and update after, each
            call.

    Returns:
        A decorator. The wrapped function re-raises the last exception once
        attempts run out, and raises CircuitOpenError without calling the
        function while the breaker is open.
    """
    retryable = retry_exceptions or DEFAULT_RETRY_EXCEPTIONS

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        name = operation_name or func.__name__

        def log_before_sleep(state: RetryCallState) -> None:
            failure = state.outcome.exception() if state.outcome else None
            log_retry_attempt(
                operation=name,
                attempt=state.attempt_number,
                max_attempts=config.max_attempts,
                wait_seconds=state.next_action.sleep if state.next_action else 0.0,
                error=str(failure),
            )

        retrying = Retrying(
            retry=retry_if_exception_type(retryable),
            stop=stop_after_attempt(config.max_attempts),
            wait=wait_exponential_jitter(
                multiplier=config.initial_wait_seconds,
                max=config.max_wait_seconds,
                jitter=config.jitter_seconds,
            ),
            before_sleep=log_before_sleep,
            reraise=True,
        )

        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            if circuit_breaker is not None and circuit_breaker.is_open:
                raise CircuitOpenError(
                    f"Circuit open for {name} after {circuit_breaker.failure_count} "
                    "undelivered requests"
                )
            try:
                result = retrying.copy()(func, *args, **kwargs)
            except retryable:
                if circuit_breaker is not None:
                    circuit_breaker.record_failure()
                raise
            if circuit_breaker is not None:
                circuit_breaker.record_success()
            return result

        return wrapper

    return decorator
