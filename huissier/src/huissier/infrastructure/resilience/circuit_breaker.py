"""
Circuit Breaker Pattern Implementation.

Stops calling an upstream service that keeps failing.

State Machine:
    CLOSED -> OPEN -> HALF_OPEN -> CLOSED
           |                    |
           +--------------------+

- CLOSED: Normal operation, counting failures
- OPEN: Blocking all calls, waiting for timeout
- HALF_OPEN: Letting a few calls through to test recovery
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Tuple, Type

from huissier.infrastructure.monitoring import metrics


class CircuitBreakerState(str, Enum):
    """Circuit breaker states."""

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


_STATE_GAUGE = {
    CircuitBreakerState.CLOSED: 0,
    CircuitBreakerState.OPEN: 1,
    CircuitBreakerState.HALF_OPEN: 2,
}


class CircuitBreakerOpenError(Exception):
    """Raised when a call is blocked because the circuit is open."""

    def __init__(self, breaker_name: str, failure_count: int):
        self.breaker_name = breaker_name
        self.failure_count = failure_count
        super().__init__(
            f"Circuit breaker '{breaker_name}' is OPEN "
            f"({failure_count} failures). Calls are blocked."
        )


@dataclass
class CircuitBreakerConfig:
    """
    Circuit breaker configuration.

    Attributes:
        failure_threshold: Number of failures before opening circuit
        success_threshold: Number of successes to close from half-open
        timeout: Seconds to wait before trying half-open
        half_open_max_calls: Max calls let through in half-open state
        expected_exceptions: Exception types that count as failures;
            anything else passes through without touching the counters
    """

    failure_threshold: int = 5
    success_threshold: int = 2
    timeout: float = 60.0
    half_open_max_calls: int = 3
    expected_exceptions: Tuple[Type[BaseException], ...] = (Exception,)


class CircuitBreaker:
    """
    Async circuit breaker.

    Example:
        breaker = CircuitBreaker("solana_rpc")

        try:
            result = await breaker.call_async(fetch, wallet)
        except CircuitBreakerOpenError:
            raise BalanceOracleError("RPC circuit open")
    """

    def __init__(
        self,
        name: str,
        config: Optional[CircuitBreakerConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.name = name
        self.config = config or CircuitBreakerConfig()
        self._clock = clock

        self._state = CircuitBreakerState.CLOSED
        self._failure_count = 0
        self._success_count = 0
        self._half_open_calls = 0
        self._opened_at: Optional[float] = None

        metrics.circuit_breaker_state.labels(service=name).set(0)

    @property
    def state(self) -> CircuitBreakerState:
        """Get current state."""
        return self._state

    @property
    def failure_count(self) -> int:
        """Get current failure count."""
        return self._failure_count

    async def call_async(
        self, func: Callable[..., Awaitable[Any]], *args, **kwargs
    ) -> Any:
        """
        Execute async function with circuit breaker protection.

        Raises:
            CircuitBreakerOpenError: If circuit is open
            Exception: Any exception from the function
        """
        if not self._can_attempt():
            raise CircuitBreakerOpenError(self.name, self._failure_count)

        if self._state == CircuitBreakerState.HALF_OPEN:
            self._half_open_calls += 1

        try:
            result = await func(*args, **kwargs)
        except self.config.expected_exceptions:
            self._on_failure()
            raise
        self._on_success()
        return result

    def _can_attempt(self) -> bool:
        if self._state == CircuitBreakerState.CLOSED:
            return True

        if self._state == CircuitBreakerState.OPEN:
            elapsed = self._clock() - (self._opened_at or 0.0)
            if elapsed >= self.config.timeout:
                self._transition(CircuitBreakerState.HALF_OPEN)
                return True
            return False

        return self._half_open_calls < self.config.half_open_max_calls

    def _on_success(self) -> None:
        if self._state == CircuitBreakerState.CLOSED:
            self._failure_count = 0
        elif self._state == CircuitBreakerState.HALF_OPEN:
            self._success_count += 1
            if self._success_count >= self.config.success_threshold:
                self._transition(CircuitBreakerState.CLOSED)

    def _on_failure(self) -> None:
        self._failure_count += 1

        if self._state == CircuitBreakerState.HALF_OPEN:
            self._transition(CircuitBreakerState.OPEN)
        elif self._failure_count >= self.config.failure_threshold:
            self._transition(CircuitBreakerState.OPEN)

    def _transition(self, target: CircuitBreakerState) -> None:
        self._state = target
        self._success_count = 0
        self._half_open_calls = 0
        if target == CircuitBreakerState.OPEN:
            self._opened_at = self._clock()
        else:
            self._failure_count = 0
            self._opened_at = None
        metrics.circuit_breaker_state.labels(service=self.name).set(
            _STATE_GAUGE[target]
        )

    def reset(self) -> None:
        """Manually reset circuit breaker to CLOSED state."""
        self._transition(CircuitBreakerState.CLOSED)

    def get_stats(self) -> dict:
        """Get circuit breaker statistics."""
        return {
            "name": self.name,
            "state": self._state.value,
            "failure_count": self._failure_count,
            "success_count": self._success_count,
        }
