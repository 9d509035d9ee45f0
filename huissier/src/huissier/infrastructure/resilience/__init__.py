"""
Resilience patterns for outbound calls.
"""

from huissier.infrastructure.resilience.circuit_breaker import (
    CircuitBreaker,
    CircuitBreakerConfig,
    CircuitBreakerOpenError,
    CircuitBreakerState,
)
from huissier.infrastructure.resilience.retry import Retry, RetryConfig, RetryError

__all__ = [
    "CircuitBreaker",
    "CircuitBreakerConfig",
    "CircuitBreakerOpenError",
    "CircuitBreakerState",
    "Retry",
    "RetryConfig",
    "RetryError",
]
