"""
Telegram Bot API client.

Thin JSON client over https://api.telegram.org/bot<token>/<method>.
Production-hardened with Circuit Breaker, Retry, and Metrics.
"""

import asyncio
import time
from dataclasses import replace
from typing import Any, Dict, Optional

import aiohttp

from huissier.domain.exceptions.upstream import InviteIssuerError
from huissier.infrastructure.monitoring import metrics
from huissier.infrastructure.monitoring.logger import get_logger
from huissier.infrastructure.resilience import (
    CircuitBreaker,
    CircuitBreakerConfig,
    CircuitBreakerOpenError,
    Retry,
    RetryConfig,
    RetryError,
)

logger = get_logger(__name__)

SERVICE = "telegram"


class TransientTelegramError(Exception):
    """Bot API asked us to back off (429) or failed server-side (5xx)."""


class TelegramBotClient:
    """
    Bot API caller.

    Methods that create something (``idempotent=False``) are only retried
    when the request provably never reached Telegram (connection refused,
    DNS failure) or Telegram answered 429/5xx. Read-only and revoke calls
    retry on any transport error.
    """

    def __init__(
        self,
        bot_token: str,
        api_url: str = "https://api.telegram.org",
        timeout: float = 10.0,
        retry_config: Optional[RetryConfig] = None,
        circuit_breaker_config: Optional[CircuitBreakerConfig] = None,
    ):
        """
        Initialize Bot API client.

        Args:
            bot_token: Bot token from BotFather
            api_url: Bot API base URL
            timeout: Total timeout per HTTP attempt in seconds
            retry_config: Optional retry config
            circuit_breaker_config: Optional circuit breaker config
        """
        self._base_url = f"{api_url.rstrip('/')}/bot{bot_token}"
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: Optional[aiohttp.ClientSession] = None

        base = retry_config or RetryConfig(initial_delay=0.5, max_delay=5.0)
        self._retry_any = Retry(
            replace(
                base,
                retry_on=(
                    aiohttp.ClientError,
                    asyncio.TimeoutError,
                    TransientTelegramError,
                ),
            )
        )
        self._retry_unsent = Retry(
            replace(
                base,
                retry_on=(aiohttp.ClientConnectorError, TransientTelegramError),
            )
        )

        # Bot API refusals ("chat not found", ...) must not open the circuit
        self.circuit_breaker = CircuitBreaker(
            SERVICE,
            replace(
                circuit_breaker_config or CircuitBreakerConfig(timeout=30.0),
                expected_exceptions=(
                    RetryError,
                    aiohttp.ClientError,
                    asyncio.TimeoutError,
                ),
            ),
        )

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def call(
        self,
        method: str,
        payload: Optional[Dict[str, Any]] = None,
        idempotent: bool = True,
    ) -> Any:
        """
        Call a Bot API method.

        Args:
            method: Bot API method name (e.g. "createChatInviteLink")
            payload: JSON parameters
            idempotent: Whether a repeat after an unknown outcome is safe

        Returns:
            The ``result`` field of the Bot API response

        Raises:
            InviteIssuerError: On refusal or exhausted retries
        """
        retry = self._retry_any if idempotent else self._retry_unsent
        start = time.monotonic()
        status = "error"
        try:
            result = await self.circuit_breaker.call_async(
                retry.execute_async, self._call_once, method, payload or {}
            )
            status = "success"
            return result
        except CircuitBreakerOpenError as e:
            status = "circuit_open"
            raise InviteIssuerError(str(e)) from e
        except RetryError as e:
            logger.error(f"Telegram {method} failed after retries: {e}")
            raise InviteIssuerError(str(e)) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            # Not retried for non-idempotent calls
            logger.error(f"Telegram {method} transport failure: {e!r}")
            raise InviteIssuerError(f"{type(e).__name__}: {e}") from e
        finally:
            metrics.upstream_requests_total.labels(
                service=SERVICE, operation=method, status=status
            ).inc()
            metrics.upstream_request_duration_seconds.labels(
                service=SERVICE, operation=method
            ).observe(time.monotonic() - start)

    async def _call_once(self, method: str, payload: Dict[str, Any]) -> Any:
        """
        Single Bot API attempt.

        Raises:
            TransientTelegramError: 429 or 5xx (retried)
            aiohttp.ClientError: Network errors
            InviteIssuerError: Bot API refused the call
        """
        session = await self._get_session()
        async with session.post(f"{self._base_url}/{method}", json=payload) as resp:
            if resp.status == 429 or resp.status >= 500:
                raise TransientTelegramError(f"HTTP {resp.status} on {method}")
            try:
                data = await resp.json(content_type=None)
            except ValueError as e:
                raise InviteIssuerError(f"Unparseable {method} response") from e

        if not isinstance(data, dict):
            raise InviteIssuerError(f"Unexpected {method} response")
        if not data.get("ok"):
            raise InviteIssuerError(
                f"{method} refused: {data.get('description', 'unknown error')}",
                error_code=data.get("error_code"),
            )
        return data.get("result")
