"""
Solana token balance oracle.

Reads SPL token balances over JSON-RPC (getTokenAccountsByOwner).
Production-hardened with Circuit Breaker, Retry, and Metrics.
"""

import asyncio
import time
from dataclasses import replace
from decimal import Decimal
from typing import Any, Dict, List, Optional

import aiohttp

from huissier.domain.exceptions.upstream import BalanceOracleError
from huissier.domain.services.i_balance_oracle import IBalanceOracle
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

SERVICE = "solana_rpc"


class TransientRPCError(Exception):
    """Retryable node failure (HTTP 429 / 5xx)."""


class SolanaBalanceOracle(IBalanceOracle):
    """
    SPL token balance lookups against a Solana RPC node.

    An owner with no token account for the mint has a balance of 0.
    Transport failures and RPC error objects raise BalanceOracleError;
    they are never reported as a zero balance.
    """

    def __init__(
        self,
        rpc_url: str,
        commitment: str = "confirmed",
        timeout: float = 10.0,
        retry_config: Optional[RetryConfig] = None,
        circuit_breaker_config: Optional[CircuitBreakerConfig] = None,
    ):
        """
        Initialize balance oracle.

        Args:
            rpc_url: Solana JSON-RPC endpoint
            commitment: Commitment level for reads
            timeout: Total timeout per HTTP attempt in seconds
            retry_config: Optional retry config (transport errors only)
            circuit_breaker_config: Optional circuit breaker config
        """
        self.rpc_url = rpc_url
        self.commitment = commitment
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: Optional[aiohttp.ClientSession] = None

        self.retry = Retry(
            replace(
                retry_config or RetryConfig(initial_delay=0.5, max_delay=5.0),
                retry_on=(
                    aiohttp.ClientError,
                    asyncio.TimeoutError,
                    TransientRPCError,
                ),
            )
        )

        # Only exhausted transport retries count against the node
        self.circuit_breaker = CircuitBreaker(
            SERVICE,
            replace(
                circuit_breaker_config or CircuitBreakerConfig(timeout=30.0),
                expected_exceptions=(RetryError,),
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

    async def get_balance(self, wallet_address: str, token_mint: str) -> Decimal:
        params = [
            wallet_address,
            {"mint": token_mint},
            {"encoding": "jsonParsed", "commitment": self.commitment},
        ]
        result = await self._call("getTokenAccountsByOwner", params)

        accounts = result.get("value") if isinstance(result, dict) else None
        if accounts is None:
            raise BalanceOracleError("Malformed getTokenAccountsByOwner result")

        return self._sum_accounts(accounts)

    @staticmethod
    def _sum_accounts(accounts: List[Dict[str, Any]]) -> Decimal:
        """Add up raw token amounts across all accounts for the mint."""
        total = Decimal(0)
        for account in accounts:
            try:
                token_amount = account["account"]["data"]["parsed"]["info"][
                    "tokenAmount"
                ]
                raw = Decimal(token_amount["amount"])
                decimals = int(token_amount["decimals"])
            except (KeyError, TypeError, ValueError, ArithmeticError) as e:
                raise BalanceOracleError(f"Unparseable token account: {e}") from e
            total += raw.scaleb(-decimals)
        return total

    async def _call(self, method: str, params: list) -> Any:
        """
        JSON-RPC call with Circuit Breaker + Retry.

        Raises:
            BalanceOracleError: On any failure
        """
        start = time.monotonic()
        status = "error"
        try:
            result = await self.circuit_breaker.call_async(
                self.retry.execute_async, self._call_once, method, params
            )
            status = "success"
            return result
        except CircuitBreakerOpenError as e:
            status = "circuit_open"
            raise BalanceOracleError(str(e)) from e
        except RetryError as e:
            logger.error(f"Solana RPC {method} failed after retries: {e}")
            raise BalanceOracleError(str(e)) from e
        finally:
            metrics.upstream_requests_total.labels(
                service=SERVICE, operation=method, status=status
            ).inc()
            metrics.upstream_request_duration_seconds.labels(
                service=SERVICE, operation=method
            ).observe(time.monotonic() - start)

    async def _call_once(self, method: str, params: list) -> Any:
        """
        Single JSON-RPC attempt.

        Raises:
            TransientRPCError: HTTP 429/5xx (retried)
            aiohttp.ClientError: Network errors (retried)
            BalanceOracleError: RPC error object or other HTTP errors
        """
        payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}
        session = await self._get_session()

        async with session.post(self.rpc_url, json=payload) as response:
            if response.status == 429 or response.status >= 500:
                raise TransientRPCError(f"HTTP {response.status}")
            if response.status >= 400:
                raise BalanceOracleError(f"HTTP {response.status} from RPC node")

            try:
                data = await response.json(content_type=None)
            except ValueError as e:
                raise BalanceOracleError("Unparseable RPC response") from e

        if not isinstance(data, dict):
            raise BalanceOracleError("RPC response is not an object")
        if data.get("error"):
            raise BalanceOracleError(f"RPC error: {data['error']}")
        return data.get("result")
