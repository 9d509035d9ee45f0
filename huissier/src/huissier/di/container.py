"""
Dependency Injection Container for Huissier.

Manages all service instances and their dependencies.
"""

from typing import Optional

from huissier.application.services.membership_listener import MembershipListener
from huissier.application.services.nonce_sweeper import NonceSweeper
from huissier.application.use_cases.admin import (
    DeleteRecord,
    GetLedgerStats,
    LinkMember,
    ListMembers,
)
from huissier.application.use_cases.issue_nonce import IssueNonce
from huissier.application.use_cases.reconcile_membership import ReconcileMembership
from huissier.application.use_cases.verify_wallet import VerifyWallet
from huissier.config.settings import Settings, get_settings
from huissier.domain.repositories.i_nonce_store import INonceStore
from huissier.domain.repositories.i_verification_ledger import IVerificationLedger
from huissier.domain.services.i_balance_oracle import IBalanceOracle
from huissier.domain.services.i_invite_issuer import IInviteIssuer
from huissier.domain.services.i_join_event_feed import IJoinEventFeed
from huissier.domain.services.i_nonce_authority import INonceAuthority
from huissier.domain.services.i_signature_verifier import ISignatureVerifier
from huissier.infrastructure.auth.jwt_handler import check_admin_password
from huissier.infrastructure.auth.solana_signature_verifier import (
    SolanaSignatureVerifier,
)
from huissier.infrastructure.blockchain.solana_balance_oracle import (
    SolanaBalanceOracle,
)
from huissier.infrastructure.cache.redis_client import RedisClient
from huissier.infrastructure.monitoring.logger import get_logger
from huissier.infrastructure.nonce.memory_nonce_store import InMemoryNonceStore
from huissier.infrastructure.nonce.nonce_authority import NonceAuthority
from huissier.infrastructure.nonce.redis_nonce_store import RedisNonceStore
from huissier.infrastructure.nonce.sql_nonce_store import SqlNonceStore
from huissier.infrastructure.persistence.database import Database
from huissier.infrastructure.persistence.repositories.memory_verification_ledger import (  # noqa: E501
    InMemoryVerificationLedger,
)
from huissier.infrastructure.persistence.repositories.sql_verification_ledger import (  # noqa: E501
    SqlVerificationLedger,
)
from huissier.infrastructure.rate_limiting.rate_limiter import RateLimiter
from huissier.infrastructure.resilience import CircuitBreakerConfig, RetryConfig
from huissier.infrastructure.telegram.bot_client import TelegramBotClient
from huissier.infrastructure.telegram.invite_issuer import TelegramInviteIssuer
from huissier.infrastructure.telegram.join_feed import TelegramJoinFeed

logger = get_logger(__name__)


class DIContainer:
    """
    Dependency Injection Container.

    Manages singleton instances of all services and repositories.
    Every ledger method runs in its own transaction, so repositories and
    use cases are process-wide singletons too.
    """

    def __init__(self, settings: Optional[Settings] = None):
        """Initialize container with None instances."""
        self._settings = settings

        # Infrastructure
        self._database: Optional[Database] = None
        self._redis_client: Optional[RedisClient] = None
        self._rate_limiter: Optional[RateLimiter] = None
        self._telegram_client: Optional[TelegramBotClient] = None

        # Repositories
        self._ledger: Optional[IVerificationLedger] = None
        self._nonce_store: Optional[INonceStore] = None

        # Domain Services
        self._nonce_authority: Optional[INonceAuthority] = None
        self._signature_verifier: Optional[ISignatureVerifier] = None
        self._balance_oracle: Optional[IBalanceOracle] = None
        self._invite_issuer: Optional[IInviteIssuer] = None
        self._join_feed: Optional[IJoinEventFeed] = None

        # Background services
        self._membership_listener: Optional[MembershipListener] = None
        self._nonce_sweeper: Optional[NonceSweeper] = None

    @property
    def settings(self) -> Settings:
        return self._settings or get_settings()

    def _uses_database(self) -> bool:
        return (
            self.settings.LEDGER_BACKEND == "sql"
            or self.settings.NONCE_BACKEND == "sql"
        )

    async def initialize(self) -> None:
        """Initialize all services and establish connections."""
        settings = self.settings

        if self._uses_database():
            await self.database.connect()
            # Production schema is managed by alembic
            if self.database.is_sqlite or settings.ENV != "production":
                await self.database.create_tables()

        if settings.REDIS_ENABLED:
            await self.redis_client.connect()

    async def shutdown(self) -> None:
        """Cleanup resources and close connections."""
        if self._membership_listener:
            await self._membership_listener.stop()

        if self._nonce_sweeper:
            await self._nonce_sweeper.stop()

        if self._balance_oracle:
            await self._balance_oracle.close()

        if self._telegram_client:
            await self._telegram_client.close()

        if self._redis_client:
            await self._redis_client.disconnect()

        if self._database:
            await self._database.disconnect()

    # Infrastructure Getters

    @property
    def database(self) -> Database:
        """Get database instance."""
        if self._database is None:
            self._database = Database(
                database_url=self.settings.DATABASE_URL,
                echo=self.settings.DATABASE_ECHO,
            )
        return self._database

    @property
    def redis_client(self) -> RedisClient:
        """Get Redis client instance."""
        if self._redis_client is None:
            self._redis_client = RedisClient(
                host=self.settings.REDIS_HOST,
                port=self.settings.REDIS_PORT,
                db=self.settings.REDIS_DB,
                password=self.settings.REDIS_PASSWORD or None,
            )
        return self._redis_client

    @property
    def rate_limiter(self) -> Optional[RateLimiter]:
        """Get rate limiter (None when Redis or rate limiting is off)."""
        if not (self.settings.REDIS_ENABLED and self.settings.RATE_LIMIT_ENABLED):
            return None
        if self._rate_limiter is None:
            self._rate_limiter = RateLimiter(self.redis_client)
        return self._rate_limiter

    def _retry_config(self) -> RetryConfig:
        return RetryConfig(
            max_attempts=self.settings.RETRY_MAX_ATTEMPTS,
            initial_delay=self.settings.RETRY_INITIAL_DELAY,
            max_delay=self.settings.RETRY_MAX_DELAY,
        )

    def _circuit_breaker_config(self) -> CircuitBreakerConfig:
        return CircuitBreakerConfig(
            failure_threshold=self.settings.CB_FAILURE_THRESHOLD,
            success_threshold=self.settings.CB_SUCCESS_THRESHOLD,
            timeout=self.settings.CB_TIMEOUT_SECONDS,
        )

    @property
    def telegram_client(self) -> TelegramBotClient:
        """Get shared Telegram Bot API client."""
        if self._telegram_client is None:
            self._telegram_client = TelegramBotClient(
                bot_token=self.settings.TELEGRAM_BOT_TOKEN,
                api_url=self.settings.TELEGRAM_API_URL,
                timeout=self.settings.TELEGRAM_TIMEOUT,
                retry_config=self._retry_config(),
                circuit_breaker_config=self._circuit_breaker_config(),
            )
        return self._telegram_client

    # Repository Getters

    @property
    def ledger(self) -> IVerificationLedger:
        """Get verification ledger for the configured backend."""
        if self._ledger is None:
            if self.settings.LEDGER_BACKEND == "memory":
                logger.warning("Using in-memory ledger: records are not durable")
                self._ledger = InMemoryVerificationLedger()
            else:
                self._ledger = SqlVerificationLedger(self.database)
        return self._ledger

    @property
    def nonce_store(self) -> INonceStore:
        """Get used-nonce store for the configured backend."""
        if self._nonce_store is None:
            backend = self.settings.NONCE_BACKEND
            if backend == "redis":
                self._nonce_store = RedisNonceStore(self.redis_client)
            elif backend == "sql":
                self._nonce_store = SqlNonceStore(self.database)
            else:
                self._nonce_store = InMemoryNonceStore()
        return self._nonce_store

    # Domain Service Getters

    @property
    def nonce_authority(self) -> INonceAuthority:
        if self._nonce_authority is None:
            self._nonce_authority = NonceAuthority(
                secret=self.settings.NONCE_SECRET,
                store=self.nonce_store,
                ttl_seconds=self.settings.NONCE_TTL_SECONDS,
            )
        return self._nonce_authority

    @property
    def signature_verifier(self) -> ISignatureVerifier:
        if self._signature_verifier is None:
            self._signature_verifier = SolanaSignatureVerifier()
        return self._signature_verifier

    @property
    def balance_oracle(self) -> IBalanceOracle:
        if self._balance_oracle is None:
            self._balance_oracle = SolanaBalanceOracle(
                rpc_url=self.settings.SOLANA_RPC_URL,
                commitment=self.settings.SOLANA_COMMITMENT,
                timeout=self.settings.RPC_TIMEOUT,
                retry_config=self._retry_config(),
                circuit_breaker_config=self._circuit_breaker_config(),
            )
        return self._balance_oracle

    @property
    def invite_issuer(self) -> IInviteIssuer:
        if self._invite_issuer is None:
            self._invite_issuer = TelegramInviteIssuer(self.telegram_client)
        return self._invite_issuer

    @property
    def join_feed(self) -> IJoinEventFeed:
        if self._join_feed is None:
            self._join_feed = TelegramJoinFeed(
                self.telegram_client, self.settings.TELEGRAM_CHANNEL_ID
            )
        return self._join_feed

    # Use Case Getters

    def get_issue_nonce(self) -> IssueNonce:
        return IssueNonce(
            nonce_authority=self.nonce_authority,
            challenge_prefix=self.settings.CHALLENGE_PREFIX,
        )

    def get_verify_wallet(self) -> VerifyWallet:
        settings = self.settings
        return VerifyWallet(
            ledger=self.ledger,
            nonce_authority=self.nonce_authority,
            signature_verifier=self.signature_verifier,
            balance_oracle=self.balance_oracle,
            invite_issuer=self.invite_issuer,
            channel_id=settings.TELEGRAM_CHANNEL_ID,
            token_mint=settings.TOKEN_MINT,
            min_balance=settings.MIN_TOKEN_BALANCE,
            challenge_prefix=settings.CHALLENGE_PREFIX,
            invite_ttl_seconds=settings.INVITE_TTL_SECONDS,
            invite_name_prefix=settings.INVITE_NAME_PREFIX,
        )

    def get_reconcile_membership(self) -> ReconcileMembership:
        return ReconcileMembership(
            ledger=self.ledger,
            window_seconds=self.settings.RECONCILE_WINDOW_SECONDS,
        )

    def get_list_members(self) -> ListMembers:
        return ListMembers(self.ledger)

    def get_ledger_stats(self) -> GetLedgerStats:
        return GetLedgerStats(self.ledger)

    def get_delete_record(self) -> DeleteRecord:
        return DeleteRecord(self.ledger, check_password=check_admin_password)

    def get_link_member(self) -> LinkMember:
        return LinkMember(self.ledger)

    # Background services

    @property
    def membership_listener(self) -> MembershipListener:
        if self._membership_listener is None:
            self._membership_listener = MembershipListener(
                feed=self.join_feed,
                reconcile=self.get_reconcile_membership(),
                interval_seconds=self.settings.JOIN_POLL_INTERVAL_SECONDS,
            )
        return self._membership_listener

    @property
    def nonce_sweeper(self) -> NonceSweeper:
        if self._nonce_sweeper is None:
            self._nonce_sweeper = NonceSweeper(
                self.nonce_store,
                interval_seconds=self.settings.NONCE_SWEEP_INTERVAL_SECONDS,
            )
        return self._nonce_sweeper


# Global container instance
_container: Optional[DIContainer] = None


def get_container() -> DIContainer:
    """Get global DI container instance."""
    global _container
    if _container is None:
        _container = DIContainer()
    return _container


def set_container(container: Optional[DIContainer]) -> None:
    """Replace the global container (for testing)."""
    global _container
    _container = container


async def initialize_container() -> DIContainer:
    """Initialize and return DI container."""
    container = get_container()
    await container.initialize()
    return container


async def shutdown_container() -> None:
    """Shutdown DI container."""
    container = get_container()
    await container.shutdown()
