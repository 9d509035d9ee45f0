"""Nonce issuance and single-use enforcement."""

from huissier.infrastructure.nonce.memory_nonce_store import InMemoryNonceStore
from huissier.infrastructure.nonce.nonce_authority import NonceAuthority
from huissier.infrastructure.nonce.redis_nonce_store import RedisNonceStore
from huissier.infrastructure.nonce.sql_nonce_store import SqlNonceStore

__all__ = [
    "InMemoryNonceStore",
    "NonceAuthority",
    "RedisNonceStore",
    "SqlNonceStore",
]
