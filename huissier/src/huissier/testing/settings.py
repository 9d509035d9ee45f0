"""
Settings for tests: in-memory backends, no Redis, no background loops.
"""

from huissier.config.settings import Settings

TEST_CHANNEL_ID = "-1001234567890"
TEST_ADMIN_PASSWORD = "correct-horse-battery"


def make_settings(**overrides) -> Settings:
    values = {
        "ENV": "test",
        "LOG_LEVEL": "WARNING",
        "LOG_JSON": False,
        "DATABASE_URL": "sqlite+aiosqlite:///:memory:",
        "LEDGER_BACKEND": "memory",
        "NONCE_BACKEND": "memory",
        "NONCE_SECRET": "test-nonce-secret-0123456789abcdef",
        "TELEGRAM_BOT_TOKEN": "123456:TEST-TOKEN",
        "TELEGRAM_CHANNEL_ID": TEST_CHANNEL_ID,
        "ADMIN_PASSWORD": TEST_ADMIN_PASSWORD,
        "JWT_SECRET_KEY": "test-jwt-secret-key",
        "JOIN_FEED_MODE": "disabled",
        "READINESS_CHECK_ENABLED": False,
        "REDIS_ENABLED": False,
        "RATE_LIMIT_ENABLED": False,
    }
    values.update(overrides)
    return Settings(**values)
