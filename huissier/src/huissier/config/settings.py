"""
Application settings with environment-based configuration.

Priority (highest to lowest):
1. Environment variables (from .env or system)
2. Environment-specific YAML config file (development.yaml, production.yaml)
3. Default YAML config file (default.yaml)
4. Pydantic defaults
"""

import os
from decimal import Decimal
from pathlib import Path
from typing import List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All sensitive values (bot token, admin password, secrets) should come
    from environment variables, not from YAML files.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",
    )

    # Application
    APP_NAME: str = "Huissier"
    APP_VERSION: str = "0.1.0"
    ENV: str = Field(default="development", description="Environment name")
    DEBUG: bool = Field(default=False, description="Debug mode")

    # API Server
    API_HOST: str = Field(default="0.0.0.0")
    API_PORT: int = Field(default=8000, ge=1024, le=65535)
    API_RELOAD: bool = Field(default=False)

    CORS_ORIGINS: List[str] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins",
    )

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_JSON: bool = Field(default=True, description="Emit JSON log lines")

    # Storage backends
    DATABASE_URL: str = Field(..., description="Database connection URL")
    DATABASE_ECHO: bool = Field(default=False)
    LEDGER_BACKEND: str = Field(
        default="sql",
        description="Verification ledger backend: sql or memory",
    )
    NONCE_BACKEND: str = Field(
        default="sql",
        description="Used-nonce store backend: sql, redis or memory",
    )

    # Nonce challenge
    NONCE_SECRET: str = Field(..., min_length=16, description="Nonce HMAC key")
    NONCE_TTL_SECONDS: int = Field(default=300, ge=10)
    NONCE_SWEEP_INTERVAL_SECONDS: float = Field(default=60.0, gt=0)
    CHALLENGE_PREFIX: str = Field(default="Whale Verify: ")

    # Solana
    SOLANA_RPC_URL: str = Field(default="https://api.mainnet-beta.solana.com")
    SOLANA_COMMITMENT: str = Field(default="confirmed")
    TOKEN_MINT: str = Field(
        default="4FdojUmXeaFMBG6yUaoufAC5Bz7u9AwnSAMizkx5pump",
        description="SPL token mint gating the channel",
    )
    MIN_TOKEN_BALANCE: Decimal = Field(
        default=Decimal("10000000"),
        ge=0,
        description="Minimum balance in whole token units",
    )
    RPC_TIMEOUT: float = Field(default=10.0, gt=0)

    # Telegram
    TELEGRAM_BOT_TOKEN: str = Field(..., description="Bot API token")
    TELEGRAM_CHANNEL_ID: str = Field(..., description="Gated chat id")
    TELEGRAM_API_URL: str = Field(default="https://api.telegram.org")
    TELEGRAM_TIMEOUT: float = Field(default=10.0, gt=0)
    INVITE_TTL_SECONDS: int = Field(default=600, ge=60)
    INVITE_NAME_PREFIX: str = Field(default="Whale")

    # Membership reconciliation
    JOIN_FEED_MODE: str = Field(
        default="polling",
        description="How join events arrive: polling, webhook or disabled",
    )
    TELEGRAM_WEBHOOK_SECRET: Optional[str] = Field(
        default=None,
        validate_default=True,
        description="X-Telegram-Bot-Api-Secret-Token value, required for webhook",
    )
    JOIN_POLL_INTERVAL_SECONDS: float = Field(default=5.0, gt=0)
    RECONCILE_WINDOW_SECONDS: int = Field(default=900, ge=60)

    # Admin
    ADMIN_PASSWORD: str = Field(..., min_length=8)
    JWT_SECRET_KEY: str = Field(..., description="JWT secret key")
    JWT_ALGORITHM: str = Field(default="HS256")
    JWT_EXPIRATION_HOURS: int = Field(default=12, ge=1)

    # Redis
    REDIS_ENABLED: bool = Field(default=False)
    REDIS_HOST: str = Field(default="localhost")
    REDIS_PORT: int = Field(default=6379, ge=1024, le=65535)
    REDIS_DB: int = Field(default=0, ge=0, le=15)
    REDIS_PASSWORD: Optional[str] = Field(default=None)

    # Rate limiting (per client IP, needs Redis)
    RATE_LIMIT_ENABLED: bool = Field(default=True)
    NONCE_RATE_LIMIT: int = Field(default=10, ge=1)
    NONCE_RATE_WINDOW_SECONDS: int = Field(default=60, ge=1)
    VERIFY_RATE_LIMIT: int = Field(default=5, ge=1)
    VERIFY_RATE_WINDOW_SECONDS: int = Field(default=900, ge=1)

    # Resilience - Circuit Breaker
    CB_FAILURE_THRESHOLD: int = Field(
        default=5,
        description="Circuit breaker failure threshold",
    )
    CB_SUCCESS_THRESHOLD: int = Field(
        default=2,
        description="Circuit breaker success threshold for half-open",
    )
    CB_TIMEOUT_SECONDS: float = Field(
        default=30.0,
        description="Circuit breaker open state timeout",
    )

    # Resilience - Retry
    RETRY_MAX_ATTEMPTS: int = Field(
        default=3,
        ge=1,
        description="Maximum attempts for transient transport failures",
    )
    RETRY_INITIAL_DELAY: float = Field(default=0.5, ge=0)
    RETRY_MAX_DELAY: float = Field(default=5.0, ge=0)

    # Startup
    READINESS_CHECK_ENABLED: bool = Field(
        default=True,
        description="Check bot and database before serving traffic",
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"Invalid LOG_LEVEL. Must be one of: {allowed}")
        return v_upper

    @field_validator("LEDGER_BACKEND")
    @classmethod
    def validate_ledger_backend(cls, v: str) -> str:
        """Validate ledger backend."""
        allowed = ["sql", "memory"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"Invalid LEDGER_BACKEND. Must be one of: {allowed}")
        return v_lower

    @field_validator("NONCE_BACKEND")
    @classmethod
    def validate_nonce_backend(cls, v: str) -> str:
        """Validate nonce store backend."""
        allowed = ["sql", "redis", "memory"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"Invalid NONCE_BACKEND. Must be one of: {allowed}")
        return v_lower

    @field_validator("JOIN_FEED_MODE")
    @classmethod
    def validate_join_feed_mode(cls, v: str) -> str:
        """Validate join feed mode."""
        allowed = ["polling", "webhook", "disabled"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"Invalid JOIN_FEED_MODE. Must be one of: {allowed}")
        return v_lower

    @field_validator("TELEGRAM_WEBHOOK_SECRET")
    @classmethod
    def validate_webhook_secret(
        cls, v: Optional[str], info: ValidationInfo
    ) -> Optional[str]:
        """Webhook mode only accepts updates signed with a secret token."""
        if info.data.get("JOIN_FEED_MODE") == "webhook" and not (v or "").strip():
            raise ValueError("TELEGRAM_WEBHOOK_SECRET is required in webhook mode")
        return v


def load_config(
    config_file: Optional[str] = None,
    env_file: Optional[str] = None,
    env: Optional[str] = None,
) -> Settings:
    """
    Load configuration from YAML files and environment variables.

    Priority: ENV vars > environment-specific YAML > default YAML > defaults

    Args:
        config_file: Optional YAML config filename override
        env_file: Optional .env filename (e.g., ".env.development")
        env: Optional environment name override (e.g., "development", "test")

    Returns:
        Settings instance

    Raises:
        ValidationError: If required fields are missing
    """
    current_file = Path(__file__).resolve()
    project_root = current_file.parent.parent.parent.parent
    config_dir = project_root / "config"

    environment = env or os.getenv("ENV", "production")

    env_map = {
        "production": (".env.production", "production.yaml"),
        "development": (".env.development", "development.yaml"),
        "test": (".env.test", "test.yaml"),
    }

    if env_file is None:
        default_env_file, default_config_file = env_map.get(
            environment, (".env.production", "production.yaml")
        )
        env_file = default_env_file
        if config_file is None:
            config_file = default_config_file

    env_file_path = project_root / env_file
    if env_file_path.exists():
        load_dotenv(env_file_path, override=True)

    merged_config: dict = {}
    for name in ("default.yaml", config_file):
        if not name:
            continue
        path = config_dir / name
        if path.exists():
            with open(path, "r") as f:
                loaded = yaml.safe_load(f)
                if loaded:
                    merged_config.update(loaded)

    # Init kwargs beat env vars in pydantic-settings, so drop YAML keys
    # that the environment already sets.
    yaml_values = {k: v for k, v in merged_config.items() if k not in os.environ}

    return Settings(**yaml_values)


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or initialize global settings singleton."""
    global _settings
    if _settings is None:
        _settings = load_config()
    return _settings


def override_settings(new_settings: Settings) -> None:
    """Override global settings (for testing)."""
    global _settings
    _settings = new_settings


def reset_settings() -> None:
    """Reset settings to force re-initialization (for testing)."""
    global _settings
    _settings = None
