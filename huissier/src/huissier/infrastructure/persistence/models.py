"""
SQLAlchemy models for Huissier persistence.
"""

from datetime import datetime

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    DateTime,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""


class VerificationRecordModel(Base):
    """One issued invite per wallet."""

    __tablename__ = "verification_records"
    __table_args__ = (
        CheckConstraint(
            "(telegram_user_id IS NULL AND telegram_display_name IS NULL"
            " AND linked_at IS NULL)"
            " OR (telegram_user_id IS NOT NULL"
            " AND telegram_display_name IS NOT NULL AND linked_at IS NOT NULL)",
            name="member_identity_all_or_none",
        ),
        CheckConstraint("expires_at > issued_at", name="expires_after_issued"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    wallet_address: Mapped[str] = mapped_column(
        String(44), unique=True, index=True, nullable=False
    )
    invite_link: Mapped[str] = mapped_column(String(255), nullable=False)
    issued_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), index=True, nullable=False
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), index=True, nullable=False
    )
    consumed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    ip_address: Mapped[str | None] = mapped_column(String(64))
    user_agent: Mapped[str | None] = mapped_column(Text)
    telegram_user_id: Mapped[int | None] = mapped_column(BigInteger, index=True)
    telegram_username: Mapped[str | None] = mapped_column(String(64))
    telegram_display_name: Mapped[str | None] = mapped_column(String(128))
    linked_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))


class UsedNonceModel(Base):
    """Consumed nonces, kept until they would have expired anyway."""

    __tablename__ = "used_nonces"

    nonce: Mapped[str] = mapped_column(String(192), primary_key=True)
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), index=True, nullable=False
    )
