"""Persistence infrastructure."""

from huissier.infrastructure.persistence.database import Database
from huissier.infrastructure.persistence.models import (
    Base,
    UsedNonceModel,
    VerificationRecordModel,
)

__all__ = ["Base", "Database", "UsedNonceModel", "VerificationRecordModel"]
