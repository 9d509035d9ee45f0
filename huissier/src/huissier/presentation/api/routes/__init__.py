"""
API routes.
"""

from huissier.presentation.api.routes import admin, health, telegram, verification

__all__ = ["admin", "health", "telegram", "verification"]
