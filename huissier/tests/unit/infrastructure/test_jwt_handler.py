"""
Unit tests for the admin JWT helpers.

Usage:
    python huissier/tests/unit/infrastructure/test_jwt_handler.py
"""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from huissier.config.settings import override_settings, reset_settings
from huissier.domain.exceptions.auth import ExpiredTokenError, InvalidTokenError
from huissier.infrastructure.auth.jwt_handler import (
    check_admin_password,
    create_admin_token,
    decode_admin_token,
)
from huissier.testing import TEST_ADMIN_PASSWORD, ServiceTest, make_settings


class TestJwtHandler(ServiceTest):
    """Unit tests for admin password and token handling."""

    component_name = "huissier"
    test_category = "unit"

    def setup_test(self):
        self.settings = make_settings()
        override_settings(self.settings)

    def teardown_test(self):
        reset_settings()

    def test_password_check(self):
        assert check_admin_password(TEST_ADMIN_PASSWORD)
        assert not check_admin_password("wrong-password")
        assert not check_admin_password("")
        assert not check_admin_password(None)

    def test_token_roundtrip(self):
        payload = decode_admin_token(create_admin_token())

        assert payload["sub"] == "admin"
        assert payload["type"] == "admin"

    def test_expired_token(self):
        past = datetime.now(timezone.utc) - timedelta(hours=1)
        token = jwt.encode(
            {"sub": "admin", "type": "admin", "iat": past, "exp": past},
            self.settings.JWT_SECRET_KEY,
            algorithm="HS256",
        )

        with pytest.raises(ExpiredTokenError):
            decode_admin_token(token)

    def test_foreign_signature(self):
        token = jwt.encode(
            {"sub": "admin", "type": "admin"}, "some-other-key", algorithm="HS256"
        )

        with pytest.raises(InvalidTokenError):
            decode_admin_token(token)

    def test_non_admin_subject(self):
        token = jwt.encode(
            {"sub": "user", "type": "access"},
            self.settings.JWT_SECRET_KEY,
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError):
            decode_admin_token(token)

    def test_garbage(self):
        with pytest.raises(InvalidTokenError):
            decode_admin_token("not.a.jwt")


if __name__ == "__main__":
    TestJwtHandler.run_as_main()
