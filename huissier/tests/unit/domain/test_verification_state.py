"""
Unit tests for the verification attempt state machine.

Usage:
    python huissier/tests/unit/domain/test_verification_state.py
"""

import pytest

from huissier.domain.value_objects.verification_state import (
    InvalidTransitionError,
    VerificationAttempt,
    VerificationState,
)
from huissier.testing import ServiceTest

HAPPY_PATH = [
    VerificationState.NONCE_VALIDATED,
    VerificationState.SIGNATURE_VALIDATED,
    VerificationState.BALANCE_CHECKED,
    VerificationState.INVITE_ISSUED,
    VerificationState.PERSISTED,
]


class TestVerificationAttempt(ServiceTest):
    """Unit tests for VerificationAttempt."""

    component_name = "huissier"
    test_category = "unit"

    def test_starts_submitted(self):
        attempt = VerificationAttempt("wallet")

        assert attempt.state == VerificationState.SUBMITTED
        assert attempt.history == []
        assert not attempt.is_terminal

    def test_full_happy_path(self):
        attempt = VerificationAttempt("wallet")
        for state in HAPPY_PATH:
            attempt.advance(state)

        assert attempt.state == VerificationState.PERSISTED
        assert attempt.is_terminal
        assert attempt.history[0] == VerificationState.SUBMITTED
        assert len(attempt.history) == len(HAPPY_PATH)

    def test_cannot_skip_steps(self):
        """Balance can't be checked before the signature."""
        attempt = VerificationAttempt("wallet")
        attempt.advance(VerificationState.NONCE_VALIDATED)

        with pytest.raises(InvalidTransitionError):
            attempt.advance(VerificationState.BALANCE_CHECKED)

    def test_reject_from_any_step(self):
        for steps in range(len(HAPPY_PATH)):
            attempt = VerificationAttempt("wallet")
            for state in HAPPY_PATH[:steps]:
                attempt.advance(state)

            attempt.reject("INVALID_SIGNATURE")

            assert attempt.state == VerificationState.REJECTED
            assert attempt.rejection_code == "INVALID_SIGNATURE"

    def test_terminal_states_are_final(self):
        rejected = VerificationAttempt("wallet")
        rejected.reject("INVALID_NONCE")
        with pytest.raises(InvalidTransitionError):
            rejected.advance(VerificationState.NONCE_VALIDATED)
        with pytest.raises(InvalidTransitionError):
            rejected.reject("INVALID_NONCE")

        persisted = VerificationAttempt("wallet")
        for state in HAPPY_PATH:
            persisted.advance(state)
        with pytest.raises(InvalidTransitionError):
            persisted.reject("ALREADY_VERIFIED")


if __name__ == "__main__":
    TestVerificationAttempt.run_as_main()
