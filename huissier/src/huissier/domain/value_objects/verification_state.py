"""
Verification attempt state machine.

    START -> NONCE_ISSUED -> SUBMITTED -> NONCE_VALIDATED
          -> SIGNATURE_VALIDATED -> BALANCE_CHECKED -> INVITE_ISSUED
          -> PERSISTED

Any non-terminal state may move to REJECTED. Both PERSISTED and REJECTED
are terminal.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class VerificationState(str, Enum):
    START = "start"
    NONCE_ISSUED = "nonce_issued"
    SUBMITTED = "submitted"
    NONCE_VALIDATED = "nonce_validated"
    SIGNATURE_VALIDATED = "signature_validated"
    BALANCE_CHECKED = "balance_checked"
    INVITE_ISSUED = "invite_issued"
    PERSISTED = "persisted"
    REJECTED = "rejected"


_HAPPY_PATH = [
    VerificationState.START,
    VerificationState.NONCE_ISSUED,
    VerificationState.SUBMITTED,
    VerificationState.NONCE_VALIDATED,
    VerificationState.SIGNATURE_VALIDATED,
    VerificationState.BALANCE_CHECKED,
    VerificationState.INVITE_ISSUED,
    VerificationState.PERSISTED,
]

TERMINAL_STATES = frozenset({VerificationState.PERSISTED, VerificationState.REJECTED})


class InvalidTransitionError(RuntimeError):
    """Raised on an out-of-order state change (programming error)."""


@dataclass
class VerificationAttempt:
    """
    Tracks one verification attempt through the state machine.

    The submit request starts at SUBMITTED: the nonce was issued by an
    earlier, independent request.
    """

    wallet_address: str
    state: VerificationState = VerificationState.SUBMITTED
    history: List[VerificationState] = field(default_factory=list)
    rejection_code: Optional[str] = None

    def advance(self, target: VerificationState) -> None:
        """Move one step along the happy path."""
        if self.state in TERMINAL_STATES:
            raise InvalidTransitionError(f"{self.state.value} is terminal")
        expected = _HAPPY_PATH[_HAPPY_PATH.index(self.state) + 1]
        if target is not expected:
            raise InvalidTransitionError(
                f"Cannot move from {self.state.value} to {target.value}"
            )
        self.history.append(self.state)
        self.state = target

    def reject(self, code: str) -> None:
        """Terminate the attempt with a failure code."""
        if self.state in TERMINAL_STATES:
            raise InvalidTransitionError(f"{self.state.value} is terminal")
        self.history.append(self.state)
        self.state = VerificationState.REJECTED
        self.rejection_code = code

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES
