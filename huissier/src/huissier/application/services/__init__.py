"""
Application background services.
"""

from huissier.application.services.membership_listener import MembershipListener
from huissier.application.services.nonce_sweeper import NonceSweeper

__all__ = ["MembershipListener", "NonceSweeper"]
