"""
Huissier - token-gated invites for the whale channel.

Wallet owners sign a server-issued nonce, the service checks their
on-chain token balance and hands out a single-use Telegram invite.
"""

__version__ = "0.1.0"
