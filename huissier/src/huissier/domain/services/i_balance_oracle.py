"""
Balance oracle service interface.
"""

from abc import ABC, abstractmethod
from decimal import Decimal


class IBalanceOracle(ABC):
    """Reads fungible token balances from the chain."""

    @abstractmethod
    async def get_balance(self, wallet_address: str, token_mint: str) -> Decimal:
        """
        Get wallet token balance in whole token units.

        Args:
            wallet_address: Owner wallet address
            token_mint: Token mint address

        Returns:
            Balance (0 if the wallet holds no account for this token)

        Raises:
            BalanceOracleError: If the balance could not be read
        """

    async def close(self) -> None:
        """Release network resources."""
