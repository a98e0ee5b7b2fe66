"""Token Service Interface

Value-transfer medium holding the vault's custody. All calls are
all-or-nothing; a failed transfer raises TokenTransferError and moves
nothing.
"""

from abc import ABC, abstractmethod


class TokenTransferError(Exception):
    """The token service refused or failed a call"""
    pass


class TokenService(ABC):
    """
    Client for a token-like asset

    Every method takes the token address stored in the vault settings.
    """

    @abstractmethod
    async def allowance(self, token: str, owner: str, spender: str) -> int:
        """Amount spender may pull from owner via transfer_from"""
        pass

    @abstractmethod
    async def balance(self, token: str, owner: str) -> int:
        """Spendable balance of owner"""
        pass

    @abstractmethod
    async def transfer(self, token: str, from_: str, to: str, amount: int) -> None:
        """Move amount from from_ to to (from_ is the caller's own account)"""
        pass

    @abstractmethod
    async def transfer_from(self, token: str, spender: str, from_: str, to: str, amount: int) -> None:
        """Move amount from from_ to to using spender's allowance"""
        pass
