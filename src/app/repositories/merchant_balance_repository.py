"""Merchant Balance Repository Interface

Every charge and withdrawal for a merchant reads then writes the same
balance row, so callers must read with for_update=True inside the
operation's unit of work.
"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.merchant_balance import MerchantBalance


class MerchantBalanceRepository(ABC):

    @abstractmethod
    async def get_by_merchant(self, merchant: str, for_update: bool = False) -> Optional[MerchantBalance]:
        """
        Retrieve a merchant's balance row

        Args:
            merchant: Merchant principal
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            MerchantBalance if the merchant was ever credited, None otherwise
        """
        pass

    @abstractmethod
    async def set_balance(self, merchant: str, new_balance: int) -> MerchantBalance:
        """Write the balance, creating the row on first credit"""
        pass
