"""SQLAlchemy implementation of MerchantBalanceRepository

Provides persistence for merchant earned balances with pessimistic locking
support so charges and withdrawals for the same merchant serialize.
"""

from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.domain.base import utc_now
from src.app.repositories.merchant_balance_repository import MerchantBalanceRepository
from src.domain.merchant_balance import MerchantBalance


class SqlAlchemyMerchantBalanceRepository(MerchantBalanceRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_merchant(self, merchant: str, for_update: bool = False) -> Optional[MerchantBalance]:
        """
        Retrieve a merchant's balance with optional row-level locking

        Args:
            merchant: Merchant principal
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            MerchantBalance if found, None otherwise
        """
        stmt = select(MerchantBalance).where(MerchantBalance.merchant == merchant)

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def set_balance(self, merchant: str, new_balance: int) -> MerchantBalance:
        """
        Write a merchant's balance, creating the row on first credit

        Note:
            Should be called within a transaction with the row already locked
        """
        merchant_balance = await self.get_by_merchant(merchant)
        if merchant_balance:
            merchant_balance.balance = new_balance
            merchant_balance.updated_at = utc_now()
        else:
            merchant_balance = MerchantBalance(merchant=merchant, balance=new_balance)

        self.session.add(merchant_balance)
        await self.session.flush()
        return merchant_balance
