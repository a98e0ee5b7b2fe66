"""Get Merchant Balance Use Case"""

from libs.result import Result, Return
from src.app.repositories.merchant_balance_repository import MerchantBalanceRepository
from .dtos import MerchantBalanceResponseDTO


class GetMerchantBalance:
    """
    Read-only: merchants never credited have a balance of 0
    """

    def __init__(self, balance_repo: MerchantBalanceRepository):
        self.balance_repo = balance_repo

    async def execute(self, merchant: str) -> Result[MerchantBalanceResponseDTO]:
        merchant_balance = await self.balance_repo.get_by_merchant(merchant)
        return Return.ok(
            MerchantBalanceResponseDTO(
                merchant=merchant,
                balance=merchant_balance.balance if merchant_balance else 0,
            )
        )
