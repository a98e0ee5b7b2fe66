"""Subscription query use cases"""

from libs.result import Result, Return, Error
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.domain.error_codes import ErrorCode
from src.domain.next_charge import NextChargeInfo, compute_next_charge
from .dtos import SubscriptionResponseDTO, MerchantSubscriptionsResponseDTO


def subscription_not_found(subscription_id: int) -> Error:
    return Error(
        code=ErrorCode.NOT_FOUND,
        message=f"Subscription {subscription_id} not found",
    )


class GetSubscription:

    def __init__(self, subscription_repo: SubscriptionRepository):
        self.subscription_repo = subscription_repo

    async def execute(self, subscription_id: int) -> Result[SubscriptionResponseDTO]:
        subscription = await self.subscription_repo.get_by_id(subscription_id)
        if not subscription:
            return Return.err(subscription_not_found(subscription_id))
        return Return.ok(SubscriptionResponseDTO.from_entity(subscription))


class GetNextChargeInfo:
    """
    Next charge timestamp and due-ness of a stored subscription
    """

    def __init__(self, subscription_repo: SubscriptionRepository):
        self.subscription_repo = subscription_repo

    async def execute(self, subscription_id: int) -> Result[NextChargeInfo]:
        subscription = await self.subscription_repo.get_by_id(subscription_id)
        if not subscription:
            return Return.err(subscription_not_found(subscription_id))
        return Return.ok(compute_next_charge(subscription))


class ListMerchantSubscriptions:

    def __init__(self, subscription_repo: SubscriptionRepository):
        self.subscription_repo = subscription_repo

    async def execute(self, merchant: str) -> Result[MerchantSubscriptionsResponseDTO]:
        subscriptions = await self.subscription_repo.list_by_merchant(merchant)
        return Return.ok(
            MerchantSubscriptionsResponseDTO(
                merchant=merchant,
                subscription_ids=[s.id for s in subscriptions],
            )
        )
