"""Subscription Repository Interface

Defines the contract for subscription persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.subscription import Subscription, SubscriptionStatus


class SubscriptionRepository(ABC):
    """
    Repository interface for Subscription persistence

    Subscriptions are never deleted, so there is no delete operation.
    """

    @abstractmethod
    async def get_by_id(self, subscription_id: int, for_update: bool = False) -> Optional[Subscription]:
        """
        Retrieve subscription by ID

        Args:
            subscription_id: Subscription identifier
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            Subscription if found, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, subscription: Subscription) -> Subscription:
        """Persist a new subscription (id already assigned)"""
        pass

    @abstractmethod
    async def update(self, subscription: Subscription) -> Subscription:
        """Persist changes to an existing subscription"""
        pass

    @abstractmethod
    async def list_by_merchant(self, merchant: str) -> List[Subscription]:
        """All subscriptions of a merchant, in id order"""
        pass

    @abstractmethod
    async def count_by_status(self, status: SubscriptionStatus) -> int:
        """Number of subscriptions currently in the given status"""
        pass

    @abstractmethod
    async def list_due(self, now: int, limit: Optional[int] = None) -> List[Subscription]:
        """
        Active subscriptions whose next charge timestamp is at or before now

        Args:
            now: Clock timestamp to compare against
            limit: Maximum number of rows (all when None)

        Returns:
            Due subscriptions in id order
        """
        pass
