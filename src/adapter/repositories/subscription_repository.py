"""SQLAlchemy Subscription Repository Implementation

Implements subscription persistence using SQLAlchemy async session.
"""

from typing import List, Optional
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.domain.base import utc_now
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.domain.next_charge import compute_next_charge
from src.domain.subscription import Subscription, SubscriptionStatus, MAX_SUBSCRIPTION_ID


class SqlAlchemySubscriptionRepository(SubscriptionRepository):
    """
    SQLAlchemy implementation of SubscriptionRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE
    - Writes are flushed, never committed (the unit of work commits)
    - next_charge_timestamp is recomputed on every write so due
      subscriptions can be selected in SQL
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, subscription_id: int, for_update: bool = False) -> Optional[Subscription]:
        """
        Retrieve subscription by ID with optional row-level locking

        Args:
            subscription_id: Subscription identifier
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            Subscription if found, None otherwise
        """
        if not 0 <= subscription_id <= MAX_SUBSCRIPTION_ID:
            return None

        stmt = select(Subscription).where(Subscription.id == subscription_id)

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, subscription: Subscription) -> Subscription:
        subscription.next_charge_timestamp = compute_next_charge(subscription).next_charge_timestamp
        self.session.add(subscription)
        await self.session.flush()
        await self.session.refresh(subscription)
        return subscription

    async def update(self, subscription: Subscription) -> Subscription:
        subscription.updated_at = utc_now()
        subscription.next_charge_timestamp = compute_next_charge(subscription).next_charge_timestamp
        self.session.add(subscription)
        await self.session.flush()
        await self.session.refresh(subscription)
        return subscription

    async def list_by_merchant(self, merchant: str) -> List[Subscription]:
        stmt = (
            select(Subscription)
            .where(Subscription.merchant == merchant)
            .order_by(Subscription.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_by_status(self, status: SubscriptionStatus) -> int:
        stmt = select(func.count()).select_from(Subscription).where(Subscription.status == status)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def list_due(self, now: int, limit: Optional[int] = None) -> List[Subscription]:
        stmt = (
            select(Subscription)
            .where(Subscription.status == SubscriptionStatus.ACTIVE)
            .where(Subscription.next_charge_timestamp <= now)
            .order_by(Subscription.id)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
