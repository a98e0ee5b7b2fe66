"""Billing Sweep Background Worker

Periodically charges every active subscription whose next charge
timestamp has passed. Can be run as a standalone script or integrated
with a scheduler.
"""

import asyncio
import logging
import time
from typing import List, Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.subscription_repository import SqlAlchemySubscriptionRepository
from src.adapter.repositories.merchant_balance_repository import SqlAlchemyMerchantBalanceRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.adapter.services.clock import SystemClock
from src.adapter.services.event_publisher import create_event_publisher
from src.app.services.clock import Clock
from src.app.services.event_publisher import EventPublisher
from src.app.use_cases.vault import (
    BatchCharge,
    ChargeSubscription,
    BatchChargeCommandDTO,
    BillingSweepResultDTO,
)
from src.domain.subscription import SubscriptionStatus

logger = logging.getLogger(__name__)


class BillingSweepWorker:
    """
    Background worker charging due subscriptions

    Features:
    - Selects due active subscriptions in a single query
    - Charges them in batches, one session per batch
    - A failing subscription never stops the rest of the sweep
    - Can run once or continuously

    Usage:
        # Run once
        worker = BillingSweepWorker()
        result = await worker.run_once()

        # Run continuously
        worker = BillingSweepWorker()
        await worker.run_forever(interval_seconds=300)
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        batch_size: Optional[int] = None,
        clock: Optional[Clock] = None,
        event_publisher: Optional[EventPublisher] = None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            batch_size: Subscriptions charged per batch (defaults to
                        ApplicationConfig.BILLING_SWEEP_BATCH_SIZE)
            clock: Time source (defaults to SystemClock)
            event_publisher: Event sink (defaults to the configured publisher)
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.batch_size = batch_size or ApplicationConfig.BILLING_SWEEP_BATCH_SIZE
        self.clock = clock or SystemClock()
        self.event_publisher = event_publisher or create_event_publisher(
            ApplicationConfig.EVENT_WEBHOOK_URL
        )

        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info(f"BillingSweepWorker initialized with batch_size={self.batch_size}")

    async def find_due(self, now: int) -> tuple[int, List[int]]:
        """
        Active subscriptions whose next charge timestamp is at or before now

        Returns:
            (number of active subscriptions, due subscription ids in id order)
        """
        async with self.async_session_factory() as session:
            subscription_repo = SqlAlchemySubscriptionRepository(session)
            total_active = await subscription_repo.count_by_status(SubscriptionStatus.ACTIVE)
            due = await subscription_repo.list_due(now)

        return total_active, [s.id for s in due]

    async def charge_batch(self, subscription_ids: List[int]):
        async with self.async_session_factory() as session:
            charge = ChargeSubscription(
                uow=SqlAlchemyUnitOfWork(session),
                subscription_repo=SqlAlchemySubscriptionRepository(session),
                balance_repo=SqlAlchemyMerchantBalanceRepository(session),
                event_publisher=self.event_publisher,
                clock=self.clock,
            )
            result = await BatchCharge(charge).execute(
                BatchChargeCommandDTO(subscription_ids=subscription_ids)
            )
            return result.value

    async def run_once(self) -> BillingSweepResultDTO:
        """
        Run one sweep

        Returns:
            BillingSweepResultDTO with sweep counts
        """
        start_time = time.time()
        now = self.clock.now()

        if not ApplicationConfig.BILLING_SWEEP_ENABLED:
            logger.info("Billing sweep is disabled, skipping")
            return BillingSweepResultDTO(
                total_active=0, due=0, charged=0, failed=0, swept_at=now, execution_time_ms=0
            )

        total_active, due = await self.find_due(now)
        logger.info(f"Billing sweep found {len(due)} due of {total_active} active subscriptions")

        charged = 0
        failed = 0
        for i in range(0, len(due), self.batch_size):
            batch = due[i:i + self.batch_size]
            response = await self.charge_batch(batch)
            charged += response.succeeded
            failed += response.failed
            for r in response.results:
                if not r.success:
                    logger.warning(
                        f"Subscription {r.subscription_id} not charged (error code {r.error_code})"
                    )

        execution_time_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"Billing sweep complete: {charged} charged, {failed} failed in {execution_time_ms}ms"
        )

        return BillingSweepResultDTO(
            total_active=total_active,
            due=len(due),
            charged=charged,
            failed=failed,
            swept_at=now,
            execution_time_ms=execution_time_ms,
        )

    async def run_forever(self, interval_seconds: Optional[int] = None):
        """
        Run sweeps continuously at specified interval

        Args:
            interval_seconds: Seconds between sweeps (defaults to
                              ApplicationConfig.BILLING_SWEEP_INTERVAL_SECONDS)
        """
        interval_seconds = interval_seconds or ApplicationConfig.BILLING_SWEEP_INTERVAL_SECONDS
        logger.info(f"Starting continuous billing sweep with {interval_seconds}s interval")

        while True:
            try:
                await self.run_once()
            except Exception as e:
                logger.error(f"Billing sweep failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("BillingSweepWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        python -m src.worker.billing_sweep [--continuous] [--interval SECONDS]
    """
    import argparse

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Billing Sweep Worker")
    parser.add_argument("--continuous", action="store_true", help="Run continuously")
    parser.add_argument("--interval", type=int, help="Seconds between sweeps")
    parser.add_argument("--batch-size", type=int, help="Subscriptions per batch")
    args = parser.parse_args()

    worker = BillingSweepWorker(batch_size=args.batch_size)

    try:
        if args.continuous:
            await worker.run_forever(interval_seconds=args.interval)
        else:
            result = await worker.run_once()
            print("Billing sweep complete:")
            print(f"  Active subscriptions: {result.total_active}")
            print(f"  Due: {result.due}")
            print(f"  Charged: {result.charged}")
            print(f"  Failed: {result.failed}")
            print(f"  Execution time: {result.execution_time_ms}ms")
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
