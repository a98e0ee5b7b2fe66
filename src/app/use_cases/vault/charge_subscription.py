"""ChargeSubscription Use Case

Moves one interval's amount from a subscription's prepaid balance to its
merchant's earned balance. Tokens stay in vault custody until the merchant
withdraws.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.event_publisher import EventPublisher
from src.app.services.clock import Clock
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.app.repositories.merchant_balance_repository import MerchantBalanceRepository
from src.domain.amounts import ArithmeticOverflowError, checked_add, checked_sub
from src.domain.error_codes import ErrorCode
from src.domain.status_transitions import validate_transition
from src.domain.subscription import Subscription, SubscriptionStatus
from src.domain.vault_event import VaultEvent, VaultEventType
from .dtos import ChargeResponseDTO

logger = logging.getLogger(__name__)


def insufficient_balance(subscription: Subscription) -> Error:
    available = subscription.prepaid_balance
    required = subscription.amount
    return Error(
        code=ErrorCode.INSUFFICIENT_BALANCE,
        message=f"Insufficient prepaid balance for subscription {subscription.id}",
        reason=f"available={available}, required={required}, shortfall={required - available}",
    )


class ChargeSubscription:
    """
    Use Case: Charge one billing interval

    Business Rules:
    1. Only ACTIVE subscriptions are charged
    2. prepaid_balance < amount fails with INSUFFICIENT_BALANCE and moves the
       subscription to INSUFFICIENT_BALANCE, so sweeps stop retrying until
       the subscriber tops up and resumes
    3. Both balances are computed with overflow checks before either is written
    4. Subscription debit, merchant credit and last_payment_timestamp are
       committed together
    5. Row locks on the subscription and merchant balance serialize
       concurrent charges and withdrawals

    Flow:
    1. Lock subscription
    2. Validate status and balance
    3. Lock merchant balance, compute both new balances
    4. Write subscription and merchant balance
    5. Commit and publish event
    """

    def __init__(
        self,
        uow: UnitOfWork,
        subscription_repo: SubscriptionRepository,
        balance_repo: MerchantBalanceRepository,
        event_publisher: EventPublisher,
        clock: Clock,
    ):
        self.uow = uow
        self.subscription_repo = subscription_repo
        self.balance_repo = balance_repo
        self.event_publisher = event_publisher
        self.clock = clock

    async def execute(self, subscription_id: int) -> Result[ChargeResponseDTO]:
        try:
            subscription = await self.subscription_repo.get_by_id(subscription_id, for_update=True)
            if not subscription:
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code=ErrorCode.NOT_FOUND,
                        message=f"Subscription {subscription_id} not found",
                    )
                )

            if subscription.status != SubscriptionStatus.ACTIVE:
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code=ErrorCode.INVALID_STATUS,
                        message=f"Subscription {subscription_id} is not active",
                        reason=f"status={subscription.status.value}",
                    )
                )

            if subscription.prepaid_balance < subscription.amount:
                return await self._mark_insufficient(subscription)

            prepaid_before = subscription.prepaid_balance
            prepaid_after = checked_sub(prepaid_before, subscription.amount)

            merchant_balance = await self.balance_repo.get_by_merchant(
                subscription.merchant, for_update=True
            )
            merchant_before = merchant_balance.balance if merchant_balance else 0
            merchant_after = checked_add(merchant_before, subscription.amount)

            charged_at = max(self.clock.now(), subscription.last_payment_timestamp)
            subscription.prepaid_balance = prepaid_after
            subscription.last_payment_timestamp = charged_at
            await self.subscription_repo.update(subscription)
            await self.balance_repo.set_balance(subscription.merchant, merchant_after)
            await self.uow.commit()

        except ArithmeticOverflowError as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code=ErrorCode.ARITHMETIC_OVERFLOW,
                    message=f"Charge of subscription {subscription_id} would overflow a balance",
                    reason=str(e),
                )
            )
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to charge subscription {subscription_id}: {e}")
            return Return.err(
                Error(
                    code=ErrorCode.INTERNAL_ERROR,
                    message="Failed to charge subscription",
                    reason=str(e),
                )
            )

        logger.info(
            f"Charged subscription {subscription.id}: {subscription.amount} to "
            f"merchant {subscription.merchant} (prepaid {prepaid_before} -> {prepaid_after}, "
            f"merchant {merchant_before} -> {merchant_after})"
        )
        await self.event_publisher.publish(
            VaultEvent(
                event_type=VaultEventType.SUBSCRIPTION_CHARGED,
                subscription_id=subscription.id,
                timestamp=charged_at,
                data={"merchant": subscription.merchant, "amount": subscription.amount},
            )
        )
        return Return.ok(
            ChargeResponseDTO(
                subscription_id=subscription.id,
                merchant=subscription.merchant,
                amount=subscription.amount,
                prepaid_balance_before=prepaid_before,
                prepaid_balance_after=prepaid_after,
                merchant_balance_after=merchant_after,
                status=subscription.status,
                charged_at=charged_at,
            )
        )

    async def _mark_insufficient(self, subscription: Subscription) -> Result[ChargeResponseDTO]:
        error = insufficient_balance(subscription)

        transition = validate_transition(subscription.status, SubscriptionStatus.INSUFFICIENT_BALANCE)
        if transition.is_err():
            await self.uow.rollback()
            return Return.err(transition.error)

        subscription.status = SubscriptionStatus.INSUFFICIENT_BALANCE
        await self.subscription_repo.update(subscription)
        await self.uow.commit()

        logger.warning(
            f"Subscription {subscription.id} moved to insufficient_balance: {error.reason}"
        )
        return Return.err(error)
