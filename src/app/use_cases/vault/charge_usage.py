"""ChargeUsage Use Case

Merchant-reported usage drawn from the prepaid balance on top of the
periodic charge. Does not touch last_payment_timestamp or the schedule.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.authorization_service import AuthorizationService
from src.app.services.event_publisher import EventPublisher
from src.app.services.clock import Clock
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.app.repositories.merchant_balance_repository import MerchantBalanceRepository
from src.domain.amounts import ArithmeticOverflowError, checked_add, checked_sub
from src.domain.error_codes import ErrorCode
from src.domain.status_transitions import can_transition
from src.domain.subscription import SubscriptionStatus
from src.domain.vault_event import VaultEvent, VaultEventType
from .dtos import UsageChargeCommandDTO, ChargeResponseDTO
from .guards import authorize, unauthorized

logger = logging.getLogger(__name__)


class ChargeUsage:
    """
    Use Case: Charge usage against the prepaid balance

    Business Rules:
    1. Merchant must authorize and own the subscription
    2. amount > 0
    3. usage_enabled must be set (USAGE_NOT_ENABLED)
    4. Only ACTIVE subscriptions are charged
    5. amount > prepaid_balance fails with INSUFFICIENT_PREPAID_BALANCE, no writes
    6. The debit is credited to the merchant balance in the same commit
    7. A charge that drains the prepaid balance to zero moves the
       subscription to INSUFFICIENT_BALANCE
    """

    def __init__(
        self,
        uow: UnitOfWork,
        subscription_repo: SubscriptionRepository,
        balance_repo: MerchantBalanceRepository,
        auth: AuthorizationService,
        event_publisher: EventPublisher,
        clock: Clock,
    ):
        self.uow = uow
        self.subscription_repo = subscription_repo
        self.balance_repo = balance_repo
        self.auth = auth
        self.event_publisher = event_publisher
        self.clock = clock

    async def execute(self, command: UsageChargeCommandDTO) -> Result[ChargeResponseDTO]:
        error = await authorize(self.auth, command.merchant)
        if error:
            return Return.err(error)

        if command.amount <= 0:
            return Return.err(
                Error(
                    code=ErrorCode.INVALID_AMOUNT,
                    message="Usage amount must be positive",
                    reason=f"amount={command.amount}",
                )
            )

        try:
            subscription = await self.subscription_repo.get_by_id(
                command.subscription_id, for_update=True
            )
            if not subscription:
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code=ErrorCode.NOT_FOUND,
                        message=f"Subscription {command.subscription_id} not found",
                    )
                )

            if subscription.merchant != command.merchant:
                await self.uow.rollback()
                return Return.err(
                    unauthorized(command.merchant, f"not the merchant of subscription {subscription.id}")
                )

            if not subscription.usage_enabled:
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code=ErrorCode.USAGE_NOT_ENABLED,
                        message=f"Usage charges are not enabled for subscription {subscription.id}",
                    )
                )

            if subscription.status != SubscriptionStatus.ACTIVE:
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code=ErrorCode.INVALID_STATUS,
                        message=f"Subscription {subscription.id} is not active",
                        reason=f"status={subscription.status.value}",
                    )
                )

            if subscription.prepaid_balance < command.amount:
                await self.uow.rollback()
                available = subscription.prepaid_balance
                return Return.err(
                    Error(
                        code=ErrorCode.INSUFFICIENT_PREPAID_BALANCE,
                        message=f"Usage exceeds prepaid balance of subscription {subscription.id}",
                        reason=(
                            f"available={available}, required={command.amount}, "
                            f"shortfall={command.amount - available}"
                        ),
                    )
                )

            prepaid_before = subscription.prepaid_balance
            prepaid_after = checked_sub(prepaid_before, command.amount)

            merchant_balance = await self.balance_repo.get_by_merchant(
                subscription.merchant, for_update=True
            )
            merchant_before = merchant_balance.balance if merchant_balance else 0
            merchant_after = checked_add(merchant_before, command.amount)

            subscription.prepaid_balance = prepaid_after
            if prepaid_after == 0 and can_transition(
                subscription.status, SubscriptionStatus.INSUFFICIENT_BALANCE
            ):
                subscription.status = SubscriptionStatus.INSUFFICIENT_BALANCE
            await self.subscription_repo.update(subscription)
            await self.balance_repo.set_balance(subscription.merchant, merchant_after)
            await self.uow.commit()

        except ArithmeticOverflowError as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code=ErrorCode.ARITHMETIC_OVERFLOW,
                    message="Usage charge would overflow a balance",
                    reason=str(e),
                )
            )
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to charge usage on subscription {command.subscription_id}: {e}")
            return Return.err(
                Error(
                    code=ErrorCode.INTERNAL_ERROR,
                    message="Failed to charge usage",
                    reason=str(e),
                )
            )

        charged_at = self.clock.now()
        logger.info(
            f"Usage charge on subscription {subscription.id}: {command.amount} "
            f"(prepaid {prepaid_before} -> {prepaid_after}, status={subscription.status.value})"
        )
        await self.event_publisher.publish(
            VaultEvent(
                event_type=VaultEventType.USAGE_CHARGED,
                subscription_id=subscription.id,
                timestamp=charged_at,
                data={"merchant": subscription.merchant, "amount": command.amount},
            )
        )
        return Return.ok(
            ChargeResponseDTO(
                subscription_id=subscription.id,
                merchant=subscription.merchant,
                amount=command.amount,
                prepaid_balance_before=prepaid_before,
                prepaid_balance_after=prepaid_after,
                merchant_balance_after=merchant_after,
                status=subscription.status,
                charged_at=charged_at,
            )
        )
