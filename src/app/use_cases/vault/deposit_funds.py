"""DepositFunds Use Case

Tops up a subscription's prepaid balance from the subscriber's tokens.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.authorization_service import AuthorizationService
from src.app.services.token_service import TokenService, TokenTransferError
from src.app.services.event_publisher import EventPublisher
from src.app.services.clock import Clock
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.app.repositories.vault_settings_repository import VaultSettingsRepository
from src.domain.amounts import ArithmeticOverflowError, checked_add
from src.domain.error_codes import ErrorCode
from src.domain.subscription import SubscriptionStatus
from src.domain.vault_event import VaultEvent, VaultEventType
from .dtos import DepositFundsCommandDTO, SubscriptionResponseDTO
from .funding import check_can_pull, refund_pull
from .guards import authorize, unauthorized, vault_not_initialized

logger = logging.getLogger(__name__)


class DepositFunds:
    """
    Use Case: Deposit funds into a subscription

    Business Rules:
    1. Subscriber must authorize and own the subscription
    2. amount > 0 (checked before the minimum)
    3. amount >= min_topup
    4. Cancelled subscriptions are frozen and accept no deposits
    5. Deposits only add to prepaid_balance; status never changes
    6. The balance write precedes the pull; a failure after the pull refunds it
    """

    def __init__(
        self,
        uow: UnitOfWork,
        subscription_repo: SubscriptionRepository,
        settings_repo: VaultSettingsRepository,
        auth: AuthorizationService,
        token_service: TokenService,
        event_publisher: EventPublisher,
        clock: Clock,
        vault_address: str,
    ):
        self.uow = uow
        self.subscription_repo = subscription_repo
        self.settings_repo = settings_repo
        self.auth = auth
        self.token_service = token_service
        self.event_publisher = event_publisher
        self.clock = clock
        self.vault_address = vault_address

    async def execute(self, command: DepositFundsCommandDTO) -> Result[SubscriptionResponseDTO]:
        error = await authorize(self.auth, command.subscriber)
        if error:
            return Return.err(error)

        if command.amount <= 0:
            return Return.err(
                Error(
                    code=ErrorCode.INVALID_AMOUNT,
                    message="Deposit amount must be positive",
                    reason=f"amount={command.amount}",
                )
            )

        settings = await self.settings_repo.get()
        if not settings:
            return Return.err(vault_not_initialized())

        if command.amount < settings.min_topup:
            return Return.err(
                Error(
                    code=ErrorCode.BELOW_MINIMUM_TOPUP,
                    message="Deposit is below the minimum top-up",
                    reason=f"amount={command.amount}, min_topup={settings.min_topup}",
                )
            )

        pulled = False
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

            if subscription.subscriber != command.subscriber:
                await self.uow.rollback()
                return Return.err(
                    unauthorized(command.subscriber, f"not the subscriber of {subscription.id}")
                )

            if subscription.status == SubscriptionStatus.CANCELLED:
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code=ErrorCode.INVALID_STATUS,
                        message=f"Subscription {subscription.id} is cancelled",
                        reason="prepaid balance is frozen after cancellation",
                    )
                )

            balance_before = subscription.prepaid_balance
            balance_after = checked_add(balance_before, command.amount)

            error = await check_can_pull(
                self.token_service, settings.token, command.subscriber,
                self.vault_address, command.amount,
            )
            if error:
                await self.uow.rollback()
                return Return.err(error)

            subscription.prepaid_balance = balance_after
            subscription = await self.subscription_repo.update(subscription)

            await self.token_service.transfer_from(
                settings.token,
                spender=self.vault_address,
                from_=command.subscriber,
                to=self.vault_address,
                amount=command.amount,
            )
            pulled = True
            await self.uow.commit()

        except ArithmeticOverflowError as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code=ErrorCode.ARITHMETIC_OVERFLOW,
                    message="Prepaid balance would overflow",
                    reason=str(e),
                )
            )
        except TokenTransferError as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code=ErrorCode.TRANSFER_FAILED,
                    message="Deposit transfer failed",
                    reason=str(e),
                )
            )
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to deposit into subscription {command.subscription_id}: {e}")
            if pulled:
                await refund_pull(
                    self.token_service, settings.token, command.subscriber,
                    self.vault_address, command.amount,
                )
            return Return.err(
                Error(
                    code=ErrorCode.INTERNAL_ERROR,
                    message="Failed to deposit funds",
                    reason=str(e),
                )
            )

        logger.info(
            f"Deposited {command.amount} into subscription {subscription.id}: "
            f"prepaid {balance_before} -> {balance_after}"
        )
        await self.event_publisher.publish(
            VaultEvent(
                event_type=VaultEventType.FUNDS_DEPOSITED,
                subscription_id=subscription.id,
                timestamp=self.clock.now(),
                data={"subscriber": command.subscriber, "amount": command.amount},
            )
        )
        return Return.ok(SubscriptionResponseDTO.from_entity(subscription))
