"""CreateSubscription Use Case

Opens a subscription and pulls its first interval's amount into vault
custody as the initial prepaid balance.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.authorization_service import AuthorizationService
from src.app.services.token_service import TokenService, TokenTransferError
from src.app.services.event_publisher import EventPublisher
from src.app.services.clock import Clock
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.app.repositories.merchant_config_repository import MerchantConfigRepository
from src.app.repositories.vault_settings_repository import VaultSettingsRepository
from src.domain.error_codes import ErrorCode
from src.domain.merchant_config import MerchantConfig
from src.domain.subscription import Subscription, SubscriptionStatus
from src.domain.vault_event import VaultEvent, VaultEventType
from .dtos import CreateSubscriptionCommandDTO, SubscriptionIdResponseDTO
from .guards import authorize, vault_not_initialized
from .funding import check_can_pull, refund_pull

logger = logging.getLogger(__name__)


class CreateSubscription:
    """
    Use Case: Create a subscription

    Business Rules:
    1. Subscriber must authorize
    2. amount > 0
    3. Merchant minimum applies when set (> 0)
    4. interval 0 resolves to the merchant default; no default is an error
    5. Allowance and balance are checked before anything moves
    6. The write precedes the transfer; a failure after the pull refunds it

    Flow:
    1. Authorize subscriber
    2. Validate amount, merchant minimum and interval
    3. Lock vault settings (id counter) and check allowance/balance
    4. Persist ACTIVE subscription with prepaid_balance = amount
    5. Pull amount into custody, then commit
    6. On failure after the pull, refund the subscriber
    7. Publish event
    """

    def __init__(
        self,
        uow: UnitOfWork,
        subscription_repo: SubscriptionRepository,
        config_repo: MerchantConfigRepository,
        settings_repo: VaultSettingsRepository,
        auth: AuthorizationService,
        token_service: TokenService,
        event_publisher: EventPublisher,
        clock: Clock,
        vault_address: str,
    ):
        self.uow = uow
        self.subscription_repo = subscription_repo
        self.config_repo = config_repo
        self.settings_repo = settings_repo
        self.auth = auth
        self.token_service = token_service
        self.event_publisher = event_publisher
        self.clock = clock
        self.vault_address = vault_address

    async def execute(self, command: CreateSubscriptionCommandDTO) -> Result[SubscriptionIdResponseDTO]:
        error = await authorize(self.auth, command.subscriber)
        if error:
            return Return.err(error)

        if command.amount <= 0:
            return Return.err(
                Error(
                    code=ErrorCode.INVALID_AMOUNT,
                    message="Subscription amount must be positive",
                    reason=f"amount={command.amount}",
                )
            )

        config = await self.config_repo.get_by_merchant(command.merchant)
        if not config:
            config = MerchantConfig.default_for(command.merchant)

        if config.min_subscription_amount > 0 and command.amount < config.min_subscription_amount:
            return Return.err(
                Error(
                    code=ErrorCode.BELOW_MERCHANT_MINIMUM,
                    message=f"Amount is below the minimum for merchant {command.merchant}",
                    reason=f"amount={command.amount}, minimum={config.min_subscription_amount}",
                )
            )

        interval_seconds = command.interval_seconds or config.default_interval_seconds
        if interval_seconds == 0:
            return Return.err(
                Error(
                    code=ErrorCode.INVALID_AMOUNT,
                    message="No billing interval given and merchant has no default interval",
                    reason=f"merchant={command.merchant}",
                )
            )

        pulled = False
        try:
            settings = await self.settings_repo.get(for_update=True)
            if not settings:
                await self.uow.rollback()
                return Return.err(vault_not_initialized())

            error = await check_can_pull(
                self.token_service, settings.token, command.subscriber,
                self.vault_address, command.amount,
            )
            if error:
                await self.uow.rollback()
                return Return.err(error)

            now = self.clock.now()
            subscription_id = settings.next_subscription_id
            settings.next_subscription_id = subscription_id + 1
            await self.settings_repo.save(settings)

            subscription = await self.subscription_repo.create(
                Subscription(
                    id=subscription_id,
                    subscriber=command.subscriber,
                    merchant=command.merchant,
                    amount=command.amount,
                    interval_seconds=interval_seconds,
                    last_payment_timestamp=now,
                    status=SubscriptionStatus.ACTIVE,
                    prepaid_balance=command.amount,
                    usage_enabled=command.usage_enabled,
                )
            )

            await self.token_service.transfer_from(
                settings.token,
                spender=self.vault_address,
                from_=command.subscriber,
                to=self.vault_address,
                amount=command.amount,
            )
            pulled = True
            await self.uow.commit()

        except TokenTransferError as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code=ErrorCode.TRANSFER_FAILED,
                    message="Initial deposit transfer failed",
                    reason=str(e),
                )
            )
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to create subscription for {command.subscriber}: {e}")
            if pulled:
                await refund_pull(
                    self.token_service, settings.token, command.subscriber,
                    self.vault_address, command.amount,
                )
            return Return.err(
                Error(
                    code=ErrorCode.INTERNAL_ERROR,
                    message="Failed to create subscription",
                    reason=str(e),
                )
            )

        logger.info(
            f"Subscription {subscription.id} created: subscriber={subscription.subscriber}, "
            f"merchant={subscription.merchant}, amount={subscription.amount}, "
            f"interval={subscription.interval_seconds}s"
        )
        await self.event_publisher.publish(
            VaultEvent(
                event_type=VaultEventType.SUBSCRIPTION_CREATED,
                subscription_id=subscription.id,
                timestamp=now,
                data={
                    "subscriber": subscription.subscriber,
                    "merchant": subscription.merchant,
                    "amount": subscription.amount,
                    "interval_seconds": subscription.interval_seconds,
                },
            )
        )
        return Return.ok(SubscriptionIdResponseDTO(subscription_id=subscription.id))
