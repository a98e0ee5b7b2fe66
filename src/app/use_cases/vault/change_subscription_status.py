"""Pause / Resume / Cancel Use Cases

Status changes requested by one of the subscription's parties. All three
share one flow and differ only in the target status and emitted event.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.authorization_service import AuthorizationService
from src.app.services.event_publisher import EventPublisher
from src.app.services.clock import Clock
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.domain.error_codes import ErrorCode
from src.domain.status_transitions import validate_transition
from src.domain.subscription import Subscription, SubscriptionStatus
from src.domain.vault_event import VaultEvent, VaultEventType
from .dtos import ChangeStatusCommandDTO, SubscriptionResponseDTO
from .guards import authorize, unauthorized

logger = logging.getLogger(__name__)


class ChangeSubscriptionStatus:
    """
    Use Case: Move a subscription to target_status

    Business Rules:
    1. Authorizer must authorize and be the subscriber or the merchant
    2. The transition table decides legality
    3. Requesting the current status succeeds without writing (idempotent)
    """

    target_status: SubscriptionStatus
    event_type: VaultEventType

    def __init__(
        self,
        uow: UnitOfWork,
        subscription_repo: SubscriptionRepository,
        auth: AuthorizationService,
        event_publisher: EventPublisher,
        clock: Clock,
    ):
        self.uow = uow
        self.subscription_repo = subscription_repo
        self.auth = auth
        self.event_publisher = event_publisher
        self.clock = clock

    async def execute(self, command: ChangeStatusCommandDTO) -> Result[SubscriptionResponseDTO]:
        error = await authorize(self.auth, command.authorizer)
        if error:
            return Return.err(error)

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

            if command.authorizer not in (subscription.subscriber, subscription.merchant):
                await self.uow.rollback()
                return Return.err(
                    unauthorized(command.authorizer, f"not a party to subscription {subscription.id}")
                )

            current_status = subscription.status
            transition = validate_transition(current_status, self.target_status)
            if transition.is_err():
                await self.uow.rollback()
                return Return.err(transition.error)

            if current_status == self.target_status:
                await self.uow.rollback()
                return Return.ok(SubscriptionResponseDTO.from_entity(subscription))

            subscription.status = self.target_status
            subscription = await self.subscription_repo.update(subscription)
            await self.uow.commit()

        except Exception as e:
            await self.uow.rollback()
            logger.error(
                f"Failed to move subscription {command.subscription_id} "
                f"to {self.target_status.value}: {e}"
            )
            return Return.err(
                Error(
                    code=ErrorCode.INTERNAL_ERROR,
                    message=f"Failed to change subscription status to {self.target_status.value}",
                    reason=str(e),
                )
            )

        logger.info(
            f"Subscription {subscription.id} {current_status.value} -> "
            f"{self.target_status.value} by {command.authorizer}"
        )
        await self.event_publisher.publish(
            VaultEvent(
                event_type=self.event_type,
                subscription_id=subscription.id,
                timestamp=self.clock.now(),
                data=self._event_data(subscription, command.authorizer),
            )
        )
        return Return.ok(SubscriptionResponseDTO.from_entity(subscription))

    def _event_data(self, subscription: Subscription, authorizer: str) -> dict:
        return {"authorizer": authorizer}


class PauseSubscription(ChangeSubscriptionStatus):
    target_status = SubscriptionStatus.PAUSED
    event_type = VaultEventType.SUBSCRIPTION_PAUSED


class ResumeSubscription(ChangeSubscriptionStatus):
    target_status = SubscriptionStatus.ACTIVE
    event_type = VaultEventType.SUBSCRIPTION_RESUMED


class CancelSubscription(ChangeSubscriptionStatus):
    """
    Cancellation is terminal and freezes prepaid_balance. The frozen amount
    is reported on the event as refund_amount.
    """

    target_status = SubscriptionStatus.CANCELLED
    event_type = VaultEventType.SUBSCRIPTION_CANCELLED

    def _event_data(self, subscription: Subscription, authorizer: str) -> dict:
        return {"authorizer": authorizer, "refund_amount": subscription.prepaid_balance}
