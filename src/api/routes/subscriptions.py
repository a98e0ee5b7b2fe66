"""Subscription API Routes

Subscription lifecycle, deposits and charging.
"""

from typing import Annotated
from fastapi import APIRouter, Depends, Path, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.schemas.vault_request import (
    CreateSubscriptionRequestSchema,
    DepositRequestSchema,
    UsageChargeRequestSchema,
    StatusChangeRequestSchema,
    BatchChargeRequestSchema,
)
from src.app.use_cases.vault import (
    CreateSubscription,
    DepositFunds,
    ChargeSubscription,
    ChargeUsage,
    BatchCharge,
    PauseSubscription,
    ResumeSubscription,
    CancelSubscription,
    GetSubscription,
    GetNextChargeInfo,
    CreateSubscriptionCommandDTO,
    DepositFundsCommandDTO,
    UsageChargeCommandDTO,
    ChangeStatusCommandDTO,
    BatchChargeCommandDTO,
    SubscriptionResponseDTO,
    SubscriptionIdResponseDTO,
    ChargeResponseDTO,
    BatchChargeResponseDTO,
)
from src.adapter.repositories.subscription_repository import SqlAlchemySubscriptionRepository
from src.adapter.repositories.merchant_config_repository import SqlAlchemyMerchantConfigRepository
from src.adapter.repositories.merchant_balance_repository import SqlAlchemyMerchantBalanceRepository
from src.adapter.repositories.vault_settings_repository import SqlAlchemyVaultSettingsRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.authorization_service import AuthorizationService
from src.app.services.clock import Clock
from src.app.services.event_publisher import EventPublisher
from src.app.services.token_service import TokenService
from src.domain.next_charge import NextChargeInfo
from src.domain.subscription import MAX_SUBSCRIPTION_ID
from src.depends import (
    get_session,
    get_authorization_service,
    get_token_service,
    get_event_publisher,
    get_clock,
    get_vault_address,
)
from src.api.error import ClientError

router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])

SubscriptionId = Annotated[
    int, Path(ge=0, le=MAX_SUBSCRIPTION_ID, description="Subscription identifier")
]


def charge_use_case(session: AsyncSession, event_publisher: EventPublisher, clock: Clock) -> ChargeSubscription:
    return ChargeSubscription(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemySubscriptionRepository(session),
        SqlAlchemyMerchantBalanceRepository(session),
        event_publisher,
        clock,
    )


@router.post("", response_model=SubscriptionIdResponseDTO, status_code=status.HTTP_201_CREATED)
async def create_subscription(
    request: CreateSubscriptionRequestSchema,
    session: AsyncSession = Depends(get_session),
    auth: AuthorizationService = Depends(get_authorization_service),
    token_service: TokenService = Depends(get_token_service),
    event_publisher: EventPublisher = Depends(get_event_publisher),
    clock: Clock = Depends(get_clock),
    vault_address: str = Depends(get_vault_address),
):
    """
    Create a subscription and pull the first deposit (equal to the amount)
    from the subscriber into custody.

    **Returns:**
    - 201: Subscription created
    - 400: Invalid amount or below the merchant minimum
    - 402: Allowance/balance too low or the transfer failed
    - 403: Caller is not the subscriber
    """
    command = CreateSubscriptionCommandDTO(
        subscriber=request.subscriber,
        merchant=request.merchant,
        amount=request.amount,
        interval_seconds=request.interval_seconds,
        usage_enabled=request.usage_enabled,
    )

    use_case = CreateSubscription(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemySubscriptionRepository(session),
        SqlAlchemyMerchantConfigRepository(session),
        SqlAlchemyVaultSettingsRepository(session),
        auth,
        token_service,
        event_publisher,
        clock,
        vault_address,
    )
    result = await use_case.execute(command)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post("/batch-charge", response_model=BatchChargeResponseDTO)
async def batch_charge(
    request: BatchChargeRequestSchema,
    session: AsyncSession = Depends(get_session),
    event_publisher: EventPublisher = Depends(get_event_publisher),
    clock: Clock = Depends(get_clock),
):
    """
    Charge each listed subscription independently, in order.

    One failure never aborts the rest; each result carries a numeric
    error code (0 on success).
    """
    use_case = BatchCharge(charge_use_case(session, event_publisher, clock))
    result = await use_case.execute(BatchChargeCommandDTO(subscription_ids=request.subscription_ids))
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.get("/{subscription_id}", response_model=SubscriptionResponseDTO)
async def get_subscription(subscription_id: SubscriptionId, session: AsyncSession = Depends(get_session)):
    result = await GetSubscription(SqlAlchemySubscriptionRepository(session)).execute(subscription_id)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.get("/{subscription_id}/next-charge", response_model=NextChargeInfo)
async def get_next_charge_info(subscription_id: SubscriptionId, session: AsyncSession = Depends(get_session)):
    """When the subscription is next due and whether a charge is expected then"""
    result = await GetNextChargeInfo(SqlAlchemySubscriptionRepository(session)).execute(subscription_id)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post("/{subscription_id}/deposit", response_model=SubscriptionResponseDTO)
async def deposit_funds(
    subscription_id: SubscriptionId,
    request: DepositRequestSchema,
    session: AsyncSession = Depends(get_session),
    auth: AuthorizationService = Depends(get_authorization_service),
    token_service: TokenService = Depends(get_token_service),
    event_publisher: EventPublisher = Depends(get_event_publisher),
    clock: Clock = Depends(get_clock),
    vault_address: str = Depends(get_vault_address),
):
    """
    Top up the prepaid balance.

    **Returns:**
    - 200: Deposit credited
    - 400: Invalid amount or below the minimum top-up
    - 402: Allowance/balance too low or the transfer failed
    - 404: Subscription not found
    """
    command = DepositFundsCommandDTO(
        subscription_id=subscription_id,
        subscriber=request.subscriber,
        amount=request.amount,
    )

    use_case = DepositFunds(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemySubscriptionRepository(session),
        SqlAlchemyVaultSettingsRepository(session),
        auth,
        token_service,
        event_publisher,
        clock,
        vault_address,
    )
    result = await use_case.execute(command)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post("/{subscription_id}/charge", response_model=ChargeResponseDTO)
async def charge_subscription(
    subscription_id: SubscriptionId,
    session: AsyncSession = Depends(get_session),
    event_publisher: EventPublisher = Depends(get_event_publisher),
    clock: Clock = Depends(get_clock),
):
    """
    Charge one billing period. Anyone may trigger a charge.

    **Returns:**
    - 200: Charged
    - 402: Prepaid balance below the amount; the subscription is now
      insufficient_balance
    - 404: Subscription not found
    - 409: Subscription is not active
    """
    result = await charge_use_case(session, event_publisher, clock).execute(subscription_id)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post("/{subscription_id}/usage", response_model=ChargeResponseDTO)
async def charge_usage(
    subscription_id: SubscriptionId,
    request: UsageChargeRequestSchema,
    session: AsyncSession = Depends(get_session),
    auth: AuthorizationService = Depends(get_authorization_service),
    event_publisher: EventPublisher = Depends(get_event_publisher),
    clock: Clock = Depends(get_clock),
):
    """Draw a metered amount from the prepaid balance (merchant only)"""
    command = UsageChargeCommandDTO(
        subscription_id=subscription_id,
        merchant=request.merchant,
        amount=request.amount,
    )

    use_case = ChargeUsage(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemySubscriptionRepository(session),
        SqlAlchemyMerchantBalanceRepository(session),
        auth,
        event_publisher,
        clock,
    )
    result = await use_case.execute(command)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


async def change_status(use_case_class, subscription_id, request, session, auth, event_publisher, clock):
    use_case = use_case_class(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemySubscriptionRepository(session),
        auth,
        event_publisher,
        clock,
    )
    command = ChangeStatusCommandDTO(subscription_id=subscription_id, authorizer=request.authorizer)
    result = await use_case.execute(command)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post("/{subscription_id}/pause", response_model=SubscriptionResponseDTO)
async def pause_subscription(
    subscription_id: SubscriptionId,
    request: StatusChangeRequestSchema,
    session: AsyncSession = Depends(get_session),
    auth: AuthorizationService = Depends(get_authorization_service),
    event_publisher: EventPublisher = Depends(get_event_publisher),
    clock: Clock = Depends(get_clock),
):
    return await change_status(
        PauseSubscription, subscription_id, request, session, auth, event_publisher, clock
    )


@router.post("/{subscription_id}/resume", response_model=SubscriptionResponseDTO)
async def resume_subscription(
    subscription_id: SubscriptionId,
    request: StatusChangeRequestSchema,
    session: AsyncSession = Depends(get_session),
    auth: AuthorizationService = Depends(get_authorization_service),
    event_publisher: EventPublisher = Depends(get_event_publisher),
    clock: Clock = Depends(get_clock),
):
    return await change_status(
        ResumeSubscription, subscription_id, request, session, auth, event_publisher, clock
    )


@router.post("/{subscription_id}/cancel", response_model=SubscriptionResponseDTO)
async def cancel_subscription(
    subscription_id: SubscriptionId,
    request: StatusChangeRequestSchema,
    session: AsyncSession = Depends(get_session),
    auth: AuthorizationService = Depends(get_authorization_service),
    event_publisher: EventPublisher = Depends(get_event_publisher),
    clock: Clock = Depends(get_clock),
):
    """Cancel permanently; the prepaid balance stays frozen in custody"""
    return await change_status(
        CancelSubscription, subscription_id, request, session, auth, event_publisher, clock
    )
