"""Merchant API Routes

Merchant configuration, earned balance and payouts.
"""

from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.schemas.vault_request import (
    SetMerchantConfigRequestSchema,
    UpdateMerchantConfigRequestSchema,
    WithdrawRequestSchema,
)
from src.app.use_cases.vault import (
    SetMerchantConfig,
    UpdateMerchantConfig,
    GetMerchantConfig,
    GetMerchantBalance,
    WithdrawMerchantFunds,
    ListMerchantSubscriptions,
    SetMerchantConfigCommandDTO,
    UpdateMerchantConfigCommandDTO,
    MerchantConfigResponseDTO,
    MerchantBalanceResponseDTO,
    MerchantSubscriptionsResponseDTO,
    WithdrawCommandDTO,
    WithdrawalResponseDTO,
)
from src.adapter.repositories.merchant_config_repository import SqlAlchemyMerchantConfigRepository
from src.adapter.repositories.merchant_balance_repository import SqlAlchemyMerchantBalanceRepository
from src.adapter.repositories.subscription_repository import SqlAlchemySubscriptionRepository
from src.adapter.repositories.vault_settings_repository import SqlAlchemyVaultSettingsRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.authorization_service import AuthorizationService
from src.app.services.clock import Clock
from src.app.services.event_publisher import EventPublisher
from src.app.services.token_service import TokenService
from src.depends import (
    get_session,
    get_authorization_service,
    get_token_service,
    get_event_publisher,
    get_clock,
    get_vault_address,
)
from src.api.error import ClientError

router = APIRouter(prefix="/merchants/{merchant}", tags=["Merchants"])


@router.get("/config", response_model=MerchantConfigResponseDTO)
async def get_merchant_config(merchant: str, session: AsyncSession = Depends(get_session)):
    """Merchant config, or the all-zero default when none was stored"""
    result = await GetMerchantConfig(SqlAlchemyMerchantConfigRepository(session)).execute(merchant)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.put("/config", response_model=MerchantConfigResponseDTO)
async def set_merchant_config(
    merchant: str,
    request: SetMerchantConfigRequestSchema,
    session: AsyncSession = Depends(get_session),
    auth: AuthorizationService = Depends(get_authorization_service),
):
    """
    Overwrite the merchant config (merchant or admin).

    **Returns:**
    - 200: Config stored
    - 400: Negative minimum subscription amount
    - 403: Caller is neither the merchant nor the admin
    """
    command = SetMerchantConfigCommandDTO(
        actor=request.actor,
        merchant=merchant,
        min_subscription_amount=request.min_subscription_amount,
        default_interval_seconds=request.default_interval_seconds,
    )

    use_case = SetMerchantConfig(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyMerchantConfigRepository(session),
        SqlAlchemyVaultSettingsRepository(session),
        auth,
    )
    result = await use_case.execute(command)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.patch("/config", response_model=MerchantConfigResponseDTO)
async def update_merchant_config(
    merchant: str,
    request: UpdateMerchantConfigRequestSchema,
    session: AsyncSession = Depends(get_session),
    auth: AuthorizationService = Depends(get_authorization_service),
):
    """Update only the supplied config fields (merchant or admin)"""
    command = UpdateMerchantConfigCommandDTO(
        actor=request.actor,
        merchant=merchant,
        min_subscription_amount=request.min_subscription_amount,
        default_interval_seconds=request.default_interval_seconds,
    )

    use_case = UpdateMerchantConfig(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyMerchantConfigRepository(session),
        SqlAlchemyVaultSettingsRepository(session),
        auth,
    )
    result = await use_case.execute(command)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.get("/balance", response_model=MerchantBalanceResponseDTO)
async def get_merchant_balance(merchant: str, session: AsyncSession = Depends(get_session)):
    """Earned, not yet withdrawn balance (0 for unknown merchants)"""
    result = await GetMerchantBalance(SqlAlchemyMerchantBalanceRepository(session)).execute(merchant)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post("/withdraw", response_model=WithdrawalResponseDTO)
async def withdraw_merchant_funds(
    merchant: str,
    request: WithdrawRequestSchema,
    session: AsyncSession = Depends(get_session),
    auth: AuthorizationService = Depends(get_authorization_service),
    token_service: TokenService = Depends(get_token_service),
    event_publisher: EventPublisher = Depends(get_event_publisher),
    clock: Clock = Depends(get_clock),
    vault_address: str = Depends(get_vault_address),
):
    """
    Transfer part of the merchant balance out of custody to the merchant.

    **Returns:**
    - 200: Funds transferred
    - 400: Amount is not positive
    - 402: Balance too low or the transfer failed
    - 403: Caller is not the merchant
    """
    use_case = WithdrawMerchantFunds(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyMerchantBalanceRepository(session),
        SqlAlchemyVaultSettingsRepository(session),
        auth,
        token_service,
        event_publisher,
        clock,
        vault_address,
    )
    result = await use_case.execute(WithdrawCommandDTO(merchant=merchant, amount=request.amount))
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.get("/subscriptions", response_model=MerchantSubscriptionsResponseDTO)
async def list_merchant_subscriptions(merchant: str, session: AsyncSession = Depends(get_session)):
    """Ids of every subscription billed to the merchant, in creation order"""
    use_case = ListMerchantSubscriptions(SqlAlchemySubscriptionRepository(session))
    result = await use_case.execute(merchant)
    if result.is_err():
        raise ClientError(result.error)
    return result.value
