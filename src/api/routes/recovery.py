"""Recovery API Routes

Admin recovery of stranded custody funds and its audit trail.
"""

from typing import List
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.schemas.vault_request import RecoverFundsRequestSchema
from src.app.use_cases.vault import (
    RecoverStrandedFunds,
    ListRecoveryRecords,
    RecoverFundsCommandDTO,
    RecoveryRecordResponseDTO,
)
from src.adapter.repositories.recovery_record_repository import SqlAlchemyRecoveryRecordRepository
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

router = APIRouter(prefix="/recovery", tags=["Recovery"])


@router.post("", response_model=RecoveryRecordResponseDTO, status_code=status.HTTP_201_CREATED)
async def recover_stranded_funds(
    request: RecoverFundsRequestSchema,
    session: AsyncSession = Depends(get_session),
    auth: AuthorizationService = Depends(get_authorization_service),
    token_service: TokenService = Depends(get_token_service),
    event_publisher: EventPublisher = Depends(get_event_publisher),
    clock: Clock = Depends(get_clock),
    vault_address: str = Depends(get_vault_address),
):
    """
    Send stranded custody funds to a recipient (admin only).

    Subscriber and merchant ledgers are not touched.

    **Returns:**
    - 201: Funds recovered and recorded
    - 400: Amount is not positive
    - 402: The transfer failed
    - 403: Caller is not the admin
    """
    command = RecoverFundsCommandDTO(
        admin=request.admin,
        recipient=request.recipient,
        amount=request.amount,
        reason=request.reason,
    )

    use_case = RecoverStrandedFunds(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyRecoveryRecordRepository(session),
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


@router.get("", response_model=List[RecoveryRecordResponseDTO])
async def list_recovery_records(
    limit: int = Query(default=100, ge=1, le=1000),
    session: AsyncSession = Depends(get_session),
):
    """Most recent recoveries first"""
    result = await ListRecoveryRecords(SqlAlchemyRecoveryRecordRepository(session)).execute(limit)
    if result.is_err():
        raise ClientError(result.error)
    return result.value
