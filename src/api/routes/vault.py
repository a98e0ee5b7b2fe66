"""Vault API Routes

Vault initialization and the global minimum top-up.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.schemas.vault_request import InitVaultRequestSchema, SetMinTopupRequestSchema
from src.app.use_cases.vault import (
    InitVault,
    SetMinTopup,
    GetMinTopup,
    InitVaultCommandDTO,
    SetMinTopupCommandDTO,
    VaultSettingsResponseDTO,
    MinTopupResponseDTO,
)
from src.adapter.repositories.vault_settings_repository import SqlAlchemyVaultSettingsRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.authorization_service import AuthorizationService
from src.depends import get_session, get_authorization_service
from src.api.error import ClientError

router = APIRouter(prefix="/vault", tags=["Vault"])


@router.post(
    "/init",
    response_model=VaultSettingsResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        403: {
            "description": "Vault already initialized",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "UNAUTHORIZED",
                            "numeric_code": 401,
                            "message": "Vault is already initialized",
                            "reason": None,
                        }
                    }
                }
            },
        }
    },
)
async def init_vault(
    request: InitVaultRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """
    Initialize the vault once with its token, admin and minimum top-up.

    **Returns:**
    - 201: Vault initialized
    - 400: min_topup is not positive
    - 403: Vault already initialized
    """
    uow = SqlAlchemyUnitOfWork(session)
    settings_repo = SqlAlchemyVaultSettingsRepository(session)

    command = InitVaultCommandDTO(
        token=request.token,
        admin=request.admin,
        min_topup=request.min_topup,
    )

    result = await InitVault(uow, settings_repo).execute(command)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.get("/min-topup", response_model=MinTopupResponseDTO)
async def get_min_topup(session: AsyncSession = Depends(get_session)):
    """Current minimum deposit amount"""
    result = await GetMinTopup(SqlAlchemyVaultSettingsRepository(session)).execute()
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.put("/min-topup", response_model=MinTopupResponseDTO)
async def set_min_topup(
    request: SetMinTopupRequestSchema,
    session: AsyncSession = Depends(get_session),
    auth: AuthorizationService = Depends(get_authorization_service),
):
    """
    Replace the minimum deposit amount (admin only).

    **Returns:**
    - 200: Minimum updated
    - 400: min_topup is not positive
    - 403: Caller is not the admin
    """
    uow = SqlAlchemyUnitOfWork(session)
    settings_repo = SqlAlchemyVaultSettingsRepository(session)

    command = SetMinTopupCommandDTO(admin=request.admin, min_topup=request.min_topup)

    result = await SetMinTopup(uow, settings_repo, auth).execute(command)
    if result.is_err():
        raise ClientError(result.error)
    return result.value
