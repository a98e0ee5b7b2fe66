"""InitVault Use Case

Writes the vault's global parameters: custody token, admin and minimum
top-up. The vault is configured once; later changes to the minimum go
through SetMinTopup.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.vault_settings_repository import VaultSettingsRepository
from src.domain.error_codes import ErrorCode
from src.domain.vault_settings import VaultSettings
from .dtos import InitVaultCommandDTO, VaultSettingsResponseDTO

logger = logging.getLogger(__name__)


class InitVault:
    """
    Use Case: Initialize vault settings

    Business Rules:
    1. min_topup must be > 0
    2. Initialization happens once; a second init is rejected
    3. The subscription id counter starts at 0
    """

    def __init__(self, uow: UnitOfWork, settings_repo: VaultSettingsRepository):
        self.uow = uow
        self.settings_repo = settings_repo

    async def execute(self, command: InitVaultCommandDTO) -> Result[VaultSettingsResponseDTO]:
        if command.min_topup <= 0:
            return Return.err(
                Error(
                    code=ErrorCode.INVALID_AMOUNT,
                    message="Minimum top-up must be positive",
                    reason=f"min_topup={command.min_topup}",
                )
            )

        try:
            existing = await self.settings_repo.get(for_update=True)
            if existing:
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code=ErrorCode.UNAUTHORIZED,
                        message="Vault is already initialized",
                        reason=f"admin={existing.admin}",
                    )
                )

            settings = await self.settings_repo.save(
                VaultSettings(
                    token=command.token,
                    admin=command.admin,
                    min_topup=command.min_topup,
                    next_subscription_id=0,
                )
            )
            await self.uow.commit()

            logger.info(
                f"Vault initialized: token={settings.token}, admin={settings.admin}, "
                f"min_topup={settings.min_topup}"
            )
            return Return.ok(
                VaultSettingsResponseDTO(
                    token=settings.token,
                    admin=settings.admin,
                    min_topup=settings.min_topup,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Vault initialization failed: {e}")
            return Return.err(
                Error(
                    code=ErrorCode.INTERNAL_ERROR,
                    message="Failed to initialize vault",
                    reason=str(e),
                )
            )
