"""SetMinTopup Use Case

Admin-only update of the minimum deposit_funds amount.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.authorization_service import AuthorizationService
from src.app.repositories.vault_settings_repository import VaultSettingsRepository
from src.domain.error_codes import ErrorCode
from .dtos import SetMinTopupCommandDTO, MinTopupResponseDTO
from .guards import authorize_admin

logger = logging.getLogger(__name__)


class SetMinTopup:
    """
    Use Case: Update minimum top-up

    Business Rules:
    1. min_topup must be > 0 (checked before authorization)
    2. Caller must be the vault admin
    """

    def __init__(
        self,
        uow: UnitOfWork,
        settings_repo: VaultSettingsRepository,
        auth: AuthorizationService,
    ):
        self.uow = uow
        self.settings_repo = settings_repo
        self.auth = auth

    async def execute(self, command: SetMinTopupCommandDTO) -> Result[MinTopupResponseDTO]:
        if command.min_topup <= 0:
            return Return.err(
                Error(
                    code=ErrorCode.INVALID_AMOUNT,
                    message="Minimum top-up must be positive",
                    reason=f"min_topup={command.min_topup}",
                )
            )

        error = await authorize_admin(self.auth, self.settings_repo, command.admin)
        if error:
            return Return.err(error)

        try:
            settings = await self.settings_repo.get(for_update=True)
            previous = settings.min_topup
            settings.min_topup = command.min_topup
            await self.settings_repo.save(settings)
            await self.uow.commit()

            logger.info(f"Minimum top-up changed from {previous} to {command.min_topup}")
            return Return.ok(MinTopupResponseDTO(min_topup=command.min_topup))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code=ErrorCode.INTERNAL_ERROR,
                    message="Failed to update minimum top-up",
                    reason=str(e),
                )
            )
