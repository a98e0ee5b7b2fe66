"""Get Min Topup Use Case"""

from libs.result import Result, Return
from src.app.repositories.vault_settings_repository import VaultSettingsRepository
from .dtos import MinTopupResponseDTO
from .guards import vault_not_initialized


class GetMinTopup:

    def __init__(self, settings_repo: VaultSettingsRepository):
        self.settings_repo = settings_repo

    async def execute(self) -> Result[MinTopupResponseDTO]:
        settings = await self.settings_repo.get()
        if not settings:
            return Return.err(vault_not_initialized())
        return Return.ok(MinTopupResponseDTO(min_topup=settings.min_topup))
