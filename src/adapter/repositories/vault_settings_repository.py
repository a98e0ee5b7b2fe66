"""SQLAlchemy implementation of VaultSettingsRepository"""

from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.domain.base import utc_now
from src.app.repositories.vault_settings_repository import VaultSettingsRepository
from src.domain.vault_settings import VaultSettings, VAULT_SETTINGS_ID


class SqlAlchemyVaultSettingsRepository(VaultSettingsRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, for_update: bool = False) -> Optional[VaultSettings]:
        stmt = select(VaultSettings).where(VaultSettings.id == VAULT_SETTINGS_ID)

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def save(self, settings: VaultSettings) -> VaultSettings:
        settings.updated_at = utc_now()
        self.session.add(settings)
        await self.session.flush()
        return settings
