"""Vault Settings Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.vault_settings import VaultSettings


class VaultSettingsRepository(ABC):

    @abstractmethod
    async def get(self, for_update: bool = False) -> Optional[VaultSettings]:
        """
        Retrieve the vault settings row

        Args:
            for_update: If True, lock the row (needed when advancing the id counter)

        Returns:
            VaultSettings if the vault was initialized, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, settings: VaultSettings) -> VaultSettings:
        pass
