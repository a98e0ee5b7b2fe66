"""Merchant Config Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.merchant_config import MerchantConfig


class MerchantConfigRepository(ABC):

    @abstractmethod
    async def get_by_merchant(self, merchant: str) -> Optional[MerchantConfig]:
        """Stored config for merchant, None if never set"""
        pass

    @abstractmethod
    async def save(self, config: MerchantConfig) -> MerchantConfig:
        """Insert or overwrite the config for config.merchant"""
        pass
