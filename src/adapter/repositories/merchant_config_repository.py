"""SQLAlchemy implementation of MerchantConfigRepository"""

from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.merchant_config_repository import MerchantConfigRepository
from src.domain.merchant_config import MerchantConfig


class SqlAlchemyMerchantConfigRepository(MerchantConfigRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_merchant(self, merchant: str) -> Optional[MerchantConfig]:
        stmt = select(MerchantConfig).where(MerchantConfig.merchant == merchant)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def save(self, config: MerchantConfig) -> MerchantConfig:
        """
        Insert or overwrite the merchant's config

        merge() resolves an existing row by primary key (merchant) so a
        freshly built MerchantConfig replaces the stored one wholesale.
        """
        merged = await self.session.merge(config)
        await self.session.flush()
        await self.session.refresh(merged)
        return merged
