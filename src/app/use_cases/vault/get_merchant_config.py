"""Get Merchant Config Use Case

Never fails: merchants without a stored config get the zero default.
"""

from libs.result import Result, Return
from src.app.repositories.merchant_config_repository import MerchantConfigRepository
from src.domain.merchant_config import MerchantConfig
from .dtos import MerchantConfigResponseDTO
from .set_merchant_config import to_config_dto


class GetMerchantConfig:

    def __init__(self, config_repo: MerchantConfigRepository):
        self.config_repo = config_repo

    async def execute(self, merchant: str) -> Result[MerchantConfigResponseDTO]:
        config = await self.config_repo.get_by_merchant(merchant)
        if not config:
            config = MerchantConfig.default_for(merchant)
        return Return.ok(to_config_dto(config))
