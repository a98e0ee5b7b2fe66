"""SetMerchantConfig / UpdateMerchantConfig Use Cases

Maintain a merchant's billing policy. Either the merchant itself or the
vault admin may change it.
"""

import logging
from libs.result import Result, Return, Error
from src.domain.base import utc_now
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.authorization_service import AuthorizationService
from src.app.repositories.merchant_config_repository import MerchantConfigRepository
from src.app.repositories.vault_settings_repository import VaultSettingsRepository
from src.domain.error_codes import ErrorCode
from src.domain.merchant_config import MerchantConfig, MERCHANT_CONFIG_VERSION
from .dtos import (
    SetMerchantConfigCommandDTO,
    UpdateMerchantConfigCommandDTO,
    MerchantConfigResponseDTO,
)
from .guards import authorize_admin_or_merchant

logger = logging.getLogger(__name__)


def to_config_dto(config: MerchantConfig) -> MerchantConfigResponseDTO:
    return MerchantConfigResponseDTO(
        merchant=config.merchant,
        version=config.version,
        min_subscription_amount=config.min_subscription_amount,
        default_interval_seconds=config.default_interval_seconds,
    )


def negative_minimum(amount: int) -> Error:
    return Error(
        code=ErrorCode.INVALID_AMOUNT,
        message="Minimum subscription amount cannot be negative",
        reason=f"min_subscription_amount={amount}",
    )


class SetMerchantConfig:
    """
    Use Case: Overwrite merchant config

    Business Rules:
    1. min_subscription_amount >= 0 (checked before authorization)
    2. Actor must be the merchant or the vault admin
    3. The whole record is replaced; version is always 1
    """

    def __init__(
        self,
        uow: UnitOfWork,
        config_repo: MerchantConfigRepository,
        settings_repo: VaultSettingsRepository,
        auth: AuthorizationService,
    ):
        self.uow = uow
        self.config_repo = config_repo
        self.settings_repo = settings_repo
        self.auth = auth

    async def execute(self, command: SetMerchantConfigCommandDTO) -> Result[MerchantConfigResponseDTO]:
        if command.min_subscription_amount < 0:
            return Return.err(negative_minimum(command.min_subscription_amount))

        error = await authorize_admin_or_merchant(
            self.auth, self.settings_repo, command.actor, command.merchant
        )
        if error:
            return Return.err(error)

        try:
            config = await self.config_repo.save(
                MerchantConfig(
                    merchant=command.merchant,
                    version=MERCHANT_CONFIG_VERSION,
                    min_subscription_amount=command.min_subscription_amount,
                    default_interval_seconds=command.default_interval_seconds,
                    updated_at=utc_now(),
                )
            )
            await self.uow.commit()

            logger.info(
                f"Merchant config set for {command.merchant} by {command.actor}: "
                f"min={config.min_subscription_amount}, "
                f"default_interval={config.default_interval_seconds}"
            )
            return Return.ok(to_config_dto(config))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code=ErrorCode.INTERNAL_ERROR,
                    message="Failed to set merchant config",
                    reason=str(e),
                )
            )


class UpdateMerchantConfig:
    """
    Use Case: Partially update merchant config

    Business Rules:
    1. Actor must be the merchant or the vault admin
    2. Fields not provided keep their stored (or default) value
    3. min_subscription_amount, if provided, must be >= 0
    """

    def __init__(
        self,
        uow: UnitOfWork,
        config_repo: MerchantConfigRepository,
        settings_repo: VaultSettingsRepository,
        auth: AuthorizationService,
    ):
        self.uow = uow
        self.config_repo = config_repo
        self.settings_repo = settings_repo
        self.auth = auth

    async def execute(self, command: UpdateMerchantConfigCommandDTO) -> Result[MerchantConfigResponseDTO]:
        error = await authorize_admin_or_merchant(
            self.auth, self.settings_repo, command.actor, command.merchant
        )
        if error:
            return Return.err(error)

        if command.min_subscription_amount is not None and command.min_subscription_amount < 0:
            return Return.err(negative_minimum(command.min_subscription_amount))

        try:
            current = await self.config_repo.get_by_merchant(command.merchant)
            if not current:
                current = MerchantConfig.default_for(command.merchant)

            if command.min_subscription_amount is not None:
                current.min_subscription_amount = command.min_subscription_amount

            if command.default_interval_seconds is not None:
                current.default_interval_seconds = command.default_interval_seconds

            current.updated_at = utc_now()
            config = await self.config_repo.save(current)
            await self.uow.commit()

            logger.info(
                f"Merchant config updated for {command.merchant} by {command.actor}: "
                f"min={config.min_subscription_amount}, "
                f"default_interval={config.default_interval_seconds}"
            )
            return Return.ok(to_config_dto(config))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code=ErrorCode.INTERNAL_ERROR,
                    message="Failed to update merchant config",
                    reason=str(e),
                )
            )
