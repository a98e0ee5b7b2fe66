from .subscription_repository import SqlAlchemySubscriptionRepository
from .merchant_config_repository import SqlAlchemyMerchantConfigRepository
from .merchant_balance_repository import SqlAlchemyMerchantBalanceRepository
from .vault_settings_repository import SqlAlchemyVaultSettingsRepository
from .recovery_record_repository import SqlAlchemyRecoveryRecordRepository

__all__ = [
    "SqlAlchemySubscriptionRepository",
    "SqlAlchemyMerchantConfigRepository",
    "SqlAlchemyMerchantBalanceRepository",
    "SqlAlchemyVaultSettingsRepository",
    "SqlAlchemyRecoveryRecordRepository",
]
