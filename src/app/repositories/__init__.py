from .subscription_repository import SubscriptionRepository
from .merchant_config_repository import MerchantConfigRepository
from .merchant_balance_repository import MerchantBalanceRepository
from .vault_settings_repository import VaultSettingsRepository
from .recovery_record_repository import RecoveryRecordRepository

__all__ = [
    "SubscriptionRepository",
    "MerchantConfigRepository",
    "MerchantBalanceRepository",
    "VaultSettingsRepository",
    "RecoveryRecordRepository",
]
