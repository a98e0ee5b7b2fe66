from .base import BaseModel
from .error_codes import ErrorCode, numeric_code
from .subscription import Subscription, SubscriptionStatus, MAX_SUBSCRIPTION_ID
from .merchant_config import MerchantConfig
from .merchant_balance import MerchantBalance
from .vault_settings import VaultSettings, VAULT_SETTINGS_ID
from .recovery_record import RecoveryRecord, RecoveryReason
from .next_charge import NextChargeInfo, compute_next_charge
from .vault_event import VaultEvent, VaultEventType

__all__ = [
    "BaseModel",
    "ErrorCode",
    "numeric_code",
    "Subscription",
    "SubscriptionStatus",
    "MAX_SUBSCRIPTION_ID",
    "MerchantConfig",
    "MerchantBalance",
    "VaultSettings",
    "VAULT_SETTINGS_ID",
    "RecoveryRecord",
    "RecoveryReason",
    "NextChargeInfo",
    "compute_next_charge",
    "VaultEvent",
    "VaultEventType",
]
