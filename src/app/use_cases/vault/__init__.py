"""Subscription vault use cases"""
from .init_vault import InitVault
from .set_min_topup import SetMinTopup
from .get_min_topup import GetMinTopup
from .set_merchant_config import SetMerchantConfig, UpdateMerchantConfig
from .get_merchant_config import GetMerchantConfig
from .create_subscription import CreateSubscription
from .deposit_funds import DepositFunds
from .change_subscription_status import (
    ChangeSubscriptionStatus,
    PauseSubscription,
    ResumeSubscription,
    CancelSubscription,
)
from .charge_subscription import ChargeSubscription
from .charge_usage import ChargeUsage
from .batch_charge import BatchCharge
from .withdraw_merchant_funds import WithdrawMerchantFunds
from .get_merchant_balance import GetMerchantBalance
from .get_subscription import GetSubscription, GetNextChargeInfo, ListMerchantSubscriptions
from .recover_stranded_funds import RecoverStrandedFunds, ListRecoveryRecords
from .dtos import (
    InitVaultCommandDTO,
    SetMinTopupCommandDTO,
    VaultSettingsResponseDTO,
    MinTopupResponseDTO,
    SetMerchantConfigCommandDTO,
    UpdateMerchantConfigCommandDTO,
    MerchantConfigResponseDTO,
    CreateSubscriptionCommandDTO,
    DepositFundsCommandDTO,
    ChangeStatusCommandDTO,
    SubscriptionResponseDTO,
    SubscriptionIdResponseDTO,
    MerchantSubscriptionsResponseDTO,
    ChargeResponseDTO,
    UsageChargeCommandDTO,
    BatchChargeCommandDTO,
    BatchChargeResultDTO,
    BatchChargeResponseDTO,
    WithdrawCommandDTO,
    MerchantBalanceResponseDTO,
    WithdrawalResponseDTO,
    RecoverFundsCommandDTO,
    RecoveryRecordResponseDTO,
    BillingSweepResultDTO,
)

__all__ = [
    "InitVault",
    "SetMinTopup",
    "GetMinTopup",
    "SetMerchantConfig",
    "UpdateMerchantConfig",
    "GetMerchantConfig",
    "CreateSubscription",
    "DepositFunds",
    "ChangeSubscriptionStatus",
    "PauseSubscription",
    "ResumeSubscription",
    "CancelSubscription",
    "ChargeSubscription",
    "ChargeUsage",
    "BatchCharge",
    "WithdrawMerchantFunds",
    "GetMerchantBalance",
    "GetSubscription",
    "GetNextChargeInfo",
    "ListMerchantSubscriptions",
    "RecoverStrandedFunds",
    "ListRecoveryRecords",
    "InitVaultCommandDTO",
    "SetMinTopupCommandDTO",
    "VaultSettingsResponseDTO",
    "MinTopupResponseDTO",
    "SetMerchantConfigCommandDTO",
    "UpdateMerchantConfigCommandDTO",
    "MerchantConfigResponseDTO",
    "CreateSubscriptionCommandDTO",
    "DepositFundsCommandDTO",
    "ChangeStatusCommandDTO",
    "SubscriptionResponseDTO",
    "SubscriptionIdResponseDTO",
    "MerchantSubscriptionsResponseDTO",
    "ChargeResponseDTO",
    "UsageChargeCommandDTO",
    "BatchChargeCommandDTO",
    "BatchChargeResultDTO",
    "BatchChargeResponseDTO",
    "WithdrawCommandDTO",
    "MerchantBalanceResponseDTO",
    "WithdrawalResponseDTO",
    "RecoverFundsCommandDTO",
    "RecoveryRecordResponseDTO",
    "BillingSweepResultDTO",
]
