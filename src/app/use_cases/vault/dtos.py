"""Data Transfer Objects for Vault Use Cases

Pydantic models for command inputs and response outputs. Amounts are
token base units (signed 128-bit), timestamps and intervals are seconds
(unsigned 64-bit). Sign and minimum checks are business rules enforced
by the use cases, not here.
"""

from typing import List, Optional
from pydantic import BaseModel, Field
from src.domain.amounts import I128_MAX, I128_MIN, U64_MAX
from src.domain.recovery_record import RecoveryReason
from src.domain.subscription import Subscription, SubscriptionStatus


def amount_field(description: str, default=...):
    return Field(default, ge=I128_MIN, le=I128_MAX, description=description)


# ---------------------------------------------------------------------------
# Vault settings
# ---------------------------------------------------------------------------

class InitVaultCommandDTO(BaseModel):
    token: str = Field(..., min_length=1, description="Address of the token held in custody")
    admin: str = Field(..., min_length=1, description="Admin principal")
    min_topup: int = amount_field("Minimum deposit_funds amount (must be > 0)")

    class Config:
        json_schema_extra = {
            "example": {
                "token": "token_usdc",
                "admin": "admin_ops",
                "min_topup": 1000000,
            }
        }


class SetMinTopupCommandDTO(BaseModel):
    admin: str = Field(..., min_length=1, description="Admin principal")
    min_topup: int = amount_field("New minimum deposit_funds amount (must be > 0)")


class VaultSettingsResponseDTO(BaseModel):
    token: str
    admin: str
    min_topup: int


class MinTopupResponseDTO(BaseModel):
    min_topup: int


# ---------------------------------------------------------------------------
# Merchant config
# ---------------------------------------------------------------------------

class SetMerchantConfigCommandDTO(BaseModel):
    """Overwrites the whole merchant config"""

    actor: str = Field(..., min_length=1, description="Merchant or admin making the change")
    merchant: str = Field(..., min_length=1, description="Merchant principal")
    min_subscription_amount: int = amount_field("Minimum subscription amount (0 = none)")
    default_interval_seconds: int = Field(
        ..., ge=0, le=U64_MAX, description="Default interval (0 = none)"
    )


class UpdateMerchantConfigCommandDTO(BaseModel):
    """Fields left as None keep their stored value"""

    actor: str = Field(..., min_length=1, description="Merchant or admin making the change")
    merchant: str = Field(..., min_length=1, description="Merchant principal")
    min_subscription_amount: Optional[int] = amount_field(
        "Minimum subscription amount (0 = none)", default=None
    )
    default_interval_seconds: Optional[int] = Field(
        default=None, ge=0, le=U64_MAX, description="Default interval (0 = none)"
    )


class MerchantConfigResponseDTO(BaseModel):
    merchant: str
    version: int
    min_subscription_amount: int
    default_interval_seconds: int


# ---------------------------------------------------------------------------
# Subscriptions
# ---------------------------------------------------------------------------

class CreateSubscriptionCommandDTO(BaseModel):
    subscriber: str = Field(..., min_length=1, description="Principal funding the subscription")
    merchant: str = Field(..., min_length=1, description="Principal receiving the charges")
    amount: int = amount_field("Recurring charge and initial deposit (must be > 0)")
    interval_seconds: int = Field(
        ..., ge=0, le=U64_MAX, description="Billing interval (0 = merchant default)"
    )
    usage_enabled: bool = Field(default=False, description="Allow usage-based charges")

    class Config:
        json_schema_extra = {
            "example": {
                "subscriber": "subscriber_alice",
                "merchant": "merchant_acme",
                "amount": 10000000,
                "interval_seconds": 2592000,
                "usage_enabled": False,
            }
        }


class DepositFundsCommandDTO(BaseModel):
    subscription_id: int = Field(..., ge=0)
    subscriber: str = Field(..., min_length=1)
    amount: int = amount_field("Deposit amount (must be > 0 and >= min top-up)")


class ChangeStatusCommandDTO(BaseModel):
    subscription_id: int = Field(..., ge=0)
    authorizer: str = Field(..., min_length=1, description="Subscriber or merchant of the subscription")


class SubscriptionResponseDTO(BaseModel):
    id: int
    subscriber: str
    merchant: str
    amount: int
    interval_seconds: int
    last_payment_timestamp: int
    status: SubscriptionStatus
    prepaid_balance: int
    usage_enabled: bool

    @classmethod
    def from_entity(cls, subscription: Subscription) -> "SubscriptionResponseDTO":
        return cls(
            id=subscription.id,
            subscriber=subscription.subscriber,
            merchant=subscription.merchant,
            amount=subscription.amount,
            interval_seconds=subscription.interval_seconds,
            last_payment_timestamp=subscription.last_payment_timestamp,
            status=subscription.status,
            prepaid_balance=subscription.prepaid_balance,
            usage_enabled=subscription.usage_enabled,
        )


class SubscriptionIdResponseDTO(BaseModel):
    subscription_id: int


class MerchantSubscriptionsResponseDTO(BaseModel):
    merchant: str
    subscription_ids: List[int]


# ---------------------------------------------------------------------------
# Charging
# ---------------------------------------------------------------------------

class ChargeResponseDTO(BaseModel):
    """Outcome of a periodic or usage charge"""

    subscription_id: int
    merchant: str
    amount: int
    prepaid_balance_before: int
    prepaid_balance_after: int
    merchant_balance_after: int
    status: SubscriptionStatus
    charged_at: int


class UsageChargeCommandDTO(BaseModel):
    subscription_id: int = Field(..., ge=0)
    merchant: str = Field(..., min_length=1, description="Merchant reporting the usage")
    amount: int = amount_field("Usage amount to draw from the prepaid balance (must be > 0)")


class BatchChargeCommandDTO(BaseModel):
    subscription_ids: List[int] = Field(..., description="Subscriptions to charge, in order")


class BatchChargeResultDTO(BaseModel):
    subscription_id: int
    success: bool
    error_code: int = Field(default=0, description="Numeric error code, 0 on success")


class BatchChargeResponseDTO(BaseModel):
    results: List[BatchChargeResultDTO]
    total: int
    succeeded: int
    failed: int


# ---------------------------------------------------------------------------
# Merchant balance
# ---------------------------------------------------------------------------

class WithdrawCommandDTO(BaseModel):
    merchant: str = Field(..., min_length=1)
    amount: int = amount_field("Amount to withdraw (must be > 0)")


class MerchantBalanceResponseDTO(BaseModel):
    merchant: str
    balance: int


class WithdrawalResponseDTO(BaseModel):
    merchant: str
    amount: int
    balance_before: int
    balance_after: int


# ---------------------------------------------------------------------------
# Recovery
# ---------------------------------------------------------------------------

class RecoverFundsCommandDTO(BaseModel):
    admin: str = Field(..., min_length=1)
    recipient: str = Field(..., min_length=1)
    amount: int = amount_field("Amount to recover (must be > 0)")
    reason: RecoveryReason

    class Config:
        json_schema_extra = {
            "example": {
                "admin": "admin_ops",
                "recipient": "wallet_bob",
                "amount": 5000000,
                "reason": "accidental_transfer",
            }
        }


class RecoveryRecordResponseDTO(BaseModel):
    id: int
    admin: str
    recipient: str
    amount: int
    reason: RecoveryReason
    timestamp: int


# ---------------------------------------------------------------------------
# Billing sweep
# ---------------------------------------------------------------------------

class BillingSweepResultDTO(BaseModel):
    total_active: int
    due: int
    charged: int
    failed: int
    swept_at: int
    execution_time_ms: int
