"""Request schemas for the Vault API

Pydantic models for validating incoming HTTP bodies. Identifiers that
appear in the path (merchant, subscription id) are not repeated here.
"""

from typing import List, Optional
from pydantic import BaseModel, Field
from src.domain.amounts import I128_MAX, I128_MIN, U64_MAX
from src.domain.recovery_record import RecoveryReason


def amount_field(description: str, default=...):
    return Field(default, ge=I128_MIN, le=I128_MAX, description=description)


class InitVaultRequestSchema(BaseModel):
    token: str = Field(..., min_length=1, description="Token held in custody")
    admin: str = Field(..., min_length=1, description="Admin principal")
    min_topup: int = amount_field("Minimum deposit amount (must be > 0)")


class SetMinTopupRequestSchema(BaseModel):
    admin: str = Field(..., min_length=1)
    min_topup: int = amount_field("New minimum deposit amount (must be > 0)")


class SetMerchantConfigRequestSchema(BaseModel):
    actor: str = Field(..., min_length=1, description="Merchant or admin making the change")
    min_subscription_amount: int = amount_field("Minimum subscription amount (0 = none)")
    default_interval_seconds: int = Field(..., ge=0, le=U64_MAX)


class UpdateMerchantConfigRequestSchema(BaseModel):
    actor: str = Field(..., min_length=1, description="Merchant or admin making the change")
    min_subscription_amount: Optional[int] = amount_field(
        "Minimum subscription amount (0 = none)", default=None
    )
    default_interval_seconds: Optional[int] = Field(default=None, ge=0, le=U64_MAX)


class WithdrawRequestSchema(BaseModel):
    amount: int = amount_field("Amount to withdraw (must be > 0)")


class CreateSubscriptionRequestSchema(BaseModel):
    subscriber: str = Field(..., min_length=1)
    merchant: str = Field(..., min_length=1)
    amount: int = amount_field("Recurring charge and initial deposit (must be > 0)")
    interval_seconds: int = Field(default=0, ge=0, le=U64_MAX, description="0 = merchant default")
    usage_enabled: bool = False


class DepositRequestSchema(BaseModel):
    subscriber: str = Field(..., min_length=1)
    amount: int = amount_field("Deposit amount (must be > 0 and >= min top-up)")


class UsageChargeRequestSchema(BaseModel):
    merchant: str = Field(..., min_length=1)
    amount: int = amount_field("Usage amount (must be > 0)")


class StatusChangeRequestSchema(BaseModel):
    authorizer: str = Field(..., min_length=1, description="Subscriber or merchant")


class BatchChargeRequestSchema(BaseModel):
    subscription_ids: List[int] = Field(..., description="Subscriptions to charge, in order")


class RecoverFundsRequestSchema(BaseModel):
    admin: str = Field(..., min_length=1)
    recipient: str = Field(..., min_length=1)
    amount: int = amount_field("Amount to recover (must be > 0)")
    reason: RecoveryReason
