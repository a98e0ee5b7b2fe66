"""Merchant Config Domain Entity

Per-merchant billing policy applied when subscriptions are created.
"""

from datetime import datetime
from sqlmodel import Field, Column
from sqlalchemy import CheckConstraint, Integer, String
from src.domain.base import BaseModel, Int128, UInt64, UtcDateTime, utc_now

MERCHANT_CONFIG_VERSION = 1


class MerchantConfig(BaseModel, table=True):
    """
    Merchant Config - Billing policy for one merchant

    Domain Rules:
    - One config per merchant (merchant is the primary key)
    - min_subscription_amount >= 0 (0 = no merchant minimum)
    - default_interval_seconds replaces a requested interval of 0 (0 = no default)
    - Missing configs behave as the zero default (see MerchantConfig.default_for)
    """

    __tablename__ = "merchant_configs"
    __table_args__ = (
        CheckConstraint('min_subscription_amount >= 0', name='min_subscription_amount_non_negative'),
    )

    merchant: str = Field(
        sa_column=Column(String(255), primary_key=True),
        description="Merchant principal"
    )

    version: int = Field(
        default=MERCHANT_CONFIG_VERSION,
        sa_column=Column(Integer, nullable=False, default=MERCHANT_CONFIG_VERSION),
        description="Config schema version"
    )

    min_subscription_amount: int = Field(
        default=0,
        sa_column=Column(Int128(), nullable=False, default=0),
        description="Minimum recurring amount accepted for this merchant"
    )

    default_interval_seconds: int = Field(
        default=0,
        sa_column=Column(UInt64(), nullable=False, default=0),
        description="Interval substituted when a subscription requests interval 0"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_type=UtcDateTime(),
        description="Last update timestamp"
    )

    @classmethod
    def default_for(cls, merchant: str) -> "MerchantConfig":
        """Config used for merchants that never stored one"""
        return cls(
            merchant=merchant,
            version=MERCHANT_CONFIG_VERSION,
            min_subscription_amount=0,
            default_interval_seconds=0,
        )
