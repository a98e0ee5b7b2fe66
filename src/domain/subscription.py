"""Subscription Domain Entity

Recurring billing agreement between a subscriber and a merchant, with the
subscriber's escrowed prepaid balance for it.
"""

from datetime import datetime
from enum import Enum
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, CheckConstraint, String
from src.domain.base import BaseModel, Int128, UInt64, UtcDateTime, utc_now

# Subscription ids live in a BIGINT column
MAX_SUBSCRIPTION_ID = 2 ** 63 - 1


class SubscriptionStatus(str, Enum):
    """Subscription lifecycle states"""
    ACTIVE = "active"
    PAUSED = "paused"
    CANCELLED = "cancelled"
    INSUFFICIENT_BALANCE = "insufficient_balance"


class Subscription(BaseModel, table=True):
    """
    Subscription - Recurring charge agreement with escrowed funds

    Domain Rules:
    - id is assigned from the vault's subscription counter (starts at 0, never reused)
    - amount > 0 and interval_seconds > 0 once persisted
    - prepaid_balance >= 0 at all times
    - last_payment_timestamp never decreases
    - status changes only through the transition table (see status_transitions)
    - Subscriptions are never deleted; CANCELLED is terminal
    """

    __tablename__ = "subscriptions"
    __table_args__ = (
        CheckConstraint('prepaid_balance >= 0', name='prepaid_balance_non_negative'),
        Index('ix_subscriptions_merchant', 'merchant'),
        Index('ix_subscriptions_subscriber', 'subscriber'),
        Index('ix_subscriptions_status', 'status'),
        Index('ix_subscriptions_due', 'status', 'next_charge_timestamp'),
    )

    id: int = Field(
        sa_column=Column(BigInteger, primary_key=True, autoincrement=False),
        description="Subscription identifier assigned from the vault counter"
    )

    subscriber: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Principal that owns and funds this subscription"
    )

    merchant: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Principal that earns the periodic charges"
    )

    amount: int = Field(
        sa_column=Column(Int128(), nullable=False),
        description="Recurring charge per interval, in token base units"
    )

    interval_seconds: int = Field(
        sa_column=Column(UInt64(), nullable=False),
        description="Billing interval in seconds"
    )

    last_payment_timestamp: int = Field(
        sa_column=Column(UInt64(), nullable=False),
        description="Clock timestamp of the last successful payment event"
    )

    next_charge_timestamp: int = Field(
        default=0,
        sa_column=Column(UInt64(), nullable=False),
        description="Saturated last_payment_timestamp + interval_seconds, refreshed on every write"
    )

    status: SubscriptionStatus = Field(
        default=SubscriptionStatus.ACTIVE,
        description="Current lifecycle state"
    )

    prepaid_balance: int = Field(
        sa_column=Column(Int128(), nullable=False, default=0),
        description="Subscriber funds held in the vault for this subscription"
    )

    usage_enabled: bool = Field(
        default=False,
        description="Whether usage-based add-on charges are allowed"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_type=UtcDateTime(),
        description="Subscription creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_type=UtcDateTime(),
        description="Last update timestamp"
    )
