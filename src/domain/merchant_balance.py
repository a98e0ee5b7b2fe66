"""Merchant Balance Domain Entity

Aggregate value earned by a merchant and held in vault custody until
withdrawn.
"""

from datetime import datetime
from sqlmodel import Field, Column
from sqlalchemy import CheckConstraint, String
from src.domain.base import BaseModel, Int128, UtcDateTime, utc_now


class MerchantBalance(BaseModel, table=True):
    """
    Merchant Balance - Earned but not yet withdrawn value

    Domain Rules:
    - One row per merchant, created on first credit
    - balance >= 0
    - Credited only by charges, debited only by withdrawals
    """

    __tablename__ = "merchant_balances"
    __table_args__ = (
        CheckConstraint('balance >= 0', name='merchant_balance_non_negative'),
    )

    merchant: str = Field(
        sa_column=Column(String(255), primary_key=True),
        description="Merchant principal"
    )

    balance: int = Field(
        default=0,
        sa_column=Column(Int128(), nullable=False, default=0),
        description="Withdrawable balance in token base units"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_type=UtcDateTime(),
        description="Last balance update timestamp"
    )
