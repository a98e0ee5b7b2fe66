"""Recovery Record Domain Entity

Append-only audit trail of admin recoveries of stranded funds.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, String
from src.domain.base import BaseModel, Int128, UInt64, UtcDateTime, utc_now


class RecoveryReason(str, Enum):
    """Documented reason for a recovery (descriptive only)"""
    ACCIDENTAL_TRANSFER = "accidental_transfer"      # Sent to the vault by mistake
    DEPRECATED_FLOW = "deprecated_flow"              # Left behind by retired flows
    UNREACHABLE_SUBSCRIBER = "unreachable_subscriber"  # Cancelled, subscriber unreachable


class RecoveryRecord(BaseModel, table=True):
    """
    Recovery Record - One admin extraction of stranded value

    Domain Rules:
    - Immutable once written
    - amount > 0
    - Repeated identical recoveries produce separate records
    """

    __tablename__ = "recovery_records"
    __table_args__ = (
        Index('ix_recovery_records_recipient', 'recipient'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigInteger, primary_key=True, autoincrement=True),
    )

    admin: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Admin who authorized the recovery"
    )

    recipient: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Principal that received the funds"
    )

    amount: int = Field(
        sa_column=Column(Int128(), nullable=False),
        description="Recovered amount in token base units"
    )

    reason: RecoveryReason = Field(
        description="Documented recovery reason"
    )

    timestamp: int = Field(
        sa_column=Column(UInt64(), nullable=False),
        description="Clock timestamp of the recovery"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_type=UtcDateTime(),
    )
