"""Vault Settings Domain Entity

Global vault parameters: the token held in custody, the admin principal,
the minimum top-up and the subscription id counter.
"""

from datetime import datetime
from sqlmodel import Field, Column
from sqlalchemy import BigInteger, Integer, String
from src.domain.base import BaseModel, Int128, UtcDateTime, utc_now

VAULT_SETTINGS_ID = 1


class VaultSettings(BaseModel, table=True):
    """
    Vault Settings - Singleton row written by init

    Domain Rules:
    - Exactly one row (id = VAULT_SETTINGS_ID)
    - min_topup > 0
    - next_subscription_id only increases
    """

    __tablename__ = "vault_settings"

    id: int = Field(
        default=VAULT_SETTINGS_ID,
        sa_column=Column(Integer, primary_key=True, autoincrement=False),
    )

    token: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Address of the token held in custody"
    )

    admin: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Admin principal"
    )

    min_topup: int = Field(
        sa_column=Column(Int128(), nullable=False),
        description="Minimum deposit_funds amount"
    )

    next_subscription_id: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Id assigned to the next created subscription"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_type=UtcDateTime(),
        description="Last update timestamp"
    )
