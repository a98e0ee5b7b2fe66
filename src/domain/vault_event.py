"""Vault lifecycle events

Emitted best-effort after a successful operation for external indexers.
Not persisted.
"""

from enum import Enum
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class VaultEventType(str, Enum):
    SUBSCRIPTION_CREATED = "subscription_created"
    FUNDS_DEPOSITED = "funds_deposited"
    SUBSCRIPTION_CHARGED = "subscription_charged"
    USAGE_CHARGED = "usage_charged"
    SUBSCRIPTION_PAUSED = "subscription_paused"
    SUBSCRIPTION_RESUMED = "subscription_resumed"
    SUBSCRIPTION_CANCELLED = "subscription_cancelled"
    MERCHANT_WITHDRAWAL = "merchant_withdrawal"
    FUNDS_RECOVERED = "funds_recovered"


class VaultEvent(BaseModel):
    event_type: VaultEventType
    subscription_id: Optional[int] = None
    timestamp: int = Field(..., description="Clock timestamp of the operation")
    data: Dict[str, Any] = Field(default_factory=dict)
