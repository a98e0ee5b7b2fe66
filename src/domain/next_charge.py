"""Next charge computation

Pure function of a subscription snapshot; never touches storage.
"""

from pydantic import BaseModel, Field
from src.domain.amounts import saturating_add_u64
from src.domain.subscription import Subscription, SubscriptionStatus

# INSUFFICIENT_BALANCE subscriptions are still due: they are retried once funded.
CHARGE_EXPECTED_STATUSES = frozenset({
    SubscriptionStatus.ACTIVE,
    SubscriptionStatus.INSUFFICIENT_BALANCE,
})


class NextChargeInfo(BaseModel):
    next_charge_timestamp: int = Field(
        ...,
        description="last_payment_timestamp + interval_seconds, saturated at 2**64 - 1"
    )
    is_charge_expected: bool = Field(
        ...,
        description="True for active and insufficient_balance subscriptions"
    )


def compute_next_charge(subscription: Subscription) -> NextChargeInfo:
    return NextChargeInfo(
        next_charge_timestamp=saturating_add_u64(
            subscription.last_payment_timestamp, subscription.interval_seconds
        ),
        is_charge_expected=subscription.status in CHARGE_EXPECTED_STATUSES,
    )
