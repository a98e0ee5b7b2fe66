"""Subscription status state machine

Allowed transitions:

    ACTIVE               -> PAUSED, CANCELLED, INSUFFICIENT_BALANCE
    PAUSED               -> ACTIVE, CANCELLED
    INSUFFICIENT_BALANCE -> ACTIVE, CANCELLED
    CANCELLED            -> (terminal)

A transition to the current status is always allowed and is a no-op.
INSUFFICIENT_BALANCE cannot go to PAUSED: a subscription short on funds
must be resumed to ACTIVE so the next charge is attempted again.
"""

from typing import Dict, FrozenSet
from libs.result import Result, Return, Error
from src.domain.error_codes import ErrorCode
from src.domain.subscription import SubscriptionStatus

ALLOWED_TRANSITIONS: Dict[SubscriptionStatus, FrozenSet[SubscriptionStatus]] = {
    SubscriptionStatus.ACTIVE: frozenset({
        SubscriptionStatus.PAUSED,
        SubscriptionStatus.CANCELLED,
        SubscriptionStatus.INSUFFICIENT_BALANCE,
    }),
    SubscriptionStatus.PAUSED: frozenset({
        SubscriptionStatus.ACTIVE,
        SubscriptionStatus.CANCELLED,
    }),
    SubscriptionStatus.CANCELLED: frozenset(),
    SubscriptionStatus.INSUFFICIENT_BALANCE: frozenset({
        SubscriptionStatus.ACTIVE,
        SubscriptionStatus.CANCELLED,
    }),
}


def allowed_targets(from_status: SubscriptionStatus) -> FrozenSet[SubscriptionStatus]:
    """Statuses reachable from from_status, excluding the self-transition"""
    return ALLOWED_TRANSITIONS[from_status]


def can_transition(from_status: SubscriptionStatus, to_status: SubscriptionStatus) -> bool:
    if from_status == to_status:
        return True
    return to_status in ALLOWED_TRANSITIONS[from_status]


def validate_transition(
    from_status: SubscriptionStatus, to_status: SubscriptionStatus
) -> Result[SubscriptionStatus]:
    """
    Validate a status change

    Returns:
        Result[SubscriptionStatus]: the target status, or INVALID_STATUS_TRANSITION
    """
    if can_transition(from_status, to_status):
        return Return.ok(to_status)

    return Return.err(
        Error(
            code=ErrorCode.INVALID_STATUS_TRANSITION,
            message=f"Cannot transition subscription from {from_status.value} to {to_status.value}",
            reason=f"allowed={sorted(s.value for s in allowed_targets(from_status))}",
        )
    )
