"""Closed error taxonomy for vault operations

Use cases report failures with one of these codes. The numeric form is
only exposed at the system boundary (batch charge results, HTTP bodies).
"""

from enum import Enum


class ErrorCode(str, Enum):
    # Validation
    INVALID_AMOUNT = "INVALID_AMOUNT"
    BELOW_MINIMUM_TOPUP = "BELOW_MINIMUM_TOPUP"
    BELOW_MERCHANT_MINIMUM = "BELOW_MERCHANT_MINIMUM"
    INVALID_RECOVERY_AMOUNT = "INVALID_RECOVERY_AMOUNT"
    # Authorization
    UNAUTHORIZED = "UNAUTHORIZED"
    # Lookup
    NOT_FOUND = "NOT_FOUND"
    # State
    INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"
    INVALID_STATUS = "INVALID_STATUS"
    USAGE_NOT_ENABLED = "USAGE_NOT_ENABLED"
    REPLAY = "REPLAY"
    # Funds
    INSUFFICIENT_ALLOWANCE = "INSUFFICIENT_ALLOWANCE"
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
    INSUFFICIENT_PREPAID_BALANCE = "INSUFFICIENT_PREPAID_BALANCE"
    TRANSFER_FAILED = "TRANSFER_FAILED"
    # Arithmetic
    ARITHMETIC_OVERFLOW = "ARITHMETIC_OVERFLOW"
    # Infrastructure (storage or other unexpected failure)
    INTERNAL_ERROR = "INTERNAL_ERROR"

    @property
    def numeric(self) -> int:
        return NUMERIC_CODES[self]


NUMERIC_CODES = {
    ErrorCode.INVALID_STATUS_TRANSITION: 400,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.BELOW_MINIMUM_TOPUP: 402,
    ErrorCode.INVALID_AMOUNT: 403,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.INSUFFICIENT_ALLOWANCE: 405,
    ErrorCode.TRANSFER_FAILED: 406,
    ErrorCode.INSUFFICIENT_BALANCE: 407,
    ErrorCode.INVALID_STATUS: 408,
    ErrorCode.ARITHMETIC_OVERFLOW: 409,
    ErrorCode.BELOW_MERCHANT_MINIMUM: 410,
    ErrorCode.INTERNAL_ERROR: 500,
    ErrorCode.REPLAY: 1007,
    ErrorCode.INVALID_RECOVERY_AMOUNT: 1008,
    ErrorCode.USAGE_NOT_ENABLED: 1009,
    ErrorCode.INSUFFICIENT_PREPAID_BALANCE: 1010,
}


def numeric_code(code: str) -> int:
    """Numeric code for a string error code (unknown codes map to INTERNAL_ERROR)"""
    try:
        return ErrorCode(code).numeric
    except ValueError:
        return ErrorCode.INTERNAL_ERROR.numeric
