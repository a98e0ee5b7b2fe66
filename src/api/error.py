from typing import Optional
from fastapi import status
from libs.result import Error
from src.domain.error_codes import ErrorCode, numeric_code

STATUS_BY_CODE = {
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.UNAUTHORIZED: status.HTTP_403_FORBIDDEN,
    ErrorCode.INSUFFICIENT_ALLOWANCE: status.HTTP_402_PAYMENT_REQUIRED,
    ErrorCode.INSUFFICIENT_BALANCE: status.HTTP_402_PAYMENT_REQUIRED,
    ErrorCode.INSUFFICIENT_PREPAID_BALANCE: status.HTTP_402_PAYMENT_REQUIRED,
    ErrorCode.TRANSFER_FAILED: status.HTTP_402_PAYMENT_REQUIRED,
    ErrorCode.INVALID_STATUS: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_STATUS_TRANSITION: status.HTTP_409_CONFLICT,
    ErrorCode.USAGE_NOT_ENABLED: status.HTTP_409_CONFLICT,
    ErrorCode.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ClientError(Exception):
    """Business error surfaced to an HTTP client"""

    def __init__(self, error: Error, status_code: Optional[int] = None):
        self.error = error
        self.status_code = status_code or STATUS_BY_CODE.get(
            error.code, status.HTTP_400_BAD_REQUEST
        )
        super().__init__(error.message)

    def to_body(self) -> dict:
        code = getattr(self.error.code, "value", self.error.code)
        return {
            "error": {
                "code": code,
                "numeric_code": numeric_code(code),
                "message": self.error.message,
                "reason": self.error.reason,
            }
        }
