"""Authorization Service Implementations"""

import logging
from typing import Optional
from src.app.services.authorization_service import AuthorizationService, AuthorizationError

logger = logging.getLogger(__name__)


class CallerAuthorizationService(AuthorizationService):
    """
    Grants consent only for the authenticated caller's own principal

    The caller is established upstream (API gateway / request header);
    a request without a caller is never authorized.
    """

    def __init__(self, caller: Optional[str]):
        self.caller = caller

    async def require_authorized(self, principal: str) -> None:
        if not self.caller:
            raise AuthorizationError(principal, "no authenticated caller")
        if self.caller != principal:
            raise AuthorizationError(principal, f"caller {self.caller} cannot act as")


class AllowAllAuthorizationService(AuthorizationService):
    """
    Grants every request

    Only for local development with AUTH_DISABLED.
    """

    async def require_authorized(self, principal: str) -> None:
        logger.debug(f"Authorization disabled, granting {principal}")
