"""Authorization Service Interface

Decides whether the calling context carries the consent of a principal.
"""

from abc import ABC, abstractmethod


class AuthorizationError(Exception):
    """The caller did not demonstrate the principal's consent"""

    def __init__(self, principal: str, detail: str = "authorization required"):
        self.principal = principal
        self.detail = detail
        super().__init__(f"{detail}: {principal}")


class AuthorizationService(ABC):
    """
    Fails closed: any doubt about the caller raises AuthorizationError
    """

    @abstractmethod
    async def require_authorized(self, principal: str) -> None:
        """
        Require that the current caller acts for principal

        Raises:
            AuthorizationError: if consent is not demonstrated
        """
        pass
