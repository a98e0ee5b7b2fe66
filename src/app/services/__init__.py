from .unit_of_work import UnitOfWork
from .authorization_service import AuthorizationService, AuthorizationError
from .token_service import TokenService, TokenTransferError
from .event_publisher import EventPublisher
from .clock import Clock

__all__ = [
    "UnitOfWork",
    "AuthorizationService",
    "AuthorizationError",
    "TokenService",
    "TokenTransferError",
    "EventPublisher",
    "Clock",
]
