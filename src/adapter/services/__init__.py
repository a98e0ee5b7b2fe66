from .unit_of_work import SqlAlchemyUnitOfWork
from .authorization_service import CallerAuthorizationService, AllowAllAuthorizationService
from .token_service import HttpTokenService, InMemoryTokenService
from .event_publisher import (
    LoggingEventPublisher,
    WebhookEventPublisher,
    CompositeEventPublisher,
    create_event_publisher,
)
from .clock import SystemClock

__all__ = [
    "SqlAlchemyUnitOfWork",
    "CallerAuthorizationService",
    "AllowAllAuthorizationService",
    "HttpTokenService",
    "InMemoryTokenService",
    "LoggingEventPublisher",
    "WebhookEventPublisher",
    "CompositeEventPublisher",
    "create_event_publisher",
    "SystemClock",
]
