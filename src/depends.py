from functools import lru_cache
from typing import Optional
from fastapi import Header
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.adapter.services.authorization_service import (
    AllowAllAuthorizationService,
    CallerAuthorizationService,
)
from src.adapter.services.token_service import HttpTokenService, InMemoryTokenService
from src.adapter.services.event_publisher import create_event_publisher
from src.adapter.services.clock import SystemClock
from src.app.services.authorization_service import AuthorizationService
from src.app.services.clock import Clock
from src.app.services.event_publisher import EventPublisher
from src.app.services.token_service import TokenService

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


@lru_cache
def get_token_service() -> TokenService:
    if ApplicationConfig.TOKEN_SERVICE_URL:
        return HttpTokenService(
            ApplicationConfig.TOKEN_SERVICE_URL,
            timeout=ApplicationConfig.TOKEN_SERVICE_TIMEOUT,
        )
    return InMemoryTokenService()


@lru_cache
def get_event_publisher() -> EventPublisher:
    return create_event_publisher(ApplicationConfig.EVENT_WEBHOOK_URL)


@lru_cache
def get_clock() -> Clock:
    return SystemClock()


def get_vault_address() -> str:
    return ApplicationConfig.VAULT_ADDRESS


def get_authorization_service(
    x_principal: Optional[str] = Header(default=None),
) -> AuthorizationService:
    if ApplicationConfig.AUTH_DISABLED:
        return AllowAllAuthorizationService()
    return CallerAuthorizationService(x_principal)
