import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
import src.domain  # noqa: F401  registers all tables on SQLModel.metadata
from src.adapter.services.event_publisher import LoggingEventPublisher
from src.adapter.services.token_service import InMemoryTokenService
from src.depends import (
    get_session,
    get_token_service,
    get_event_publisher,
    get_clock,
    get_vault_address,
)
from tests.fixtures.vault_data import ManualClock, VAULT


@pytest_asyncio.fixture(scope="function")
async def engine():
    """In-memory SQLite engine shared by every session of one test"""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a new database session for each test"""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
def token_service():
    return InMemoryTokenService()


@pytest_asyncio.fixture
def clock():
    return ManualClock()


@pytest_asyncio.fixture
async def client(session_factory, token_service, clock):
    """Create test client with a fresh session per request and in-memory collaborators"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_token_service] = lambda: token_service
    app.dependency_overrides[get_event_publisher] = lambda: LoggingEventPublisher()
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_vault_address] = lambda: VAULT

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
