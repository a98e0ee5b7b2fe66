import pytest
from unittest.mock import AsyncMock, MagicMock
from src.domain.subscription import Subscription, SubscriptionStatus
from src.domain.vault_settings import VaultSettings
from tests.fixtures.auth import StubAuthorizationService
from tests.fixtures.vault_data import ADMIN, MERCHANT, MONTH, NOW, SUBSCRIBER, TOKEN


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def allow_all_auth():
    """Authorization service that grants every principal"""
    auth = MagicMock()
    auth.require_authorized = AsyncMock(return_value=None)
    return auth


@pytest.fixture
def deny_all_auth():
    return StubAuthorizationService()


@pytest.fixture
def auth_for():
    """Factory: authorization service granting only the given principals"""
    return StubAuthorizationService


@pytest.fixture
def mock_token_service():
    """Token service with ample allowance and balance"""
    service = MagicMock()
    service.allowance = AsyncMock(return_value=10 ** 18)
    service.balance = AsyncMock(return_value=10 ** 18)
    service.transfer = AsyncMock(return_value=None)
    service.transfer_from = AsyncMock(return_value=None)
    return service


@pytest.fixture
def mock_event_publisher():
    publisher = MagicMock()
    publisher.publish = AsyncMock(return_value=True)
    return publisher


@pytest.fixture
def fixed_clock():
    clock = MagicMock()
    clock.now = MagicMock(return_value=NOW)
    return clock


@pytest.fixture
def vault_settings():
    return VaultSettings(token=TOKEN, admin=ADMIN, min_topup=1_000000, next_subscription_id=0)


@pytest.fixture
def mock_settings_repo(vault_settings):
    repo = MagicMock()
    repo.get = AsyncMock(return_value=vault_settings)
    repo.save = AsyncMock(side_effect=lambda s: s)
    return repo


@pytest.fixture
def make_subscription():
    """Factory for subscriptions with sensible defaults"""

    def _make(**overrides):
        values = dict(
            id=0,
            subscriber=SUBSCRIBER,
            merchant=MERCHANT,
            amount=10_000000,
            interval_seconds=MONTH,
            last_payment_timestamp=NOW - MONTH,
            status=SubscriptionStatus.ACTIVE,
            prepaid_balance=10_000000,
            usage_enabled=False,
        )
        values.update(overrides)
        return Subscription(**values)

    return _make
