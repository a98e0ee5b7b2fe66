"""Unit tests for CreateSubscription use case

Tests cover:
- Successful creation with initial deposit
- Merchant minimum and default interval
- Authorization and funding checks
- Transfer failure leaves no subscription behind
- Failures after the pull refund the subscriber
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.services.token_service import TokenTransferError
from src.app.use_cases.vault import CreateSubscription, CreateSubscriptionCommandDTO
from src.domain.error_codes import ErrorCode
from src.domain.merchant_config import MerchantConfig
from src.domain.subscription import SubscriptionStatus
from src.domain.vault_event import VaultEventType
from tests.fixtures.vault_data import MERCHANT, MONTH, NOW, SUBSCRIBER, TOKEN, VAULT


@pytest.fixture
def mock_subscription_repo():
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=lambda s: s)
    return repo


@pytest.fixture
def mock_config_repo():
    repo = MagicMock()
    repo.get_by_merchant = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def create_use_case(
    mock_uow, mock_subscription_repo, mock_config_repo, mock_settings_repo,
    allow_all_auth, mock_token_service, mock_event_publisher, fixed_clock,
):
    return CreateSubscription(
        uow=mock_uow,
        subscription_repo=mock_subscription_repo,
        config_repo=mock_config_repo,
        settings_repo=mock_settings_repo,
        auth=allow_all_auth,
        token_service=mock_token_service,
        event_publisher=mock_event_publisher,
        clock=fixed_clock,
        vault_address=VAULT,
    )


def command(amount=10_000000, interval=MONTH, usage_enabled=False):
    return CreateSubscriptionCommandDTO(
        subscriber=SUBSCRIBER,
        merchant=MERCHANT,
        amount=amount,
        interval_seconds=interval,
        usage_enabled=usage_enabled,
    )


@pytest.mark.asyncio
class TestCreateSubscriptionSuccess:

    async def test_creates_active_subscription_with_initial_deposit(
        self, create_use_case, mock_subscription_repo, mock_token_service, mock_uow, vault_settings
    ):
        """
        Given: Initialized vault, subscriber with allowance and balance
        When: A subscription for 10_000000 every 30 days is created
        Then: Id 0 assigned, amount pulled into custody, prepaid = amount
        """
        result = await create_use_case.execute(command())

        assert result.is_ok()
        assert result.value.subscription_id == 0

        subscription = mock_subscription_repo.create.call_args[0][0]
        assert subscription.id == 0
        assert subscription.status == SubscriptionStatus.ACTIVE
        assert subscription.prepaid_balance == 10_000000
        assert subscription.interval_seconds == MONTH
        assert subscription.last_payment_timestamp == NOW
        assert vault_settings.next_subscription_id == 1

        mock_token_service.transfer_from.assert_called_once_with(
            TOKEN, spender=VAULT, from_=SUBSCRIBER, to=VAULT, amount=10_000000
        )
        mock_uow.commit.assert_called_once()

    async def test_ids_increase(self, create_use_case, vault_settings):
        first = await create_use_case.execute(command())
        second = await create_use_case.execute(command())

        assert first.value.subscription_id == 0
        assert second.value.subscription_id == 1
        assert vault_settings.next_subscription_id == 2

    async def test_publishes_created_event(self, create_use_case, mock_event_publisher):
        await create_use_case.execute(command())

        event = mock_event_publisher.publish.call_args[0][0]
        assert event.event_type == VaultEventType.SUBSCRIPTION_CREATED
        assert event.subscription_id == 0
        assert event.data["amount"] == 10_000000

    async def test_zero_interval_uses_merchant_default(
        self, create_use_case, mock_config_repo, mock_subscription_repo
    ):
        mock_config_repo.get_by_merchant = AsyncMock(
            return_value=MerchantConfig(merchant=MERCHANT, default_interval_seconds=604_800)
        )

        result = await create_use_case.execute(command(interval=0))

        assert result.is_ok()
        assert mock_subscription_repo.create.call_args[0][0].interval_seconds == 604_800

    async def test_usage_flag_is_stored(self, create_use_case, mock_subscription_repo):
        await create_use_case.execute(command(usage_enabled=True))

        assert mock_subscription_repo.create.call_args[0][0].usage_enabled is True


@pytest.mark.asyncio
class TestCreateSubscriptionValidation:

    @pytest.mark.parametrize("amount", [0, -10])
    async def test_non_positive_amount(self, create_use_case, mock_token_service, amount):
        result = await create_use_case.execute(command(amount=amount))

        assert result.is_err()
        assert result.error.code == ErrorCode.INVALID_AMOUNT
        mock_token_service.transfer_from.assert_not_called()

    async def test_below_merchant_minimum(self, create_use_case, mock_config_repo):
        mock_config_repo.get_by_merchant = AsyncMock(
            return_value=MerchantConfig(merchant=MERCHANT, min_subscription_amount=5_000000)
        )

        below = await create_use_case.execute(command(amount=4_999999))
        at_minimum = await create_use_case.execute(command(amount=5_000000))

        assert below.error.code == ErrorCode.BELOW_MERCHANT_MINIMUM
        assert at_minimum.is_ok()

    async def test_zero_interval_without_default(self, create_use_case):
        result = await create_use_case.execute(command(interval=0))

        assert result.is_err()
        assert result.error.code == ErrorCode.INVALID_AMOUNT

    async def test_subscriber_must_authorize(
        self, create_use_case, deny_all_auth, mock_subscription_repo
    ):
        create_use_case.auth = deny_all_auth

        result = await create_use_case.execute(command())

        assert result.error.code == ErrorCode.UNAUTHORIZED
        mock_subscription_repo.create.assert_not_called()

    async def test_uninitialized_vault(self, create_use_case, mock_settings_repo):
        mock_settings_repo.get = AsyncMock(return_value=None)

        result = await create_use_case.execute(command())

        assert result.error.code == ErrorCode.NOT_FOUND


@pytest.mark.asyncio
class TestCreateSubscriptionFunding:

    async def test_insufficient_allowance(
        self, create_use_case, mock_token_service, mock_subscription_repo, vault_settings
    ):
        mock_token_service.allowance = AsyncMock(return_value=9_999999)

        result = await create_use_case.execute(command())

        assert result.error.code == ErrorCode.INSUFFICIENT_ALLOWANCE
        mock_token_service.transfer_from.assert_not_called()
        mock_subscription_repo.create.assert_not_called()
        assert vault_settings.next_subscription_id == 0

    async def test_insufficient_token_balance(self, create_use_case, mock_token_service):
        mock_token_service.balance = AsyncMock(return_value=1)

        result = await create_use_case.execute(command())

        assert result.error.code == ErrorCode.TRANSFER_FAILED
        mock_token_service.transfer_from.assert_not_called()

    async def test_transfer_failure(
        self, create_use_case, mock_token_service, mock_uow, mock_event_publisher
    ):
        mock_token_service.transfer_from = AsyncMock(side_effect=TokenTransferError("rejected"))

        result = await create_use_case.execute(command())

        assert result.error.code == ErrorCode.TRANSFER_FAILED
        mock_token_service.transfer.assert_not_called()
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()
        mock_event_publisher.publish.assert_not_called()


@pytest.mark.asyncio
class TestCreateSubscriptionCompensation:

    async def test_write_failure_moves_no_funds(
        self, create_use_case, mock_subscription_repo, mock_token_service, mock_uow
    ):
        """
        Given the subscription write fails
        When a subscription is created
        Then nothing is pulled from the subscriber and INTERNAL_ERROR is returned
        """
        mock_subscription_repo.create = AsyncMock(side_effect=Exception("disk full"))

        result = await create_use_case.execute(command())

        assert result.error.code == ErrorCode.INTERNAL_ERROR
        mock_token_service.transfer_from.assert_not_called()
        mock_token_service.transfer.assert_not_called()
        mock_uow.rollback.assert_called_once()

    async def test_commit_failure_refunds_pulled_amount(
        self, create_use_case, mock_token_service, mock_uow, mock_event_publisher
    ):
        """
        Given the commit fails after the initial deposit was pulled
        When a subscription is created
        Then the pulled amount is sent back to the subscriber
        """
        mock_uow.commit = AsyncMock(side_effect=Exception("connection lost"))

        result = await create_use_case.execute(command(amount=10_000000))

        assert result.error.code == ErrorCode.INTERNAL_ERROR
        mock_token_service.transfer_from.assert_called_once()
        mock_token_service.transfer.assert_called_once_with(
            TOKEN, from_=VAULT, to=SUBSCRIBER, amount=10_000000
        )
        mock_uow.rollback.assert_called_once()
        mock_event_publisher.publish.assert_not_called()

    async def test_failed_refund_still_reports_internal_error(
        self, create_use_case, mock_token_service, mock_uow
    ):
        mock_uow.commit = AsyncMock(side_effect=Exception("connection lost"))
        mock_token_service.transfer = AsyncMock(side_effect=TokenTransferError("paused"))

        result = await create_use_case.execute(command())

        assert result.error.code == ErrorCode.INTERNAL_ERROR
        mock_token_service.transfer.assert_called_once()
