"""Unit tests for ChargeUsage use case"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.vault import ChargeUsage, UsageChargeCommandDTO
from src.domain.error_codes import ErrorCode
from src.domain.merchant_balance import MerchantBalance
from src.domain.subscription import SubscriptionStatus
from src.domain.vault_event import VaultEventType
from tests.fixtures.vault_data import MERCHANT


@pytest.fixture
def subscription(make_subscription):
    return make_subscription(usage_enabled=True, prepaid_balance=3_000000)


@pytest.fixture
def mock_subscription_repo(subscription):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=subscription)
    repo.update = AsyncMock(side_effect=lambda s: s)
    return repo


@pytest.fixture
def mock_balance_repo():
    repo = MagicMock()
    repo.get_by_merchant = AsyncMock(return_value=MerchantBalance(merchant=MERCHANT, balance=100))
    repo.set_balance = AsyncMock()
    return repo


@pytest.fixture
def usage_use_case(
    mock_uow, mock_subscription_repo, mock_balance_repo, allow_all_auth, mock_event_publisher, fixed_clock
):
    return ChargeUsage(
        uow=mock_uow,
        subscription_repo=mock_subscription_repo,
        balance_repo=mock_balance_repo,
        auth=allow_all_auth,
        event_publisher=mock_event_publisher,
        clock=fixed_clock,
    )


def usage(amount, merchant=MERCHANT):
    return UsageChargeCommandDTO(subscription_id=0, merchant=merchant, amount=amount)


@pytest.mark.asyncio
class TestChargeUsage:

    async def test_usage_debits_prepaid_and_credits_merchant(
        self, usage_use_case, subscription, mock_balance_repo, mock_event_publisher
    ):
        result = await usage_use_case.execute(usage(1_000000))

        assert result.is_ok()
        assert subscription.prepaid_balance == 2_000000
        assert subscription.status == SubscriptionStatus.ACTIVE
        mock_balance_repo.set_balance.assert_called_once_with(MERCHANT, 1_000100)
        assert mock_event_publisher.publish.call_args[0][0].event_type == VaultEventType.USAGE_CHARGED

    async def test_draining_to_zero_marks_insufficient_balance(self, usage_use_case, subscription):
        result = await usage_use_case.execute(usage(3_000000))

        assert result.is_ok()
        assert result.value.prepaid_balance_after == 0
        assert subscription.status == SubscriptionStatus.INSUFFICIENT_BALANCE

    async def test_usage_above_prepaid(self, usage_use_case, subscription, mock_balance_repo):
        result = await usage_use_case.execute(usage(3_000001))

        assert result.error.code == ErrorCode.INSUFFICIENT_PREPAID_BALANCE
        assert subscription.prepaid_balance == 3_000000
        mock_balance_repo.set_balance.assert_not_called()

    async def test_usage_not_enabled(self, usage_use_case, subscription):
        subscription.usage_enabled = False

        result = await usage_use_case.execute(usage(1))

        assert result.error.code == ErrorCode.USAGE_NOT_ENABLED

    async def test_only_active_subscriptions(self, usage_use_case, subscription):
        subscription.status = SubscriptionStatus.PAUSED

        result = await usage_use_case.execute(usage(1))

        assert result.error.code == ErrorCode.INVALID_STATUS

    async def test_other_merchant_rejected(self, usage_use_case):
        result = await usage_use_case.execute(usage(1, merchant="merchant_other"))

        assert result.error.code == ErrorCode.UNAUTHORIZED

    async def test_non_positive_amount(self, usage_use_case):
        result = await usage_use_case.execute(usage(0))

        assert result.error.code == ErrorCode.INVALID_AMOUNT
