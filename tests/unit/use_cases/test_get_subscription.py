"""Unit tests for subscription queries"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.vault import (
    GetSubscription,
    GetNextChargeInfo,
    ListMerchantSubscriptions,
)
from src.domain.amounts import U64_MAX
from src.domain.error_codes import ErrorCode
from src.domain.subscription import SubscriptionStatus
from tests.fixtures.vault_data import MERCHANT, NOW


@pytest.fixture
def mock_subscription_repo():
    return MagicMock()


@pytest.mark.asyncio
class TestGetSubscription:

    async def test_returns_snapshot(self, mock_subscription_repo, make_subscription):
        mock_subscription_repo.get_by_id = AsyncMock(return_value=make_subscription(id=3))

        result = await GetSubscription(mock_subscription_repo).execute(3)

        assert result.is_ok()
        assert result.value.id == 3
        assert result.value.merchant == MERCHANT
        assert result.value.status == SubscriptionStatus.ACTIVE

    async def test_not_found(self, mock_subscription_repo):
        mock_subscription_repo.get_by_id = AsyncMock(return_value=None)

        result = await GetSubscription(mock_subscription_repo).execute(3)

        assert result.error.code == ErrorCode.NOT_FOUND


@pytest.mark.asyncio
class TestGetNextChargeInfo:

    async def test_next_charge(self, mock_subscription_repo, make_subscription):
        mock_subscription_repo.get_by_id = AsyncMock(return_value=make_subscription())

        result = await GetNextChargeInfo(mock_subscription_repo).execute(0)

        assert result.value.next_charge_timestamp == NOW
        assert result.value.is_charge_expected is True

    async def test_saturated_and_paused(self, mock_subscription_repo, make_subscription):
        mock_subscription_repo.get_by_id = AsyncMock(
            return_value=make_subscription(
                last_payment_timestamp=U64_MAX - 100,
                interval_seconds=200,
                status=SubscriptionStatus.PAUSED,
            )
        )

        result = await GetNextChargeInfo(mock_subscription_repo).execute(0)

        assert result.value.next_charge_timestamp == U64_MAX
        assert result.value.is_charge_expected is False

    async def test_not_found(self, mock_subscription_repo):
        mock_subscription_repo.get_by_id = AsyncMock(return_value=None)

        result = await GetNextChargeInfo(mock_subscription_repo).execute(0)

        assert result.error.code == ErrorCode.NOT_FOUND


@pytest.mark.asyncio
class TestListMerchantSubscriptions:

    async def test_ids_in_creation_order(self, mock_subscription_repo, make_subscription):
        mock_subscription_repo.list_by_merchant = AsyncMock(
            return_value=[make_subscription(id=0), make_subscription(id=4), make_subscription(id=9)]
        )

        result = await ListMerchantSubscriptions(mock_subscription_repo).execute(MERCHANT)

        assert result.value.merchant == MERCHANT
        assert result.value.subscription_ids == [0, 4, 9]

    async def test_unknown_merchant_has_none(self, mock_subscription_repo):
        mock_subscription_repo.list_by_merchant = AsyncMock(return_value=[])

        result = await ListMerchantSubscriptions(mock_subscription_repo).execute("merchant_new")

        assert result.value.subscription_ids == []
