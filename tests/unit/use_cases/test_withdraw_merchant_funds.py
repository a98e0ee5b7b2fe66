"""Unit tests for WithdrawMerchantFunds and GetMerchantBalance use cases"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.services.token_service import TokenTransferError
from src.app.use_cases.vault import (
    WithdrawMerchantFunds,
    GetMerchantBalance,
    WithdrawCommandDTO,
)
from src.domain.error_codes import ErrorCode
from src.domain.merchant_balance import MerchantBalance
from src.domain.vault_event import VaultEventType
from tests.fixtures.vault_data import MERCHANT, TOKEN, VAULT


@pytest.fixture
def merchant_balance():
    return MerchantBalance(merchant=MERCHANT, balance=10_000000)


@pytest.fixture
def mock_balance_repo(merchant_balance):
    async def set_balance(merchant, balance):
        merchant_balance.balance = balance
        return merchant_balance

    repo = MagicMock()
    repo.get_by_merchant = AsyncMock(return_value=merchant_balance)
    repo.set_balance = AsyncMock(side_effect=set_balance)
    return repo


@pytest.fixture
def withdraw_use_case(
    mock_uow, mock_balance_repo, mock_settings_repo, allow_all_auth,
    mock_token_service, mock_event_publisher, fixed_clock,
):
    return WithdrawMerchantFunds(
        uow=mock_uow,
        balance_repo=mock_balance_repo,
        settings_repo=mock_settings_repo,
        auth=allow_all_auth,
        token_service=mock_token_service,
        event_publisher=mock_event_publisher,
        clock=fixed_clock,
        vault_address=VAULT,
    )


def withdraw(amount):
    return WithdrawCommandDTO(merchant=MERCHANT, amount=amount)


@pytest.mark.asyncio
class TestWithdrawMerchantFunds:

    async def test_withdraw_full_balance(
        self, withdraw_use_case, merchant_balance, mock_token_service, mock_event_publisher
    ):
        result = await withdraw_use_case.execute(withdraw(10_000000))

        assert result.is_ok()
        assert result.value.balance_before == 10_000000
        assert result.value.balance_after == 0
        assert merchant_balance.balance == 0
        mock_token_service.transfer.assert_called_once_with(
            TOKEN, from_=VAULT, to=MERCHANT, amount=10_000000
        )
        assert mock_event_publisher.publish.call_args[0][0].event_type == VaultEventType.MERCHANT_WITHDRAWAL

    async def test_repeated_full_withdrawal_fails(self, withdraw_use_case, mock_token_service):
        first = await withdraw_use_case.execute(withdraw(10_000000))
        second = await withdraw_use_case.execute(withdraw(10_000000))

        assert first.is_ok()
        assert second.error.code == ErrorCode.INSUFFICIENT_BALANCE
        assert mock_token_service.transfer.call_count == 1

    async def test_debit_committed_before_transfer(self, withdraw_use_case, mock_uow, mock_token_service):
        calls = []
        mock_uow.commit = AsyncMock(side_effect=lambda: calls.append("commit"))
        mock_token_service.transfer = AsyncMock(side_effect=lambda *a, **k: calls.append("transfer"))

        await withdraw_use_case.execute(withdraw(1))

        assert calls == ["commit", "transfer"]

    async def test_transfer_failure_restores_balance(
        self, withdraw_use_case, merchant_balance, mock_token_service, mock_event_publisher
    ):
        mock_token_service.transfer = AsyncMock(side_effect=TokenTransferError("vault frozen"))

        result = await withdraw_use_case.execute(withdraw(4_000000))

        assert result.error.code == ErrorCode.TRANSFER_FAILED
        assert merchant_balance.balance == 10_000000
        mock_event_publisher.publish.assert_not_called()

    async def test_failed_reversal_returns_internal_error(
        self, withdraw_use_case, mock_token_service, mock_uow
    ):
        """
        Given the transfer fails and the compensating credit cannot be committed
        When a withdrawal is made
        Then an INTERNAL_ERROR result is returned instead of raising
        """
        mock_token_service.transfer = AsyncMock(side_effect=TokenTransferError("vault frozen"))
        mock_uow.commit = AsyncMock(side_effect=[None, Exception("connection lost")])

        result = await withdraw_use_case.execute(withdraw(4_000000))

        assert result.is_err()
        assert result.error.code == ErrorCode.INTERNAL_ERROR
        assert "could not be reversed" in result.error.message
        mock_uow.rollback.assert_called_once()

    async def test_unknown_merchant_has_nothing_to_withdraw(self, withdraw_use_case, mock_balance_repo):
        mock_balance_repo.get_by_merchant = AsyncMock(return_value=None)

        result = await withdraw_use_case.execute(withdraw(1))

        assert result.error.code == ErrorCode.INSUFFICIENT_BALANCE
        assert "shortfall=1" in result.error.reason

    @pytest.mark.parametrize("amount", [0, -3])
    async def test_non_positive_amount(self, withdraw_use_case, amount):
        result = await withdraw_use_case.execute(withdraw(amount))

        assert result.error.code == ErrorCode.INVALID_AMOUNT

    async def test_merchant_must_authorize(self, withdraw_use_case, deny_all_auth, merchant_balance):
        withdraw_use_case.auth = deny_all_auth

        result = await withdraw_use_case.execute(withdraw(1))

        assert result.error.code == ErrorCode.UNAUTHORIZED
        assert merchant_balance.balance == 10_000000


@pytest.mark.asyncio
class TestGetMerchantBalance:

    async def test_known_merchant(self, mock_balance_repo):
        result = await GetMerchantBalance(mock_balance_repo).execute(MERCHANT)

        assert result.value.balance == 10_000000

    async def test_unknown_merchant_is_zero(self, mock_balance_repo):
        mock_balance_repo.get_by_merchant = AsyncMock(return_value=None)

        result = await GetMerchantBalance(mock_balance_repo).execute("merchant_new")

        assert result.is_ok()
        assert result.value.balance == 0
