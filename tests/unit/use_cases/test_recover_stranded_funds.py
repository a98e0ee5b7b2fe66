"""Unit tests for RecoverStrandedFunds and ListRecoveryRecords use cases"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.services.token_service import TokenTransferError
from src.app.use_cases.vault import (
    RecoverStrandedFunds,
    ListRecoveryRecords,
    RecoverFundsCommandDTO,
)
from src.domain.error_codes import ErrorCode
from src.domain.recovery_record import RecoveryReason, RecoveryRecord
from src.domain.vault_event import VaultEventType
from tests.fixtures.vault_data import ADMIN, NOW, TOKEN, VAULT


def stored(record: RecoveryRecord) -> RecoveryRecord:
    record.id = 1
    return record


@pytest.fixture
def mock_record_repo():
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=stored)
    repo.list_recent = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def recover_use_case(
    mock_uow, mock_record_repo, mock_settings_repo, auth_for,
    mock_token_service, mock_event_publisher, fixed_clock,
):
    return RecoverStrandedFunds(
        uow=mock_uow,
        record_repo=mock_record_repo,
        settings_repo=mock_settings_repo,
        auth=auth_for(ADMIN),
        token_service=mock_token_service,
        event_publisher=mock_event_publisher,
        clock=fixed_clock,
        vault_address=VAULT,
    )


def recover(amount=5_000000, admin=ADMIN, reason=RecoveryReason.ACCIDENTAL_TRANSFER):
    return RecoverFundsCommandDTO(admin=admin, recipient="wallet_bob", amount=amount, reason=reason)


@pytest.mark.asyncio
class TestRecoverStrandedFunds:

    async def test_admin_recovers_and_record_is_kept(
        self, recover_use_case, mock_token_service, mock_record_repo, mock_event_publisher, mock_uow
    ):
        result = await recover_use_case.execute(recover())

        assert result.is_ok()
        assert result.value.id == 1
        assert result.value.recipient == "wallet_bob"
        assert result.value.amount == 5_000000
        assert result.value.reason == RecoveryReason.ACCIDENTAL_TRANSFER
        assert result.value.timestamp == NOW
        mock_token_service.transfer.assert_called_once_with(
            TOKEN, from_=VAULT, to="wallet_bob", amount=5_000000
        )
        mock_uow.commit.assert_called_once()
        event = mock_event_publisher.publish.call_args[0][0]
        assert event.event_type == VaultEventType.FUNDS_RECOVERED
        assert event.data["reason"] == "accidental_transfer"

    async def test_non_admin_rejected(self, recover_use_case, auth_for, mock_token_service):
        recover_use_case.auth = auth_for("mallory")

        result = await recover_use_case.execute(recover(admin="mallory"))

        assert result.error.code == ErrorCode.UNAUTHORIZED
        mock_token_service.transfer.assert_not_called()

    async def test_authorization_checked_before_amount(self, recover_use_case, auth_for):
        recover_use_case.auth = auth_for("mallory")

        result = await recover_use_case.execute(recover(amount=0, admin="mallory"))

        assert result.error.code == ErrorCode.UNAUTHORIZED

    @pytest.mark.parametrize("amount", [0, -1])
    async def test_non_positive_amount(self, recover_use_case, amount, mock_record_repo):
        result = await recover_use_case.execute(recover(amount=amount))

        assert result.error.code == ErrorCode.INVALID_RECOVERY_AMOUNT
        mock_record_repo.create.assert_not_called()

    async def test_transfer_failure_records_nothing(
        self, recover_use_case, mock_token_service, mock_record_repo, mock_event_publisher
    ):
        mock_token_service.transfer = AsyncMock(side_effect=TokenTransferError("insufficient custody"))

        result = await recover_use_case.execute(recover())

        assert result.error.code == ErrorCode.TRANSFER_FAILED
        mock_record_repo.create.assert_not_called()
        mock_event_publisher.publish.assert_not_called()


@pytest.mark.asyncio
class TestListRecoveryRecords:

    async def test_lists_recent_records(self, mock_record_repo):
        mock_record_repo.list_recent = AsyncMock(return_value=[
            RecoveryRecord(
                id=2, admin=ADMIN, recipient="wallet_bob", amount=7,
                reason=RecoveryReason.DEPRECATED_FLOW, timestamp=NOW,
            ),
        ])

        result = await ListRecoveryRecords(mock_record_repo).execute(limit=10)

        assert result.is_ok()
        assert [r.id for r in result.value] == [2]
        mock_record_repo.list_recent.assert_called_once_with(10)
