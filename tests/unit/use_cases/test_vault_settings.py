"""Unit tests for InitVault, SetMinTopup and GetMinTopup use cases"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.vault import (
    InitVault,
    SetMinTopup,
    GetMinTopup,
    InitVaultCommandDTO,
    SetMinTopupCommandDTO,
)
from src.domain.error_codes import ErrorCode
from tests.fixtures.vault_data import ADMIN, TOKEN


@pytest.fixture
def empty_settings_repo():
    repo = MagicMock()
    repo.get = AsyncMock(return_value=None)
    repo.save = AsyncMock(side_effect=lambda s: s)
    return repo


@pytest.mark.asyncio
class TestInitVault:

    async def test_init_stores_settings(self, mock_uow, empty_settings_repo):
        """
        Given: Vault never initialized
        When: init is called with a positive minimum
        Then: Settings saved with counter 0 and committed
        """
        use_case = InitVault(mock_uow, empty_settings_repo)

        result = await use_case.execute(
            InitVaultCommandDTO(token=TOKEN, admin=ADMIN, min_topup=1_000000)
        )

        assert result.is_ok()
        assert result.value.token == TOKEN
        assert result.value.admin == ADMIN
        assert result.value.min_topup == 1_000000
        saved = empty_settings_repo.save.call_args[0][0]
        assert saved.next_subscription_id == 0
        mock_uow.commit.assert_called_once()

    @pytest.mark.parametrize("min_topup", [0, -1])
    async def test_non_positive_min_topup_rejected(self, mock_uow, empty_settings_repo, min_topup):
        use_case = InitVault(mock_uow, empty_settings_repo)

        result = await use_case.execute(
            InitVaultCommandDTO(token=TOKEN, admin=ADMIN, min_topup=min_topup)
        )

        assert result.is_err()
        assert result.error.code == ErrorCode.INVALID_AMOUNT
        empty_settings_repo.save.assert_not_called()

    async def test_second_init_rejected(self, mock_uow, mock_settings_repo):
        use_case = InitVault(mock_uow, mock_settings_repo)

        result = await use_case.execute(
            InitVaultCommandDTO(token="token_other", admin="admin_other", min_topup=5)
        )

        assert result.is_err()
        assert result.error.code == ErrorCode.UNAUTHORIZED
        mock_settings_repo.save.assert_not_called()
        mock_uow.rollback.assert_called_once()

    async def test_storage_failure_rolls_back(self, mock_uow, empty_settings_repo):
        empty_settings_repo.save = AsyncMock(side_effect=Exception("database is locked"))
        use_case = InitVault(mock_uow, empty_settings_repo)

        result = await use_case.execute(
            InitVaultCommandDTO(token=TOKEN, admin=ADMIN, min_topup=1)
        )

        assert result.is_err()
        assert result.error.code == ErrorCode.INTERNAL_ERROR
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
class TestSetMinTopup:

    async def test_admin_updates_minimum(self, mock_uow, mock_settings_repo, vault_settings, auth_for):
        use_case = SetMinTopup(mock_uow, mock_settings_repo, auth_for(ADMIN))

        result = await use_case.execute(SetMinTopupCommandDTO(admin=ADMIN, min_topup=2_000000))

        assert result.is_ok()
        assert result.value.min_topup == 2_000000
        assert vault_settings.min_topup == 2_000000
        mock_uow.commit.assert_called_once()

    async def test_non_admin_rejected(self, mock_uow, mock_settings_repo, auth_for):
        use_case = SetMinTopup(mock_uow, mock_settings_repo, auth_for("mallory"))

        result = await use_case.execute(SetMinTopupCommandDTO(admin="mallory", min_topup=2))

        assert result.is_err()
        assert result.error.code == ErrorCode.UNAUTHORIZED
        mock_settings_repo.save.assert_not_called()

    async def test_admin_without_consent_rejected(self, mock_uow, mock_settings_repo, deny_all_auth):
        use_case = SetMinTopup(mock_uow, mock_settings_repo, deny_all_auth)

        result = await use_case.execute(SetMinTopupCommandDTO(admin=ADMIN, min_topup=2))

        assert result.is_err()
        assert result.error.code == ErrorCode.UNAUTHORIZED

    async def test_zero_rejected_before_authorization(self, mock_uow, mock_settings_repo, deny_all_auth):
        use_case = SetMinTopup(mock_uow, mock_settings_repo, deny_all_auth)

        result = await use_case.execute(SetMinTopupCommandDTO(admin=ADMIN, min_topup=0))

        assert result.error.code == ErrorCode.INVALID_AMOUNT


@pytest.mark.asyncio
class TestGetMinTopup:

    async def test_returns_minimum(self, mock_settings_repo):
        result = await GetMinTopup(mock_settings_repo).execute()

        assert result.is_ok()
        assert result.value.min_topup == 1_000000

    async def test_uninitialized_vault(self, empty_settings_repo):
        result = await GetMinTopup(empty_settings_repo).execute()

        assert result.is_err()
        assert result.error.code == ErrorCode.NOT_FOUND
