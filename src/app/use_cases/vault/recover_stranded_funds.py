"""RecoverStrandedFunds Use Case

Admin extraction of value held in custody that no ledger accounts for.
Never reads or writes subscriptions or merchant balances.
"""

import logging
from typing import List
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.authorization_service import AuthorizationService
from src.app.services.token_service import TokenService, TokenTransferError
from src.app.services.event_publisher import EventPublisher
from src.app.services.clock import Clock
from src.app.repositories.recovery_record_repository import RecoveryRecordRepository
from src.app.repositories.vault_settings_repository import VaultSettingsRepository
from src.domain.error_codes import ErrorCode
from src.domain.recovery_record import RecoveryRecord
from src.domain.vault_event import VaultEvent, VaultEventType
from .dtos import RecoverFundsCommandDTO, RecoveryRecordResponseDTO
from .guards import authorize_admin

logger = logging.getLogger(__name__)


def to_record_dto(record: RecoveryRecord) -> RecoveryRecordResponseDTO:
    return RecoveryRecordResponseDTO(
        id=record.id,
        admin=record.admin,
        recipient=record.recipient,
        amount=record.amount,
        reason=record.reason,
        timestamp=record.timestamp,
    )


class RecoverStrandedFunds:
    """
    Use Case: Recover stranded funds

    Business Rules:
    1. Caller must be the vault admin
    2. amount > 0 (INVALID_RECOVERY_AMOUNT)
    3. reason is recorded for audit only
    4. Not idempotent: every call transfers and writes a new record
    """

    def __init__(
        self,
        uow: UnitOfWork,
        record_repo: RecoveryRecordRepository,
        settings_repo: VaultSettingsRepository,
        auth: AuthorizationService,
        token_service: TokenService,
        event_publisher: EventPublisher,
        clock: Clock,
        vault_address: str,
    ):
        self.uow = uow
        self.record_repo = record_repo
        self.settings_repo = settings_repo
        self.auth = auth
        self.token_service = token_service
        self.event_publisher = event_publisher
        self.clock = clock
        self.vault_address = vault_address

    async def execute(self, command: RecoverFundsCommandDTO) -> Result[RecoveryRecordResponseDTO]:
        error = await authorize_admin(self.auth, self.settings_repo, command.admin)
        if error:
            return Return.err(error)

        if command.amount <= 0:
            return Return.err(
                Error(
                    code=ErrorCode.INVALID_RECOVERY_AMOUNT,
                    message="Recovery amount must be positive",
                    reason=f"amount={command.amount}",
                )
            )

        settings = await self.settings_repo.get()

        try:
            await self.token_service.transfer(
                settings.token, from_=self.vault_address, to=command.recipient, amount=command.amount
            )

            record = await self.record_repo.create(
                RecoveryRecord(
                    admin=command.admin,
                    recipient=command.recipient,
                    amount=command.amount,
                    reason=command.reason,
                    timestamp=self.clock.now(),
                )
            )
            await self.uow.commit()

        except TokenTransferError as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code=ErrorCode.TRANSFER_FAILED,
                    message="Recovery transfer failed",
                    reason=str(e),
                )
            )
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Recovery of {command.amount} to {command.recipient} failed: {e}")
            return Return.err(
                Error(
                    code=ErrorCode.INTERNAL_ERROR,
                    message="Failed to recover stranded funds",
                    reason=str(e),
                )
            )

        logger.warning(
            f"[RECOVERY] admin={record.admin} recipient={record.recipient} "
            f"amount={record.amount} reason={record.reason.value} timestamp={record.timestamp}"
        )
        await self.event_publisher.publish(
            VaultEvent(
                event_type=VaultEventType.FUNDS_RECOVERED,
                timestamp=record.timestamp,
                data={
                    "admin": record.admin,
                    "recipient": record.recipient,
                    "amount": record.amount,
                    "reason": record.reason.value,
                },
            )
        )
        return Return.ok(to_record_dto(record))


class ListRecoveryRecords:

    def __init__(self, record_repo: RecoveryRecordRepository):
        self.record_repo = record_repo

    async def execute(self, limit: int = 100) -> Result[List[RecoveryRecordResponseDTO]]:
        records = await self.record_repo.list_recent(limit)
        return Return.ok([to_record_dto(r) for r in records])
