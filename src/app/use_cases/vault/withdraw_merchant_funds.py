"""WithdrawMerchantFunds Use Case

Pays a merchant's earned balance out of vault custody.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.authorization_service import AuthorizationService
from src.app.services.token_service import TokenService, TokenTransferError
from src.app.services.event_publisher import EventPublisher
from src.app.services.clock import Clock
from src.app.repositories.merchant_balance_repository import MerchantBalanceRepository
from src.app.repositories.vault_settings_repository import VaultSettingsRepository
from src.domain.amounts import ArithmeticOverflowError, checked_add, checked_sub
from src.domain.error_codes import ErrorCode
from src.domain.vault_event import VaultEvent, VaultEventType
from .dtos import WithdrawCommandDTO, WithdrawalResponseDTO
from .guards import authorize, vault_not_initialized

logger = logging.getLogger(__name__)


class WithdrawMerchantFunds:
    """
    Use Case: Withdraw earned funds

    Business Rules:
    1. Merchant must authorize
    2. 0 < amount <= balance
    3. The debit is committed before the token transfer is attempted, so a
       retried or re-entered withdrawal can never pay the same value twice
    4. If the transfer fails the debit is reversed with a compensating credit

    Flow:
    1. Lock merchant balance, validate amount
    2. Write and commit the debit
    3. Transfer tokens vault -> merchant
    4. On transfer failure, re-credit and commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        balance_repo: MerchantBalanceRepository,
        settings_repo: VaultSettingsRepository,
        auth: AuthorizationService,
        token_service: TokenService,
        event_publisher: EventPublisher,
        clock: Clock,
        vault_address: str,
    ):
        self.uow = uow
        self.balance_repo = balance_repo
        self.settings_repo = settings_repo
        self.auth = auth
        self.token_service = token_service
        self.event_publisher = event_publisher
        self.clock = clock
        self.vault_address = vault_address

    async def execute(self, command: WithdrawCommandDTO) -> Result[WithdrawalResponseDTO]:
        error = await authorize(self.auth, command.merchant)
        if error:
            return Return.err(error)

        if command.amount <= 0:
            return Return.err(
                Error(
                    code=ErrorCode.INVALID_AMOUNT,
                    message="Withdrawal amount must be positive",
                    reason=f"amount={command.amount}",
                )
            )

        settings = await self.settings_repo.get()
        if not settings:
            return Return.err(vault_not_initialized())

        try:
            merchant_balance = await self.balance_repo.get_by_merchant(
                command.merchant, for_update=True
            )
            balance_before = merchant_balance.balance if merchant_balance else 0
            if balance_before < command.amount:
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code=ErrorCode.INSUFFICIENT_BALANCE,
                        message=f"Insufficient earned balance for merchant {command.merchant}",
                        reason=(
                            f"available={balance_before}, required={command.amount}, "
                            f"shortfall={command.amount - balance_before}"
                        ),
                    )
                )

            balance_after = checked_sub(balance_before, command.amount)
            await self.balance_repo.set_balance(command.merchant, balance_after)
            await self.uow.commit()

        except ArithmeticOverflowError as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code=ErrorCode.ARITHMETIC_OVERFLOW,
                    message="Withdrawal would overflow the merchant balance",
                    reason=str(e),
                )
            )
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to debit merchant {command.merchant}: {e}")
            return Return.err(
                Error(
                    code=ErrorCode.INTERNAL_ERROR,
                    message="Failed to withdraw merchant funds",
                    reason=str(e),
                )
            )

        try:
            await self.token_service.transfer(
                settings.token, from_=self.vault_address, to=command.merchant, amount=command.amount
            )
        except TokenTransferError as e:
            logger.error(
                f"Withdrawal transfer of {command.amount} to {command.merchant} failed, "
                f"reversing debit: {e}"
            )
            if not await self._reverse_debit(command.merchant, command.amount):
                return Return.err(
                    Error(
                        code=ErrorCode.INTERNAL_ERROR,
                        message="Withdrawal transfer failed and the debit could not be reversed",
                        reason=str(e),
                    )
                )
            return Return.err(
                Error(
                    code=ErrorCode.TRANSFER_FAILED,
                    message="Withdrawal transfer failed",
                    reason=str(e),
                )
            )

        logger.info(
            f"Merchant {command.merchant} withdrew {command.amount} "
            f"(balance {balance_before} -> {balance_after})"
        )
        await self.event_publisher.publish(
            VaultEvent(
                event_type=VaultEventType.MERCHANT_WITHDRAWAL,
                timestamp=self.clock.now(),
                data={"merchant": command.merchant, "amount": command.amount},
            )
        )
        return Return.ok(
            WithdrawalResponseDTO(
                merchant=command.merchant,
                amount=command.amount,
                balance_before=balance_before,
                balance_after=balance_after,
            )
        )

    async def _reverse_debit(self, merchant: str, amount: int) -> bool:
        try:
            merchant_balance = await self.balance_repo.get_by_merchant(merchant, for_update=True)
            current = merchant_balance.balance if merchant_balance else 0
            await self.balance_repo.set_balance(merchant, checked_add(current, amount))
            await self.uow.commit()
        except Exception as e:
            await self.uow.rollback()
            logger.critical(
                f"Could not reverse withdrawal debit of {amount} for merchant {merchant}: {e}"
            )
            return False
        return True
