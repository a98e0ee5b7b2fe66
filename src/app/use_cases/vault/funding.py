"""Funding checks and compensation for pulls from a subscriber"""

import logging
from typing import Optional
from libs.result import Error
from src.app.services.token_service import TokenService, TokenTransferError
from src.domain.error_codes import ErrorCode

logger = logging.getLogger(__name__)


async def check_can_pull(
    token_service: TokenService,
    token: str,
    owner: str,
    vault_address: str,
    amount: int,
) -> Optional[Error]:
    """
    Check that the vault may pull amount from owner

    Returns:
        INSUFFICIENT_ALLOWANCE if the vault's allowance is too small,
        TRANSFER_FAILED if owner cannot cover amount, None otherwise
    """
    allowance = await token_service.allowance(token, owner, vault_address)
    if allowance < amount:
        return Error(
            code=ErrorCode.INSUFFICIENT_ALLOWANCE,
            message=f"Vault allowance from {owner} is below the required amount",
            reason=f"allowance={allowance}, required={amount}",
        )

    balance = await token_service.balance(token, owner)
    if balance < amount:
        return Error(
            code=ErrorCode.TRANSFER_FAILED,
            message=f"Token balance of {owner} is below the required amount",
            reason=f"balance={balance}, required={amount}",
        )
    return None


async def refund_pull(
    token_service: TokenService,
    token: str,
    owner: str,
    vault_address: str,
    amount: int,
) -> bool:
    """
    Return a pulled amount to owner after the recording write failed

    Returns:
        True if the refund transfer went through, False otherwise
    """
    try:
        await token_service.transfer(token, from_=vault_address, to=owner, amount=amount)
    except TokenTransferError as e:
        logger.critical(f"Could not refund pulled amount {amount} to {owner}: {e}")
        return False
    logger.warning(f"Refunded pulled amount {amount} to {owner}")
    return True
