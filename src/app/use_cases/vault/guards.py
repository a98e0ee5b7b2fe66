"""Authorization guards shared by vault use cases

Each guard returns None when the caller may proceed, or the Error the use
case should return.
"""

import logging
from typing import Optional
from libs.result import Error
from src.app.repositories.vault_settings_repository import VaultSettingsRepository
from src.app.services.authorization_service import AuthorizationService, AuthorizationError
from src.domain.error_codes import ErrorCode

logger = logging.getLogger(__name__)


def vault_not_initialized() -> Error:
    return Error(
        code=ErrorCode.NOT_FOUND,
        message="Vault is not initialized",
        reason="init has not been called",
    )


def unauthorized(principal: str, reason: Optional[str] = None) -> Error:
    return Error(
        code=ErrorCode.UNAUTHORIZED,
        message=f"Caller is not authorized to act as {principal}",
        reason=reason,
    )


async def authorize(auth: AuthorizationService, principal: str) -> Optional[Error]:
    """Require the caller's consent for principal"""
    try:
        await auth.require_authorized(principal)
    except AuthorizationError as e:
        logger.warning(f"Authorization denied for {principal}: {e.detail}")
        return unauthorized(principal, e.detail)
    return None


async def authorize_admin(
    auth: AuthorizationService,
    settings_repo: VaultSettingsRepository,
    admin: str,
) -> Optional[Error]:
    """Require consent of admin and that admin is the vault's admin"""
    error = await authorize(auth, admin)
    if error:
        return error

    settings = await settings_repo.get()
    if not settings:
        return vault_not_initialized()

    if settings.admin != admin:
        return unauthorized(admin, "not the vault admin")
    return None


async def authorize_admin_or_merchant(
    auth: AuthorizationService,
    settings_repo: VaultSettingsRepository,
    actor: str,
    merchant: str,
) -> Optional[Error]:
    """Require consent of actor, who must be the merchant itself or the vault admin"""
    error = await authorize(auth, actor)
    if error:
        return error

    settings = await settings_repo.get()
    if not settings:
        return vault_not_initialized()

    if actor != merchant and actor != settings.admin:
        return unauthorized(actor, f"neither merchant {merchant} nor the vault admin")
    return None
