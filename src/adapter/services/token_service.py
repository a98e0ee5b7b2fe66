"""Token Service Implementations

Provides the HTTP client for the external asset service and an in-process
ledger used for local runs.
"""

import logging
from collections import defaultdict
from typing import Dict, Tuple
import httpx
from src.app.services.token_service import TokenService, TokenTransferError

logger = logging.getLogger(__name__)


class HttpTokenService(TokenService):
    """
    Token service backed by the asset service's REST API

    Amounts travel as decimal strings so 128-bit values survive JSON.
    Any HTTP or transport failure raises TokenTransferError.
    """

    def __init__(self, base_url: str, timeout: float = 10.0):
        """
        Args:
            base_url: Asset service root URL
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def _request(self, method: str, path: str, **kwargs) -> dict:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(method, url, **kwargs)
                response.raise_for_status()
                return response.json() if response.content else {}
        except httpx.HTTPStatusError as e:
            raise TokenTransferError(
                f"{method} {path} rejected with {e.response.status_code}: {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            raise TokenTransferError(f"{method} {path} failed: {e}") from e

    async def allowance(self, token: str, owner: str, spender: str) -> int:
        data = await self._request(
            "GET", f"/tokens/{token}/allowance", params={"owner": owner, "spender": spender}
        )
        return int(data["amount"])

    async def balance(self, token: str, owner: str) -> int:
        data = await self._request("GET", f"/tokens/{token}/balances/{owner}")
        return int(data["amount"])

    async def transfer(self, token: str, from_: str, to: str, amount: int) -> None:
        await self._request(
            "POST",
            f"/tokens/{token}/transfer",
            json={"from": from_, "to": to, "amount": str(amount)},
        )
        logger.info(f"Transferred {amount} of {token} from {from_} to {to}")

    async def transfer_from(self, token: str, spender: str, from_: str, to: str, amount: int) -> None:
        await self._request(
            "POST",
            f"/tokens/{token}/transfer_from",
            json={"spender": spender, "from": from_, "to": to, "amount": str(amount)},
        )
        logger.info(f"Transferred {amount} of {token} from {from_} to {to} (spender {spender})")


class InMemoryTokenService(TokenService):
    """
    Token ledger kept in process memory

    Useful for development and testing. Balances and allowances are
    seeded with mint() and approve().
    """

    def __init__(self):
        self.balances: Dict[Tuple[str, str], int] = defaultdict(int)
        self.allowances: Dict[Tuple[str, str, str], int] = defaultdict(int)

    def mint(self, token: str, owner: str, amount: int) -> None:
        self.balances[(token, owner)] += amount

    def approve(self, token: str, owner: str, spender: str, amount: int) -> None:
        self.allowances[(token, owner, spender)] = amount

    async def allowance(self, token: str, owner: str, spender: str) -> int:
        return self.allowances[(token, owner, spender)]

    async def balance(self, token: str, owner: str) -> int:
        return self.balances[(token, owner)]

    async def transfer(self, token: str, from_: str, to: str, amount: int) -> None:
        if amount <= 0:
            raise TokenTransferError(f"invalid transfer amount {amount}")
        if self.balances[(token, from_)] < amount:
            raise TokenTransferError(
                f"balance of {from_} is {self.balances[(token, from_)]}, cannot send {amount}"
            )
        self.balances[(token, from_)] -= amount
        self.balances[(token, to)] += amount

    async def transfer_from(self, token: str, spender: str, from_: str, to: str, amount: int) -> None:
        if self.allowances[(token, from_, spender)] < amount:
            raise TokenTransferError(
                f"allowance of {spender} over {from_} is below {amount}"
            )
        await self.transfer(token, from_, to, amount)
        self.allowances[(token, from_, spender)] -= amount
