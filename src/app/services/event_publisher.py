"""Event Publisher Interface

Best-effort sink for vault lifecycle events. Publishing never affects the
outcome of the operation that produced the event.
"""

from abc import ABC, abstractmethod
from src.domain.vault_event import VaultEvent


class EventPublisher(ABC):

    @abstractmethod
    async def publish(self, event: VaultEvent) -> bool:
        """
        Publish a lifecycle event

        Returns:
            True if delivered, False otherwise (never raises)
        """
        pass
