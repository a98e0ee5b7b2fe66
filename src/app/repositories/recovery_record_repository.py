"""Recovery Record Repository Interface"""

from abc import ABC, abstractmethod
from typing import List
from src.domain.recovery_record import RecoveryRecord


class RecoveryRecordRepository(ABC):

    @abstractmethod
    async def create(self, record: RecoveryRecord) -> RecoveryRecord:
        """Append an audit record"""
        pass

    @abstractmethod
    async def list_recent(self, limit: int = 100) -> List[RecoveryRecord]:
        """Most recent records first"""
        pass
