"""SQLAlchemy implementation of RecoveryRecordRepository"""

from typing import List
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.recovery_record_repository import RecoveryRecordRepository
from src.domain.recovery_record import RecoveryRecord


class SqlAlchemyRecoveryRecordRepository(RecoveryRecordRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, record: RecoveryRecord) -> RecoveryRecord:
        self.session.add(record)
        await self.session.flush()
        await self.session.refresh(record)
        return record

    async def list_recent(self, limit: int = 100) -> List[RecoveryRecord]:
        stmt = select(RecoveryRecord).order_by(RecoveryRecord.id.desc()).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
