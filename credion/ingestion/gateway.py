import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from credion.reports.models import ReportIngestion

logger = logging.getLogger(__name__)


class PersistenceGateway:
    """Writes normalized rows, one aggregate per transaction.

    A unit either commits the parent with all of its children or rolls all
    of them back, so a failed aggregate leaves nothing behind.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    @asynccontextmanager
    async def unit(self, label: str):
        try:
            yield self
            await self.db.commit()
        except BaseException:
            await self.db.rollback()
            logger.debug(f"Rolled back unit {label}")
            raise

    async def add(self, row):
        """Insert one row and flush so its generated key is available to children."""
        self.db.add(row)
        await self.db.flush()
        return row

    async def add_all(self, rows: Iterable) -> int:
        rows = list(rows)
        if rows:
            self.db.add_all(rows)
            await self.db.flush()
        return len(rows)

    async def has_claim(self, report_id: int) -> bool:
        result = await self.db.execute(
            select(ReportIngestion.id).where(ReportIngestion.report_id == report_id)
        )
        return result.first() is not None

    async def claim(self, report_id: int, payload_kind: str) -> bool:
        """Record that ingestion of this report has started.

        Returns False when another run already holds the claim.
        """
        self.db.add(ReportIngestion(report_id=report_id, payload_kind=payload_kind, started_at=datetime.utcnow()))
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            return False
        return True

    async def complete_claim(self, report_id: int, failed_aggregates: int, completed_at: Optional[datetime] = None):
        await self.db.execute(
            update(ReportIngestion)
            .where(ReportIngestion.report_id == report_id)
            .values(completed_at=completed_at or datetime.utcnow(), failed_aggregates=failed_aggregates)
        )
        await self.db.commit()

    async def release_claim(self, report_id: int):
        await self.db.execute(delete(ReportIngestion).where(ReportIngestion.report_id == report_id))
