import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from credion.config import settings
from credion.reports.models import Report

logger = logging.getLogger(__name__)


@dataclass
class CacheLookup:
    hit: bool
    report: Optional[Report] = None


class ReportCacheIndex:
    """Finds an already produced report that is still fresh enough to reuse."""

    def __init__(self, db: AsyncSession, max_age_days: Optional[int] = None):
        self.db = db
        self.max_age = timedelta(days=max_age_days if max_age_days is not None else settings.REPORT_CACHE_DAYS)

    async def lookup(
        self,
        abn: str,
        category: str,
        subtype: Optional[str],
        now: Optional[datetime] = None,
    ) -> CacheLookup:
        cutoff = (now or datetime.utcnow()) - self.max_age
        query = (
            select(Report)
            .where(
                Report.abn == abn,
                Report.category == category,
                Report.subtype.is_(None) if subtype is None else Report.subtype == subtype,
                Report.is_active.is_(True),
                Report.created_at >= cutoff,
            )
            .order_by(Report.created_at.desc())
            .limit(1)
        )
        try:
            result = await self.db.execute(query)
            report = result.scalars().first()
        except SQLAlchemyError as e:
            # Fail open: a broken lookup just means we fetch a fresh report.
            logger.warning(f"Report cache lookup failed for ABN {abn} ({category}/{subtype}): {e}")
            return CacheLookup(hit=False)

        if report is None:
            logger.info(f"Cache miss for ABN {abn} ({category}/{subtype})")
            return CacheLookup(hit=False)

        logger.info(f"Cache hit for ABN {abn} ({category}/{subtype}): report {report.id} from {report.created_at}")
        return CacheLookup(hit=True, report=report)
