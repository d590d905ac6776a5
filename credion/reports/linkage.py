import logging
from typing import Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from credion.reports.models import UserReport

logger = logging.getLogger(__name__)


class UserReportLinker:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_link(self, user_id: int, matter_id: Optional[int], report_id: int) -> Optional[UserReport]:
        query = select(UserReport).where(
            UserReport.user_id == user_id,
            UserReport.report_id == report_id,
            UserReport.matter_id.is_(None) if matter_id is None else UserReport.matter_id == matter_id,
        )
        result = await self.db.execute(query)
        return result.scalars().first()

    async def link_report(
        self,
        user_id: int,
        matter_id: Optional[int],
        report_id: int,
        display_name: str,
        report_type: Optional[str] = None,
        asic_type: Optional[str] = None,
        is_paid: bool = True,
    ) -> Tuple[UserReport, bool]:
        """Attach a report to a user (and matter). Returns the link and whether it was created.

        Calling this again for the same (user, matter, report) is a no-op.
        """
        existing = await self.find_link(user_id, matter_id, report_id)
        if existing is not None:
            logger.info(f"Report {report_id} already linked to user {user_id} (matter {matter_id})")
            return existing, False

        link = UserReport(
            user_id=user_id,
            matter_id=matter_id,
            report_id=report_id,
            report_name=display_name,
            is_paid=is_paid,
            type=report_type,
            asic_type=asic_type,
        )
        self.db.add(link)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with another request linking the same triple.
            await self.db.rollback()
            existing = await self.find_link(user_id, matter_id, report_id)
            if existing is None:
                raise
            return existing, False
        await self.db.refresh(link)
        logger.info(f"Linked report {report_id} to user {user_id} (matter {matter_id})")
        return link, True

    async def list_for_user(self, user_id: int, matter_id: Optional[int] = None) -> list[UserReport]:
        query = select(UserReport).where(UserReport.user_id == user_id)
        if matter_id is not None:
            query = query.where(UserReport.matter_id == matter_id)
        result = await self.db.execute(query.order_by(UserReport.created_at.desc()))
        return list(result.scalars().all())
