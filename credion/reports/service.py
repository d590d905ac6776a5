import asyncio
import logging
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from credion.asic.models import Address, AsicExtract, Director, Entity, Shareholder, TaxDebt
from credion.config import settings
from credion.courts.models import Case, Insolvency
from credion.ingestion.normalizer import ReportIngestionService
from credion.matter.services import MatterService
from credion.ppsr.models import PpsrItem, PpsrSearch
from credion.reports.cache import ReportCacheIndex
from credion.reports.classifier import classify
from credion.reports.linkage import UserReportLinker
from credion.reports.models import Report, ReportIngestion, UserReport
from credion.reports.schemas import (
    IngestionFailureResponse,
    IngestionResult,
    ReportCreateResponse,
    ReportDetailResponse,
    ReportSectionCounts,
)
from credion.upstream.abr import sanitize_business_number
from credion.upstream.errors import FetchError
from credion.upstream.fetcher import ReportFetcher

logger = logging.getLogger(__name__)


class ReportCreationError(Exception):
    """The upstream fetch failed; any payment already taken stays in place."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ReportDeadlineExceeded(Exception):
    pass


class ReportService:
    def __init__(self, db: AsyncSession, fetcher: Optional[ReportFetcher] = None, deadline_seconds: Optional[float] = None):
        self.db = db
        self.fetcher = fetcher
        self.deadline_seconds = deadline_seconds if deadline_seconds is not None else settings.REPORT_DEADLINE_SECONDS

    async def create_report(
        self,
        user_id: int,
        abn: str,
        raw_type: str,
        matter_id: Optional[int] = None,
        payment_intent_id: Optional[str] = None,
        display_name: Optional[str] = None,
    ) -> ReportCreateResponse:
        """Produce (or reuse) a report, store its sections and link it to the user.

        Runs after payment has succeeded. Re-running with the same arguments
        is safe: ingestion and linkage are both idempotent.
        """
        try:
            return await asyncio.wait_for(
                self._create_report(user_id, abn, raw_type, matter_id, payment_intent_id, display_name),
                timeout=self.deadline_seconds,
            )
        except asyncio.TimeoutError as e:
            logger.error(f"Report creation for ABN {abn} ({raw_type}) exceeded {self.deadline_seconds}s")
            raise ReportDeadlineExceeded(
                f"Report creation did not finish within {self.deadline_seconds:g} seconds"
            ) from e

    async def _create_report(
        self,
        user_id: int,
        abn: str,
        raw_type: str,
        matter_id: Optional[int],
        payment_intent_id: Optional[str],
        display_name: Optional[str],
    ) -> ReportCreateResponse:
        classification = classify(raw_type)
        if not (classification.category or "").strip():
            raise HTTPException(status_code=422, detail=f"Unsupported report type: {raw_type}")

        business_number = sanitize_business_number(abn)
        if not business_number:
            raise HTTPException(status_code=422, detail="ABN is required")

        if matter_id is not None:
            await MatterService(self.db).get_matter(matter_id, user_id)

        category, subtype = classification.category, classification.subtype
        lookup = await ReportCacheIndex(self.db).lookup(business_number, category, subtype)
        if lookup.hit:
            report = lookup.report
            report_id, report_uuid, payload = report.id, report.uuid, report.report_data
            status = "cached"
        else:
            try:
                fetched = await self.fetcher.create_and_fetch(business_number, classification)
            except FetchError as e:
                logger.error(f"Report creation failed for ABN {business_number} ({category}/{subtype}): {e}")
                raise ReportCreationError(e.message, e.status_code) from e

            report = Report(
                uuid=fetched.uuid,
                upstream_report_id=fetched.upstream_report_id,
                abn=business_number,
                search_key=business_number,
                user_id=user_id,
                category=category,
                subtype=subtype,
                payment_intent_id=payment_intent_id,
                report_data=fetched.payload,
                is_active=True,
            )
            self.db.add(report)
            await self.db.commit()
            await self.db.refresh(report)
            report_id, report_uuid, payload = report.id, report.uuid, fetched.payload
            status = fetched.status_code
            logger.info(f"Stored report {report_id} ({category}/{subtype}) for ABN {business_number}")

        summary = await ReportIngestionService(self.db).ingest(report_id, payload or {})

        name = display_name or f"{business_number} - {category}" + (f" ({subtype})" if subtype else "")
        link, _ = await UserReportLinker(self.db).link_report(
            user_id,
            matter_id,
            report_id,
            name,
            report_type=category,
            asic_type=subtype,
        )

        return ReportCreateResponse(
            success=True,
            report_id=report_id,
            uuid=report_uuid,
            status=status,
            from_cache=lookup.hit,
            type=category,
            asic_type=subtype,
            user_report_id=link.id,
            ingestion=IngestionResult(
                skipped=summary.skipped,
                payload_kind=summary.payload_kind,
                counts=dict(summary.counts),
                failures=[
                    IngestionFailureResponse(kind=f.kind, source_id=f.source_id, error=f.error)
                    for f in summary.failures
                ],
            ),
        )

    async def list_user_reports(self, user_id: int, matter_id: Optional[int] = None) -> List[UserReport]:
        if matter_id is not None:
            await MatterService(self.db).get_matter(matter_id, user_id)
        return await UserReportLinker(self.db).list_for_user(user_id, matter_id)

    async def get_report_detail(self, report_id: int, user_id: int) -> ReportDetailResponse:
        """Report header plus how many rows each section produced.

        Only visible to users the report has been linked to.
        """
        owned = await self.db.execute(
            select(UserReport.id).where(UserReport.report_id == report_id, UserReport.user_id == user_id).limit(1)
        )
        report = await self.db.get(Report, report_id, populate_existing=True)
        if report is None or owned.first() is None:
            raise HTTPException(status_code=404, detail="Report not found")

        entity_name = await self._scalar(select(Entity.name).where(Entity.report_id == report_id))
        tax_debt_amount = await self._scalar(select(TaxDebt.amount).where(TaxDebt.report_id == report_id))
        ingested = await self._scalar(select(ReportIngestion.id).where(ReportIngestion.report_id == report_id))

        extract_ids = select(AsicExtract.id).where(AsicExtract.report_id == report_id)
        search_ids = select(PpsrSearch.id).where(PpsrSearch.report_id == report_id)
        sections = ReportSectionCounts(
            asic_extracts=await self._count(AsicExtract, AsicExtract.report_id == report_id),
            addresses=await self._count(Address, Address.asic_extract_id.in_(extract_ids)),
            directors=await self._count(Director, Director.asic_extract_id.in_(extract_ids)),
            shareholders=await self._count(Shareholder, Shareholder.asic_extract_id.in_(extract_ids)),
            cases=await self._count(Case, Case.report_id == report_id),
            insolvencies=await self._count(Insolvency, Insolvency.report_id == report_id),
            ppsr_searches=await self._count(PpsrSearch, PpsrSearch.report_id == report_id),
            ppsr_items=await self._count(PpsrItem, PpsrItem.ppsr_search_id.in_(search_ids)),
        )

        return ReportDetailResponse(
            id=report.id,
            uuid=report.uuid,
            abn=report.abn,
            category=report.category,
            subtype=report.subtype,
            created_at=report.created_at,
            entity_name=entity_name,
            tax_debt_amount=tax_debt_amount,
            ingested=ingested is not None,
            sections=sections,
        )

    async def _scalar(self, query):
        result = await self.db.execute(query.limit(1))
        return result.scalars().first()

    async def _count(self, model, condition) -> int:
        result = await self.db.execute(select(func.count(model.id)).where(condition))
        return result.scalar_one()
