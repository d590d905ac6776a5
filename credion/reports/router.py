from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from credion.database import get_db
from credion.auth.dependencies import get_current_user_id
from credion.reports.schemas import (
    ReportCreateRequest,
    ReportCreateResponse,
    ReportDetailResponse,
    UserReportResponse,
)
from credion.reports.service import ReportCreationError, ReportDeadlineExceeded, ReportService
from credion.upstream.fetcher import ReportFetcher, get_report_fetcher

router = APIRouter(tags=["reports"])


@router.post("/reports", response_model=ReportCreateResponse)
async def create_report(
    request: ReportCreateRequest,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    fetcher: ReportFetcher = Depends(get_report_fetcher),
):
    """Create (or reuse from cache) a paid report and link it to the caller."""
    service = ReportService(db, fetcher)
    try:
        return await service.create_report(
            user_id=user_id,
            abn=request.abn,
            raw_type=request.type,
            matter_id=request.matter_id,
            payment_intent_id=request.payment_intent_id,
            display_name=request.report_name,
        )
    except ReportCreationError as e:
        raise HTTPException(status_code=502, detail=f"Report creation failed: {e.message}")
    except ReportDeadlineExceeded as e:
        raise HTTPException(status_code=504, detail=str(e))


@router.get("/reports/{report_id}", response_model=ReportDetailResponse)
async def get_report(
    report_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    service = ReportService(db)
    return await service.get_report_detail(report_id, user_id)


@router.get("/user-reports", response_model=List[UserReportResponse])
async def list_user_reports(
    matter_id: Optional[int] = None,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    service = ReportService(db)
    return await service.list_user_reports(user_id, matter_id)


@router.get("/matters/{matter_id}/reports", response_model=List[UserReportResponse])
async def list_matter_reports(
    matter_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Reports linked under one of the caller's matters."""
    service = ReportService(db)
    return await service.list_user_reports(user_id, matter_id)
