from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class ReportCreateRequest(BaseModel):
    abn: str
    type: str = Field(min_length=1)
    matter_id: Optional[int] = None
    payment_intent_id: Optional[str] = None
    report_name: Optional[str] = None


class IngestionFailureResponse(BaseModel):
    kind: str
    source_id: Optional[str] = None
    error: str


class IngestionResult(BaseModel):
    skipped: bool
    payload_kind: Optional[str] = None
    counts: Dict[str, int] = {}
    failures: List[IngestionFailureResponse] = []


class ReportCreateResponse(BaseModel):
    success: bool
    report_id: int
    uuid: Optional[str] = None
    status: Union[int, str]
    from_cache: bool
    type: str
    asic_type: Optional[str] = None
    user_report_id: int
    ingestion: IngestionResult


class UserReportResponse(BaseModel):
    id: int
    user_id: int
    matter_id: Optional[int] = None
    report_id: int
    report_name: str
    is_paid: Optional[bool] = None
    type: Optional[str] = None
    asic_type: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReportSectionCounts(BaseModel):
    asic_extracts: int = 0
    addresses: int = 0
    directors: int = 0
    shareholders: int = 0
    cases: int = 0
    insolvencies: int = 0
    ppsr_searches: int = 0
    ppsr_items: int = 0


class ReportDetailResponse(BaseModel):
    id: int
    uuid: Optional[str] = None
    abn: Optional[str] = None
    category: str
    subtype: Optional[str] = None
    created_at: datetime
    entity_name: Optional[str] = None
    tax_debt_amount: Optional[Decimal] = None
    ingested: bool = False
    sections: ReportSectionCounts
