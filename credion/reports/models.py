from enum import Enum
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, UniqueConstraint, Index, text
from sqlalchemy.orm import relationship
from credion.database import Base
from credion.shared.models import AuditMixin, IntegerIdMixin, JSONType


class ReportCategory(str, Enum):
    ASIC = "ASIC"
    COURT = "COURT"
    ATO = "ATO"
    LAND_TITLE = "LAND TITLE"
    PPSR = "PPSR"
    PROPERTY = "PROPERTY"
    DIRECTOR_PPSR = "DIRECTOR PPSR"
    DIRECTOR_BANKRUPTCY = "DIRECTOR BANKRUPTCY"
    DIRECTOR_PROPERTY = "DIRECTOR PROPERTY"
    DIRECTOR_RELATED = "DIRECTOR RELATED"


class AsicSubtype(str, Enum):
    CURRENT = "Current"
    HISTORICAL = "Historical"
    COMPANY = "Company"
    PERSONAL = "Personal"
    DOCUMENT_SEARCH = "Document Search"


class Report(Base, AuditMixin):
    """One purchased report instance. Append-only once created."""
    __tablename__ = "reports"
    __table_args__ = (
        Index("ix_reports_cache_key", "abn", "category", "subtype", "created_at"),
    )

    uuid = Column(String(64), nullable=True, index=True)  # upstream correlation id
    upstream_report_id = Column(String(64), nullable=True)
    abn = Column(String(32), nullable=True, index=True)
    search_key = Column(String(500), nullable=False)
    user_id = Column(Integer, nullable=True, index=True)
    category = Column(String(64), nullable=False)
    subtype = Column(String(64), nullable=True)
    payment_intent_id = Column(String(255), nullable=True)
    report_data = Column(JSONType, nullable=True)  # raw upstream payload
    is_active = Column(Boolean, default=True, nullable=False)

    entity = relationship("Entity", back_populates="report", uselist=False, cascade="all, delete-orphan")
    tax_debt = relationship("TaxDebt", back_populates="report", uselist=False, cascade="all, delete-orphan")
    asic_extracts = relationship("AsicExtract", back_populates="report", cascade="all, delete-orphan")
    cases = relationship("Case", back_populates="report", cascade="all, delete-orphan")
    insolvencies = relationship("Insolvency", back_populates="report", cascade="all, delete-orphan")
    ppsr_searches = relationship("PpsrSearch", back_populates="report", cascade="all, delete-orphan")
    ingestion = relationship("ReportIngestion", back_populates="report", uselist=False, cascade="all, delete-orphan")
    user_reports = relationship("UserReport", back_populates="report", cascade="all, delete-orphan")


class ReportIngestion(Base, IntegerIdMixin):
    """Claim row written before a report's sections are stored.

    The unique report_id is what stops two concurrent ingestions of the same
    report from both writing rows.
    """
    __tablename__ = "report_ingestions"

    report_id = Column(ForeignKey("reports.id", ondelete="CASCADE"), nullable=False, unique=True)
    payload_kind = Column(String(32), nullable=False)  # "standard" | "ppsr"
    started_at = Column(DateTime, nullable=False)
    completed_at = Column(DateTime, nullable=True)
    failed_aggregates = Column(Integer, default=0, nullable=False)

    report = relationship("Report", back_populates="ingestion")


class UserReport(Base, AuditMixin):
    """Links a stored report to the user (and matter) that requested it."""
    __tablename__ = "user_reports"
    __table_args__ = (
        UniqueConstraint("user_id", "matter_id", "report_id", name="uq_user_reports_user_matter_report"),
        # NULLs are distinct in the constraint above
        Index(
            "uq_user_reports_user_report_no_matter",
            "user_id",
            "report_id",
            unique=True,
            postgresql_where=text("matter_id IS NULL"),
            sqlite_where=text("matter_id IS NULL"),
        ),
    )

    user_id = Column(Integer, nullable=False, index=True)
    matter_id = Column(ForeignKey("matters.id", ondelete="CASCADE"), nullable=True, index=True)
    report_id = Column(ForeignKey("reports.id", ondelete="CASCADE"), nullable=False, index=True)
    report_name = Column(String(255), nullable=False)
    is_paid = Column(Boolean, default=True, nullable=True)
    type = Column(String(64), nullable=True)
    asic_type = Column(String(64), nullable=True)

    report = relationship("Report", back_populates="user_reports")
    matter = relationship("credion.matter.models.Matter", back_populates="user_reports")
