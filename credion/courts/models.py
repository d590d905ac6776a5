from sqlalchemy import Column, String, Integer, Text, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from credion.database import Base
from credion.shared.models import IntegerIdMixin, JSONType


class Case(Base, IntegerIdMixin):
    """Court matter naming the searched business."""
    __tablename__ = "cases"

    report_id = Column(ForeignKey("reports.id", ondelete="CASCADE"), nullable=False, index=True)
    uuid = Column(String(64), nullable=True, index=True)
    type = Column(String, nullable=True)
    notification_time = Column(String(64), nullable=True)
    court_name = Column(String, nullable=True)
    state = Column(String, nullable=True)
    court_type = Column(String, nullable=True)
    case_type = Column(String, nullable=True)
    case_number = Column(String, nullable=True)
    jurisdiction = Column(String, nullable=True)
    suburb = Column(String, nullable=True)
    next_hearing_date = Column(String(64), nullable=True)
    case_name = Column(Text, nullable=True)
    url = Column(Text, nullable=True)
    total_parties = Column(Integer, nullable=True)
    total_documents = Column(Integer, nullable=True)
    total_hearings = Column(Integer, nullable=True)
    timezone = Column(String, nullable=True)
    internal_reference = Column(String, nullable=True)
    name = Column(String, nullable=True)
    other_names = Column(Text, nullable=True)
    insolvency_risk_factor = Column(Numeric(10, 2), nullable=True)
    party_role = Column(String, nullable=True)
    most_recent_event = Column(String(64), nullable=True)
    match_on = Column(Text, nullable=True)

    report = relationship("Report", back_populates="cases")
    parties = relationship("CaseParty", back_populates="case", cascade="all, delete-orphan")
    hearings = relationship("CaseHearing", back_populates="case", cascade="all, delete-orphan")
    documents = relationship("CaseDocument", back_populates="case", cascade="all, delete-orphan")
    applications = relationship("CaseApplication", back_populates="case", cascade="all, delete-orphan")
    judgments = relationship("CaseJudgment", back_populates="case", cascade="all, delete-orphan")


class CaseParty(Base, IntegerIdMixin):
    __tablename__ = "case_parties"

    case_id = Column(ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=True)
    type = Column(String, nullable=True)
    role = Column(String, nullable=True)
    offence = Column(Text, nullable=True)
    plea = Column(String, nullable=True)
    representative_firm = Column(String, nullable=True)
    representative_name = Column(String, nullable=True)
    address = Column(Text, nullable=True)
    phone = Column(String, nullable=True)
    fax = Column(String, nullable=True)
    abn = Column(String(32), nullable=True)
    acn = Column(String(32), nullable=True)

    case = relationship("Case", back_populates="parties")


class CaseHearing(Base, IntegerIdMixin):
    __tablename__ = "case_hearings"

    case_id = Column(ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, index=True)
    datetime = Column(String(64), nullable=True)
    officer = Column(String, nullable=True)
    court_room = Column(String, nullable=True)
    court_name = Column(String, nullable=True)
    court_phone = Column(String, nullable=True)
    court_address = Column(Text, nullable=True)
    court_suburb = Column(String, nullable=True)
    type = Column(String, nullable=True)
    list_no = Column(String, nullable=True)
    outcome = Column(Text, nullable=True)

    case = relationship("Case", back_populates="hearings")


class CaseDocument(Base, IntegerIdMixin):
    __tablename__ = "case_documents"

    case_id = Column(ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, index=True)
    datetime = Column(String(64), nullable=True)
    title = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    filed_by = Column(String, nullable=True)

    case = relationship("Case", back_populates="documents")


class CaseApplication(Base, IntegerIdMixin):
    __tablename__ = "case_applications"

    case_id = Column(ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(Text, nullable=True)
    type = Column(String, nullable=True)
    status = Column(String, nullable=True)
    date_filed = Column(String(64), nullable=True)
    date_finalised = Column(String(64), nullable=True)

    case = relationship("Case", back_populates="applications")


class CaseJudgment(Base, IntegerIdMixin):
    __tablename__ = "case_judgments"

    case_id = Column(ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, index=True)
    uuid = Column(String(64), nullable=True)
    unique_id = Column(String, nullable=True)
    number = Column(String, nullable=True)
    case_number = Column(String, nullable=True)
    title = Column(Text, nullable=True)
    date = Column(String(64), nullable=True)
    url = Column(Text, nullable=True)
    state = Column(String, nullable=True)
    court = Column(String, nullable=True)
    court_type = Column(String, nullable=True)
    location = Column(String, nullable=True)
    officer = Column(String, nullable=True)
    case_type = Column(String, nullable=True)
    catchwords = Column(Text, nullable=True)
    legislation = Column(Text, nullable=True)
    cases_cited = Column(Text, nullable=True)
    result = Column(Text, nullable=True)
    division = Column(String, nullable=True)
    registry_name = Column("registry", String, nullable=True)
    national_practice_area = Column(String, nullable=True)
    sub_area = Column(String, nullable=True)
    category = Column(String, nullable=True)
    number_of_paragraphs = Column(Integer, nullable=True)
    date_of_last_submission = Column(String(64), nullable=True)
    orders = Column(Text, nullable=True)
    reasons_for_judgment = Column(Text, nullable=True)
    prior_decisions = Column(JSONType, nullable=False, default=list)

    case = relationship("Case", back_populates="judgments")


class Insolvency(Base, IntegerIdMixin):
    """Insolvency notice (ASIC published notices, bankruptcy records)."""
    __tablename__ = "insolvencies"

    report_id = Column(ForeignKey("reports.id", ondelete="CASCADE"), nullable=False, index=True)
    uuid = Column(String(64), nullable=True, index=True)
    type = Column(String, nullable=True)
    notification_time = Column(String(64), nullable=True)
    court_name = Column(String, nullable=True)
    case_type = Column(String, nullable=True)
    case_number = Column(String, nullable=True)
    asic_notice_id = Column(String, nullable=True)
    case_name = Column(Text, nullable=True)
    total_parties = Column(Integer, nullable=True)
    internal_reference = Column(String, nullable=True)
    name = Column(String, nullable=True)
    other_names = Column(Text, nullable=True)
    insolvency_risk_factor = Column(Numeric(10, 2), nullable=True)
    match_on = Column(Text, nullable=True)

    report = relationship("Report", back_populates="insolvencies")
    parties = relationship("InsolvencyParty", back_populates="insolvency", cascade="all, delete-orphan")


class InsolvencyParty(Base, IntegerIdMixin):
    __tablename__ = "insolvency_parties"

    insolvency_id = Column(ForeignKey("insolvencies.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=True)
    acn = Column(String(32), nullable=True)
    url = Column(Text, nullable=True)

    insolvency = relationship("Insolvency", back_populates="parties")
