from enum import Enum
from sqlalchemy import Column, String, Integer, Enum as SAEnum
from sqlalchemy.orm import relationship
from credion.database import Base
from credion.shared.models import AuditMixin

class MatterState(str, Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    ARCHIVED = "ARCHIVED"

class Matter(Base, AuditMixin):
    """User-defined grouping of reports, e.g. a due diligence file."""
    __tablename__ = "matters"

    user_id = Column(Integer, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(String, nullable=True)
    status = Column(SAEnum(MatterState), default=MatterState.OPEN, nullable=False)

    user_reports = relationship("credion.reports.models.UserReport", back_populates="matter", cascade="all, delete-orphan")
