from datetime import datetime
from sqlalchemy import Column, DateTime, Integer, JSON
from sqlalchemy.dialects.postgresql import JSONB

# JSONB on Postgres, plain JSON elsewhere (sqlite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")

class IntegerIdMixin:
    id = Column(Integer, primary_key=True, autoincrement=True)

class TimestampMixin:
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

class AuditMixin(IntegerIdMixin, TimestampMixin):
    """Combines the synthetic id and timestamps for standard entities."""
    pass
