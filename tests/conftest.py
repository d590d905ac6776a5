import copy
import os
from typing import Any, AsyncGenerator, Dict, List, Optional

# Point the app's module-level engine at sqlite before anything imports it.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from credion.main import app
from credion.config import settings
from credion.database import get_db, Base
from credion.reports.classifier import ReportClassification
from credion.reports.models import Report
from credion.upstream.alares import FetchedReport
from credion.upstream.fetcher import get_report_fetcher

# Registers every table on Base.metadata
from credion.matter.models import Matter  # noqa: F401
from credion.asic.models import Entity  # noqa: F401
from credion.courts.models import Case  # noqa: F401
from credion.ppsr.models import PpsrSearch  # noqa: F401

ABN = "51824753556"


class FakeFetcher:
    """Stands in for the upstream fetcher; returns a copy of ``payload`` each call."""

    def __init__(self, payload: Optional[Dict[str, Any]] = None):
        self.payload = payload or {}
        self.error: Optional[Exception] = None
        self.calls: List[tuple] = []

    async def create_and_fetch(self, abn: str, classification: ReportClassification) -> FetchedReport:
        self.calls.append((abn, classification))
        if self.error is not None:
            raise self.error
        return FetchedReport(
            uuid=f"uuid-{len(self.calls)}",
            upstream_report_id=str(1000 + len(self.calls)),
            status_code=200,
            payload=copy.deepcopy(self.payload),
        )


def asic_payload() -> Dict[str, Any]:
    return {
        "entity": {"name": "ACME PTY LTD", "abn": ABN},
        "asic_extracts": [
            {
                "id": "ext-1",
                "directors": [
                    {"name": "Jane Doe", "type": "Director", "address": {"suburb": "Sydney", "state": "NSW"}},
                ],
            }
        ],
    }


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Fresh in-memory database per test."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    TestingSessionLocal = sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with TestingSessionLocal() as session:
        yield session

    await test_engine.dispose()


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher(asic_payload())


@pytest_asyncio.fixture(scope="function")
async def async_client(db_session: AsyncSession, fake_fetcher: FakeFetcher) -> AsyncGenerator[AsyncClient, None]:
    """Client for testing API endpoints."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_report_fetcher] = lambda: fake_fetcher

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


def _headers(user_id: int) -> Dict[str, str]:
    token = jwt.encode({"userId": user_id}, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers() -> Dict[str, str]:
    return _headers(1)


@pytest.fixture
def other_auth_headers() -> Dict[str, str]:
    return _headers(2)


@pytest_asyncio.fixture
async def report(db_session: AsyncSession) -> Report:
    """A bare ASIC report row with nothing ingested yet."""
    row = Report(abn=ABN, search_key=ABN, user_id=1, category="ASIC", subtype="Current", is_active=True)
    db_session.add(row)
    await db_session.commit()
    await db_session.refresh(row)
    return row


@pytest.fixture
def asic_report_payload():
    """Factory for the ACME / Jane Doe ASIC current extract payload."""
    return asic_payload
