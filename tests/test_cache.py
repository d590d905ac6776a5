from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from credion.reports.cache import ReportCacheIndex
from credion.reports.models import Report

ABN = "51824753556"
NOW = datetime(2026, 3, 1, 12, 0, 0)


async def _report(db, days_old, category="ASIC", subtype="Current", abn=ABN, is_active=True):
    row = Report(
        abn=abn,
        search_key=abn,
        category=category,
        subtype=subtype,
        is_active=is_active,
        created_at=NOW - timedelta(days=days_old),
        updated_at=NOW - timedelta(days=days_old),
    )
    db.add(row)
    await db.commit()
    return row.id


@pytest.mark.asyncio
async def test_six_day_old_report_is_a_hit(db_session):
    report_id = await _report(db_session, days_old=6)
    result = await ReportCacheIndex(db_session, max_age_days=7).lookup(ABN, "ASIC", "Current", now=NOW)
    assert result.hit
    assert result.report.id == report_id


@pytest.mark.asyncio
async def test_eight_day_old_report_is_a_miss(db_session):
    await _report(db_session, days_old=8)
    result = await ReportCacheIndex(db_session, max_age_days=7).lookup(ABN, "ASIC", "Current", now=NOW)
    assert not result.hit
    assert result.report is None


@pytest.mark.asyncio
async def test_newest_fresh_report_wins(db_session):
    await _report(db_session, days_old=5)
    newest = await _report(db_session, days_old=1)
    result = await ReportCacheIndex(db_session).lookup(ABN, "ASIC", "Current", now=NOW)
    assert result.report.id == newest


@pytest.mark.asyncio
async def test_subtype_and_category_must_match(db_session):
    await _report(db_session, days_old=1, subtype="Historical")
    await _report(db_session, days_old=1, category="COURT", subtype=None)
    index = ReportCacheIndex(db_session)

    assert not (await index.lookup(ABN, "ASIC", "Current", now=NOW)).hit
    assert (await index.lookup(ABN, "ASIC", "Historical", now=NOW)).hit
    # Null subtype only matches null subtype
    assert (await index.lookup(ABN, "COURT", None, now=NOW)).hit
    assert not (await index.lookup(ABN, "COURT", "Current", now=NOW)).hit


@pytest.mark.asyncio
async def test_other_abn_and_inactive_reports_are_ignored(db_session):
    await _report(db_session, days_old=1, abn="11111111111")
    await _report(db_session, days_old=1, is_active=False)
    result = await ReportCacheIndex(db_session).lookup(ABN, "ASIC", "Current", now=NOW)
    assert not result.hit


@pytest.mark.asyncio
async def test_lookup_error_is_treated_as_miss(db_session, monkeypatch, caplog):
    async def broken_execute(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection lost"))

    monkeypatch.setattr(AsyncSession, "execute", broken_execute)
    result = await ReportCacheIndex(db_session).lookup(ABN, "ASIC", "Current", now=NOW)
    assert not result.hit
    assert "Report cache lookup failed" in caplog.text
