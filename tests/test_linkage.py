import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from credion.matter.models import Matter
from credion.reports.linkage import UserReportLinker
from credion.reports.models import UserReport


async def _links(db):
    result = await db.execute(select(func.count(UserReport.id)))
    return result.scalar_one()


@pytest.mark.asyncio
async def test_link_is_created_once(db_session, report):
    report_id = report.id
    linker = UserReportLinker(db_session)

    first, created = await linker.link_report(1, None, report_id, "ACME - ASIC")
    again, created_again = await linker.link_report(1, None, report_id, "ACME - ASIC")

    assert created
    assert not created_again
    assert again.id == first.id
    assert await _links(db_session) == 1


@pytest.mark.asyncio
async def test_matter_and_user_make_separate_links(db_session, report):
    report_id = report.id
    matter = Matter(user_id=1, name="Due diligence")
    db_session.add(matter)
    await db_session.commit()
    matter_id = matter.id

    linker = UserReportLinker(db_session)
    await linker.link_report(1, None, report_id, "ACME")
    await linker.link_report(1, matter_id, report_id, "ACME")
    await linker.link_report(2, None, report_id, "ACME")
    await linker.link_report(1, matter_id, report_id, "ACME")

    assert await _links(db_session) == 3
    assert len(await linker.list_for_user(1)) == 2
    under_matter = await linker.list_for_user(1, matter_id)
    assert [link.matter_id for link in under_matter] == [matter_id]


@pytest.mark.asyncio
async def test_link_records_report_type(db_session, report):
    link, _ = await UserReportLinker(db_session).link_report(
        1, None, report.id, "ACME", report_type="ASIC", asic_type="Current", is_paid=True
    )
    assert link.type == "ASIC"
    assert link.asic_type == "Current"
    assert link.is_paid is True


@pytest.mark.asyncio
async def test_duplicate_link_without_matter_is_rejected_by_the_database(db_session, report):
    report_id = report.id
    db_session.add(UserReport(user_id=1, matter_id=None, report_id=report_id, report_name="ACME"))
    await db_session.commit()

    db_session.add(UserReport(user_id=1, matter_id=None, report_id=report_id, report_name="ACME again"))
    with pytest.raises(IntegrityError):
        await db_session.commit()
    await db_session.rollback()

    assert await _links(db_session) == 1


@pytest.mark.asyncio
async def test_concurrent_link_without_matter_returns_the_winner(db_session, report, monkeypatch):
    report_id = report.id
    winner, _ = await UserReportLinker(db_session).link_report(1, None, report_id, "ACME")
    winner_id = winner.id

    original = UserReportLinker.find_link
    calls = []

    async def find_link_after_race(self, *args):
        # The first check runs before the other request commits
        calls.append(args)
        if len(calls) == 1:
            return None
        return await original(self, *args)

    monkeypatch.setattr(UserReportLinker, "find_link", find_link_after_race)

    link, created = await UserReportLinker(db_session).link_report(1, None, report_id, "ACME")

    assert not created
    assert link.id == winner_id
    assert await _links(db_session) == 1
