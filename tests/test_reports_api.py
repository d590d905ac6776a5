from datetime import datetime, timedelta

import pytest
from fastapi import HTTPException
from sqlalchemy import func, select

from credion.asic.models import Director
from credion.reports.models import Report, UserReport
from credion.reports.service import ReportService
from credion.upstream.errors import FetchError

ABN = "51824753556"


async def _count(db, model):
    result = await db.execute(select(func.count(model.id)))
    return result.scalar_one()


@pytest.mark.asyncio
async def test_create_report_fetches_ingests_and_links(async_client, auth_headers, db_session, fake_fetcher):
    response = await async_client.post(
        "/v1/reports", json={"abn": ABN, "type": "asic-current"}, headers=auth_headers
    )
    assert response.status_code == 200
    data = response.json()

    assert data["success"] is True
    assert data["from_cache"] is False
    assert data["status"] == 200
    assert data["type"] == "ASIC"
    assert data["asic_type"] == "Current"
    assert data["uuid"] == "uuid-1"
    assert data["ingestion"]["skipped"] is False
    assert data["ingestion"]["counts"]["directors"] == 1

    assert len(fake_fetcher.calls) == 1
    abn, classification = fake_fetcher.calls[0]
    assert abn == ABN
    assert classification.category == "ASIC"

    report = (await db_session.execute(select(Report))).scalars().one()
    assert report.id == data["report_id"]
    assert report.category == "ASIC"
    assert report.subtype == "Current"
    assert report.user_id == 1
    assert await _count(db_session, Director) == 1


@pytest.mark.asyncio
async def test_second_request_is_served_from_cache(async_client, auth_headers, db_session, fake_fetcher):
    first = await async_client.post("/v1/reports", json={"abn": ABN, "type": "asic-current"}, headers=auth_headers)
    second = await async_client.post("/v1/reports", json={"abn": ABN, "type": "asic-current"}, headers=auth_headers)

    assert second.status_code == 200
    data = second.json()
    assert data["from_cache"] is True
    assert data["status"] == "cached"
    assert data["report_id"] == first.json()["report_id"]
    assert data["user_report_id"] == first.json()["user_report_id"]
    assert data["ingestion"]["skipped"] is True

    assert len(fake_fetcher.calls) == 1
    assert await _count(db_session, Report) == 1
    assert await _count(db_session, Director) == 1
    assert await _count(db_session, UserReport) == 1


@pytest.mark.asyncio
async def test_cache_hit_links_report_for_another_user(async_client, auth_headers, other_auth_headers, db_session, fake_fetcher):
    await async_client.post("/v1/reports", json={"abn": ABN, "type": "asic-current"}, headers=auth_headers)
    response = await async_client.post("/v1/reports", json={"abn": ABN, "type": "asic-current"}, headers=other_auth_headers)

    assert response.json()["from_cache"] is True
    assert len(fake_fetcher.calls) == 1
    assert await _count(db_session, UserReport) == 2


@pytest.mark.asyncio
async def test_stale_report_is_refetched(async_client, auth_headers, db_session, fake_fetcher):
    old = datetime.utcnow() - timedelta(days=8)
    db_session.add(Report(abn=ABN, search_key=ABN, category="ASIC", subtype="Current", is_active=True, created_at=old, updated_at=old))
    await db_session.commit()

    response = await async_client.post("/v1/reports", json={"abn": ABN, "type": "asic-current"}, headers=auth_headers)

    assert response.json()["from_cache"] is False
    assert len(fake_fetcher.calls) == 1
    assert await _count(db_session, Report) == 2


@pytest.mark.asyncio
async def test_upstream_failure_maps_to_bad_gateway(async_client, auth_headers, db_session, fake_fetcher):
    fake_fetcher.error = FetchError("Report creation failed: boom", status_code=500)

    response = await async_client.post("/v1/reports", json={"abn": ABN, "type": "asic-current"}, headers=auth_headers)

    assert response.status_code == 502
    assert response.json()["detail"].startswith("Report creation failed")
    assert await _count(db_session, Report) == 0
    assert await _count(db_session, UserReport) == 0


@pytest.mark.asyncio
async def test_unsupported_type_is_rejected(async_client, auth_headers, fake_fetcher):
    response = await async_client.post("/v1/reports", json={"abn": ABN, "type": "director"}, headers=auth_headers)

    assert response.status_code == 422
    assert fake_fetcher.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("report_type", ["", "   "])
async def test_blank_type_is_rejected(async_client, auth_headers, fake_fetcher, report_type):
    response = await async_client.post("/v1/reports", json={"abn": ABN, "type": report_type}, headers=auth_headers)

    assert response.status_code == 422
    assert fake_fetcher.calls == []


@pytest.mark.asyncio
async def test_service_rejects_blank_type_without_fetching(db_session, fake_fetcher):
    with pytest.raises(HTTPException) as exc_info:
        await ReportService(db_session, fake_fetcher).create_report(
            user_id=1, abn=ABN, raw_type="", matter_id=None, payment_intent_id=None, display_name=None
        )

    assert exc_info.value.status_code == 422
    assert fake_fetcher.calls == []
    assert await _count(db_session, Report) == 0


@pytest.mark.asyncio
async def test_requires_authentication(async_client):
    response = await async_client.post("/v1/reports", json={"abn": ABN, "type": "asic-current"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_report_detail_and_user_reports(async_client, auth_headers, other_auth_headers):
    created = (await async_client.post(
        "/v1/reports", json={"abn": ABN, "type": "asic-current", "report_name": "ACME extract"}, headers=auth_headers
    )).json()

    detail = await async_client.get(f"/v1/reports/{created['report_id']}", headers=auth_headers)
    assert detail.status_code == 200
    body = detail.json()
    assert body["entity_name"] == "ACME PTY LTD"
    assert body["ingested"] is True
    assert body["sections"]["asic_extracts"] == 1
    assert body["sections"]["directors"] == 1
    assert body["sections"]["addresses"] == 1

    hidden = await async_client.get(f"/v1/reports/{created['report_id']}", headers=other_auth_headers)
    assert hidden.status_code == 404

    reports = await async_client.get("/v1/user-reports", headers=auth_headers)
    assert [r["report_name"] for r in reports.json()] == ["ACME extract"]
    assert (await async_client.get("/v1/user-reports", headers=other_auth_headers)).json() == []


@pytest.mark.asyncio
async def test_report_under_matter(async_client, auth_headers, other_auth_headers):
    matter = (await async_client.post("/v1/matters", json={"name": "Acquisition"}, headers=auth_headers)).json()

    created = await async_client.post(
        "/v1/reports", json={"abn": ABN, "type": "asic-current", "matter_id": matter["id"]}, headers=auth_headers
    )
    assert created.status_code == 200

    listed = await async_client.get(f"/v1/matters/{matter['id']}/reports", headers=auth_headers)
    assert [r["matter_id"] for r in listed.json()] == [matter["id"]]

    foreign = await async_client.post(
        "/v1/reports", json={"abn": ABN, "type": "asic-current", "matter_id": matter["id"]}, headers=other_auth_headers
    )
    assert foreign.status_code == 404
