import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_create_and_list_matters(async_client: AsyncClient, auth_headers, other_auth_headers):
    response = await async_client.post(
        "/v1/matters", json={"name": "Acme acquisition", "description": "Due diligence"}, headers=auth_headers
    )
    assert response.status_code == 200
    matter = response.json()
    assert matter["status"] == "OPEN"
    assert matter["user_id"] == 1

    mine = await async_client.get("/v1/matters", headers=auth_headers)
    assert [m["name"] for m in mine.json()] == ["Acme acquisition"]

    theirs = await async_client.get("/v1/matters", headers=other_auth_headers)
    assert theirs.json() == []

    hidden = await async_client.get(f"/v1/matters/{matter['id']}", headers=other_auth_headers)
    assert hidden.status_code == 404


@pytest.mark.asyncio
async def test_status_transitions(async_client: AsyncClient, auth_headers):
    matter = (await async_client.post("/v1/matters", json={"name": "Audit"}, headers=auth_headers)).json()

    closed = await async_client.patch(f"/v1/matters/{matter['id']}/status?status=CLOSED", headers=auth_headers)
    assert closed.status_code == 200
    assert closed.json()["status"] == "CLOSED"

    archived = await async_client.patch(f"/v1/matters/{matter['id']}/status?status=ARCHIVED", headers=auth_headers)
    assert archived.json()["status"] == "ARCHIVED"

    reopened = await async_client.patch(f"/v1/matters/{matter['id']}/status?status=OPEN", headers=auth_headers)
    assert reopened.status_code == 400
