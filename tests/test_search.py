import pytest

from credion.main import app
from credion.search.service import BusinessSearchService, get_search_service
from credion.upstream.errors import FetchError


class FakeAbr:
    def __init__(self):
        self.lookups = []
        self.searches = []
        self.error = None

    async def lookup_abn(self, abn):
        self.lookups.append(abn)
        if self.error:
            raise self.error
        return {
            "Abn": abn,
            "EntityName": "ACME PTY LTD",
            "AbnStatus": "Active",
            "EntityTypeName": "Australian Private Company",
            "AddressState": "NSW",
            "AddressPostcode": "2000",
        }

    async def search_by_name(self, name, max_results=10):
        self.searches.append(name)
        return [{"Abn": "51824753556", "Name": "ACME PTY LTD", "State": "NSW", "Postcode": "2000"}, {"Name": "no abn"}]


@pytest.fixture
def fake_abr(async_client):
    abr = FakeAbr()
    app.dependency_overrides[get_search_service] = lambda: BusinessSearchService(abr)
    return abr


@pytest.mark.asyncio
async def test_digits_search_by_abn(async_client, auth_headers, fake_abr):
    response = await async_client.post("/v1/search", json={"query": "51 824 753 556"}, headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["by_abn"] is True
    assert fake_abr.lookups == ["51824753556"]
    assert body["results"] == [
        {
            "abn": "51824753556",
            "name": "ACME PTY LTD",
            "entity_status": "Active",
            "entity_type": "Australian Private Company",
            "address": "NSW 2000",
        }
    ]


@pytest.mark.asyncio
async def test_text_search_by_name(async_client, auth_headers, fake_abr):
    response = await async_client.post("/v1/search", json={"query": "acme"}, headers=auth_headers)

    body = response.json()
    assert body["by_abn"] is False
    assert fake_abr.searches == ["acme"]
    assert [r["abn"] for r in body["results"]] == ["51824753556"]


@pytest.mark.asyncio
async def test_blank_query_is_rejected(async_client, auth_headers, fake_abr):
    response = await async_client.post("/v1/search", json={"query": "   "}, headers=auth_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_abr_failure_maps_to_bad_gateway(async_client, auth_headers, fake_abr):
    fake_abr.error = FetchError("ABN lookup timed out")
    response = await async_client.post("/v1/search", json={"query": "51824753556"}, headers=auth_headers)
    assert response.status_code == 502
