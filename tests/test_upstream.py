import json

import httpx
import pytest

from credion.reports.classifier import classify
from credion.upstream.abr import AbrClient, sanitize_business_number, unwrap_jsonp
from credion.upstream.alares import AlaresClient, build_create_params
from credion.upstream.backoff import FixedBackoff, NoBackoff
from credion.upstream.errors import FetchError, UpstreamPayloadError
from credion.upstream.ppsr import PpsrCloudClient

BASE = "https://alares.test/api"


def _factory(handler):
    return lambda: httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_create_params_carry_category_flag():
    assert build_create_params("123", classify("asic-historical")) == {
        "type": "company",
        "abn": "123",
        "alares_report": "1",
        "asic_historical": "1",
    }
    assert build_create_params("123", classify("court"))["court"] == "1"
    assert "ato" in build_create_params("123", classify("ato"))


def test_fixed_backoff_is_constant():
    policy = FixedBackoff(2.0)
    assert [policy.next_delay(n) for n in (1, 2, 5)] == [2.0, 2.0, 2.0]
    assert NoBackoff().next_delay(3) == 0.0


@pytest.mark.asyncio
async def test_alares_create_then_fetch():
    seen = []

    def handler(request: httpx.Request):
        seen.append((request.method, request.url.path, dict(request.url.params)))
        assert request.headers["Authorization"] == "Bearer secret"
        if request.method == "POST":
            return httpx.Response(201, json={"uuid": "u-1", "report_id": 77})
        return httpx.Response(200, json={"entity": {"name": "ACME"}, "asic_extracts": [{"id": "e"}]})

    client = AlaresClient(base_url=BASE, token="secret", retry_policy=NoBackoff(), client_factory=_factory(handler))
    fetched = await client.create_and_fetch("51824753556", classify("asic-current"))

    assert fetched.uuid == "u-1"
    assert fetched.upstream_report_id == "77"
    assert fetched.status_code == 201
    assert fetched.payload["entity"]["name"] == "ACME"
    assert seen[0][:2] == ("POST", "/api/reports/create")
    assert seen[0][2]["asic_current"] == "1"
    assert seen[1][:2] == ("GET", "/api/reports/u-1/json")


@pytest.mark.asyncio
async def test_alares_retries_while_extracts_are_empty():
    fetches = []

    def handler(request: httpx.Request):
        if request.method == "POST":
            return httpx.Response(200, json={"uuid": "u-1"})
        fetches.append(request)
        extracts = [{"id": "e"}] if len(fetches) >= 3 else []
        return httpx.Response(200, json={"asic_extracts": extracts})

    client = AlaresClient(base_url=BASE, retry_attempts=5, retry_policy=NoBackoff(), client_factory=_factory(handler))
    fetched = await client.create_and_fetch("1", classify("asic-current"))

    assert len(fetches) == 3
    assert fetched.payload["asic_extracts"] == [{"id": "e"}]


@pytest.mark.asyncio
async def test_alares_gives_up_after_retry_budget(caplog):
    fetches = []

    def handler(request: httpx.Request):
        if request.method == "POST":
            return httpx.Response(200, json={"uuid": "u-1"})
        fetches.append(request)
        return httpx.Response(200, json={"asic_extracts": []})

    client = AlaresClient(base_url=BASE, retry_attempts=2, retry_policy=NoBackoff(), client_factory=_factory(handler))
    fetched = await client.create_and_fetch("1", classify("asic-current"))

    assert len(fetches) == 3
    assert fetched.payload["asic_extracts"] == []
    assert "continuing without it" in caplog.text


@pytest.mark.asyncio
async def test_court_reports_are_not_retried():
    fetches = []

    def handler(request: httpx.Request):
        if request.method == "POST":
            return httpx.Response(200, json={"uuid": "u-1"})
        fetches.append(request)
        return httpx.Response(200, json={"cases": {}, "asic_extracts": []})

    client = AlaresClient(base_url=BASE, retry_policy=NoBackoff(), client_factory=_factory(handler))
    await client.create_and_fetch("1", classify("court"))
    assert len(fetches) == 1


@pytest.mark.asyncio
async def test_alares_http_error_becomes_fetch_error():
    def handler(request: httpx.Request):
        return httpx.Response(500, json={"message": "upstream exploded"})

    client = AlaresClient(base_url=BASE, client_factory=_factory(handler))
    with pytest.raises(FetchError) as exc_info:
        await client.create_and_fetch("1", classify("asic-current"))

    assert exc_info.value.status_code == 500
    assert "upstream exploded" in exc_info.value.message


@pytest.mark.asyncio
async def test_alares_network_failure_becomes_fetch_error():
    def handler(request: httpx.Request):
        raise httpx.ConnectError("refused", request=request)

    client = AlaresClient(base_url=BASE, client_factory=_factory(handler))
    with pytest.raises(FetchError) as exc_info:
        await client.create_and_fetch("1", classify("asic-current"))

    assert exc_info.value.status_code is None
    assert "no response received" in exc_info.value.message


@pytest.mark.asyncio
async def test_alares_missing_uuid_is_a_payload_error():
    def handler(request: httpx.Request):
        return httpx.Response(200, json={"ok": True})

    client = AlaresClient(base_url=BASE, client_factory=_factory(handler))
    with pytest.raises(UpstreamPayloadError):
        await client.create_and_fetch("1", classify("asic-current"))


@pytest.mark.asyncio
async def test_ppsr_submits_waits_and_pages_through_results():
    calls = []

    def handler(request: httpx.Request):
        calls.append((request.method, request.url.path, dict(request.url.params)))
        if request.method == "POST":
            body = json.loads(request.content)
            assert body == {"grantorType": "Organisation", "organisationNumber": "51824753556", "organisationNumberType": "ABN"}
            return httpx.Response(200, json={"ppsrCloudId": "cloud-9"})
        page = int(request.url.params["pageNumber"])
        resource = {"items": [{"registrationNumber": f"R{page}"}]}
        if page == 1:
            resource["searchCriteriaSummaries"] = [{"searchCriteriaId": "sc-1"}]
        return httpx.Response(200, json={"totalPages": 2, "resource": resource})

    client = PpsrCloudClient(base_url="https://ppsr.test", settle_policy=NoBackoff(), client_factory=_factory(handler))
    fetched = await client.create_and_fetch("51824753556", classify("ppsr"))

    assert fetched.uuid == "cloud-9"
    assert fetched.payload["ppsrCloudId"] == "cloud-9"
    assert fetched.payload["resource"]["searchCriteriaSummaries"] == [{"searchCriteriaId": "sc-1"}]
    assert [i["registrationNumber"] for i in fetched.payload["resource"]["items"]] == ["R1", "R2"]
    assert [c[:2] for c in calls] == [
        ("POST", "/searches/grantor"),
        ("GET", "/searches/cloud-9/results"),
        ("GET", "/searches/cloud-9/results"),
    ]


@pytest.mark.asyncio
async def test_ppsr_submission_without_id_fails():
    def handler(request: httpx.Request):
        return httpx.Response(200, json={})

    client = PpsrCloudClient(base_url="https://ppsr.test", settle_policy=NoBackoff(), client_factory=_factory(handler))
    with pytest.raises(UpstreamPayloadError):
        await client.create_and_fetch("1", classify("ppsr"))


def test_unwrap_jsonp():
    assert unwrap_jsonp('callback({"Abn": "51824753556"})') == {"Abn": "51824753556"}
    with pytest.raises(UpstreamPayloadError):
        unwrap_jsonp("<html>oops</html>")


def test_sanitize_business_number():
    assert sanitize_business_number("51 824 753 556") == "51824753556"
    assert sanitize_business_number("") == ""


@pytest.mark.asyncio
async def test_abr_lookup_and_name_search():
    def handler(request: httpx.Request):
        assert request.url.params["guid"] == "g-1"
        if request.url.path.endswith("AbnDetails.aspx"):
            return httpx.Response(200, text='callback({"Abn": "51824753556", "EntityName": "ACME PTY LTD"})')
        return httpx.Response(200, text='callback({"Names": [{"Abn": "51824753556", "Name": "ACME"}]})')

    client = AbrClient(base_url="https://abr.test/json", guid="g-1", client_factory=_factory(handler))

    details = await client.lookup_abn("51824753556")
    assert details["EntityName"] == "ACME PTY LTD"
    names = await client.search_by_name("acme")
    assert names == [{"Abn": "51824753556", "Name": "ACME"}]
