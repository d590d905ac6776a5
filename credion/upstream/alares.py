import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple

import httpx

from credion.config import settings
from credion.reports.classifier import ReportClassification
from credion.reports.models import ReportCategory, AsicSubtype
from credion.upstream.backoff import BackoffPolicy, FixedBackoff, wait
from credion.upstream.errors import UpstreamPayloadError, fetch_error_from

logger = logging.getLogger(__name__)

# Collections that are filled in asynchronously upstream; an empty one right
# after creation usually means "not ready yet".
EXPECTED_COLLECTIONS = {
    ReportCategory.ASIC.value: "asic_extracts",
}

_ASIC_FLAGS = {
    AsicSubtype.CURRENT.value: "asic_current",
    AsicSubtype.HISTORICAL.value: "asic_historical",
    AsicSubtype.COMPANY.value: "asic_company",
    AsicSubtype.PERSONAL.value: "asic_personal",
    AsicSubtype.DOCUMENT_SEARCH.value: "asic_document_search",
}

_CATEGORY_FLAGS = {
    ReportCategory.COURT.value: "court",
    ReportCategory.ATO.value: "ato",
    ReportCategory.LAND_TITLE.value: "land_title",
    ReportCategory.PROPERTY.value: "property",
}


@dataclass
class FetchedReport:
    uuid: Optional[str]
    upstream_report_id: Optional[str]
    status_code: int
    payload: Dict[str, Any] = field(default_factory=dict)


def build_create_params(abn: str, classification: ReportClassification) -> Dict[str, str]:
    params = {"type": "company", "abn": abn, "alares_report": "1"}
    if classification.category == ReportCategory.ASIC.value:
        params[_ASIC_FLAGS.get(classification.subtype, "asic_current")] = "1"
    elif classification.category in _CATEGORY_FLAGS:
        params[_CATEGORY_FLAGS[classification.category]] = "1"
    return params


class AlaresClient:
    """Client for the Alares report API: create a report, then pull its JSON."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        retry_attempts: Optional[int] = None,
        retry_policy: Optional[BackoffPolicy] = None,
        client_factory: Optional[Callable[[], httpx.AsyncClient]] = None,
    ):
        self.base_url = (base_url or settings.ALARES_BASE_URL).rstrip("/")
        self.token = token if token is not None else settings.ALARES_API_TOKEN
        timeout = timeout if timeout is not None else settings.UPSTREAM_TIMEOUT_SECONDS
        self.retry_attempts = retry_attempts if retry_attempts is not None else settings.FETCH_RETRY_ATTEMPTS
        self.retry_policy = retry_policy or FixedBackoff(settings.FETCH_RETRY_DELAY_SECONDS)
        self._client_factory = client_factory or (lambda: httpx.AsyncClient(timeout=timeout))

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
        }

    async def create_and_fetch(self, abn: str, classification: ReportClassification) -> FetchedReport:
        async with self._client_factory() as client:
            created, status_code = await self._create(client, abn, classification)
            report_uuid = created.get("uuid")
            if not report_uuid:
                raise UpstreamPayloadError("Report creation response did not include a uuid")

            payload = await self._fetch(client, report_uuid)
            expected = EXPECTED_COLLECTIONS.get(classification.category)
            if expected:
                payload = await self._retry_while_empty(client, report_uuid, payload, expected)

        upstream_id = created.get("report_id")
        return FetchedReport(
            uuid=report_uuid,
            upstream_report_id=str(upstream_id) if upstream_id is not None else None,
            status_code=status_code,
            payload=payload,
        )

    async def fetch(self, report_uuid: str) -> Dict[str, Any]:
        async with self._client_factory() as client:
            return await self._fetch(client, report_uuid)

    async def _create(self, client: httpx.AsyncClient, abn: str, classification: ReportClassification) -> Tuple[Dict[str, Any], int]:
        params = build_create_params(abn, classification)
        logger.info(f"Creating upstream report for ABN {abn} with params {params}")
        try:
            response = await client.post(f"{self.base_url}/reports/create", params=params, headers=self.headers)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise fetch_error_from(e, "Report creation") from e
        return self._json(response, "Report creation"), response.status_code

    async def _fetch(self, client: httpx.AsyncClient, report_uuid: str) -> Dict[str, Any]:
        try:
            response = await client.get(f"{self.base_url}/reports/{report_uuid}/json", headers=self.headers)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise fetch_error_from(e, "Report data fetch") from e
        return self._json(response, "Report data fetch")

    async def _retry_while_empty(
        self,
        client: httpx.AsyncClient,
        report_uuid: str,
        payload: Dict[str, Any],
        collection: str,
    ) -> Dict[str, Any]:
        attempt = 0
        while collection in payload and not payload[collection] and attempt < self.retry_attempts:
            attempt += 1
            logger.info(f"Report {report_uuid}: '{collection}' still empty, retry {attempt}/{self.retry_attempts}")
            await wait(self.retry_policy, attempt)
            payload = await self._fetch(client, report_uuid)

        if collection in payload and not payload[collection]:
            logger.warning(f"Report {report_uuid}: '{collection}' empty after {attempt} retries, continuing without it")
        return payload

    @staticmethod
    def _json(response: httpx.Response, action: str) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamPayloadError(f"{action} returned invalid JSON", status_code=response.status_code) from e
        if not isinstance(body, dict):
            raise UpstreamPayloadError(f"{action} returned a non-object body", status_code=response.status_code)
        return body
