import logging
from typing import Any, Callable, Dict, List, Optional

import httpx

from credion.config import settings
from credion.reports.classifier import ReportClassification
from credion.upstream.alares import FetchedReport
from credion.upstream.backoff import BackoffPolicy, FixedBackoff, wait
from credion.upstream.errors import UpstreamPayloadError, fetch_error_from

logger = logging.getLogger(__name__)

MAX_RESULT_PAGES = 50


class PpsrCloudClient:
    """Grantor searches against PPSR Cloud.

    The search runs asynchronously upstream and there is no callback, so we
    wait a settling delay between submitting it and reading the results.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        settle_policy: Optional[BackoffPolicy] = None,
        client_factory: Optional[Callable[[], httpx.AsyncClient]] = None,
    ):
        self.base_url = (base_url or settings.PPSR_BASE_URL).rstrip("/")
        self.token = token if token is not None else settings.PPSR_API_TOKEN
        timeout = timeout if timeout is not None else settings.UPSTREAM_TIMEOUT_SECONDS
        self.settle_policy = settle_policy or FixedBackoff(settings.PPSR_SETTLE_DELAY_SECONDS)
        self._client_factory = client_factory or (lambda: httpx.AsyncClient(timeout=timeout))

    @property
    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}", "Content-Type": "application/json"}

    async def create_and_fetch(self, abn: str, classification: ReportClassification) -> FetchedReport:
        async with self._client_factory() as client:
            cloud_id, status_code = await self._submit(client, abn)
            logger.info(f"PPSR search {cloud_id} submitted for ABN {abn}; waiting for results")
            await wait(self.settle_policy, 1)
            summaries, items = await self._collect_results(client, cloud_id)

        logger.info(f"PPSR search {cloud_id}: {len(summaries)} criteria summaries, {len(items)} registrations")
        return FetchedReport(
            uuid=cloud_id,
            upstream_report_id=None,
            status_code=status_code,
            payload={
                "ppsrCloudId": cloud_id,
                "resource": {"searchCriteriaSummaries": summaries, "items": items},
            },
        )

    async def _submit(self, client: httpx.AsyncClient, abn: str):
        body = {
            "grantorType": "Organisation",
            "organisationNumber": abn,
            "organisationNumberType": "ABN",
        }
        try:
            response = await client.post(f"{self.base_url}/searches/grantor", json=body, headers=self.headers)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise fetch_error_from(e, "PPSR search submission") from e
        except ValueError as e:
            raise UpstreamPayloadError("PPSR search submission returned invalid JSON", response.status_code) from e

        cloud_id = data.get("ppsrCloudId") if isinstance(data, dict) else None
        if not cloud_id:
            raise UpstreamPayloadError("PPSR search submission did not return a ppsrCloudId", response.status_code)
        return str(cloud_id), response.status_code

    async def _collect_results(self, client: httpx.AsyncClient, cloud_id: str):
        summaries: List[Any] = []
        items: List[Any] = []
        page = 1
        while page <= MAX_RESULT_PAGES:
            try:
                response = await client.get(
                    f"{self.base_url}/searches/{cloud_id}/results",
                    params={"pageNumber": page},
                    headers=self.headers,
                )
                response.raise_for_status()
                data = response.json()
            except httpx.HTTPError as e:
                raise fetch_error_from(e, "PPSR search results fetch") from e
            except ValueError as e:
                raise UpstreamPayloadError("PPSR search results returned invalid JSON", response.status_code) from e

            if not isinstance(data, dict):
                raise UpstreamPayloadError("PPSR search results returned a non-object body", response.status_code)
            resource = data.get("resource") or {}
            summaries.extend(resource.get("searchCriteriaSummaries") or [])
            items.extend(resource.get("items") or [])

            total_pages = data.get("totalPages") or 1
            if page >= total_pages:
                break
            page += 1
        return summaries, items
