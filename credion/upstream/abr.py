import json
import logging
import re
from typing import Any, Callable, Dict, List, Optional

import httpx

from credion.config import settings
from credion.upstream.errors import UpstreamPayloadError, fetch_error_from

logger = logging.getLogger(__name__)

_JSONP = re.compile(r"^\s*[\w$.]+\((.*)\)\s*;?\s*$", re.DOTALL)


def unwrap_jsonp(text: str) -> Any:
    """ABR answers with ``callback({...})``; return the JSON inside."""
    match = _JSONP.match(text)
    if not match:
        raise UpstreamPayloadError("Invalid ABN lookup response format")
    try:
        return json.loads(match.group(1))
    except ValueError as e:
        raise UpstreamPayloadError("Invalid ABN lookup response format") from e


def sanitize_business_number(value: str) -> str:
    return re.sub(r"\D", "", value or "")


class AbrClient:
    """Australian Business Register lookups (ABN details and name matches)."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        guid: Optional[str] = None,
        timeout: Optional[float] = None,
        client_factory: Optional[Callable[[], httpx.AsyncClient]] = None,
    ):
        self.base_url = (base_url or settings.ABR_BASE_URL).rstrip("/")
        self.guid = guid if guid is not None else settings.ABR_GUID
        timeout = timeout if timeout is not None else settings.UPSTREAM_TIMEOUT_SECONDS
        self._client_factory = client_factory or (lambda: httpx.AsyncClient(timeout=timeout))

    async def lookup_abn(self, abn: str) -> Dict[str, Any]:
        data = await self._get("AbnDetails.aspx", {"abn": abn, "callback": "callback", "guid": self.guid})
        return data if isinstance(data, dict) else {}

    async def search_by_name(self, name: str, max_results: int = 10) -> List[Dict[str, Any]]:
        data = await self._get(
            "MatchingNames.aspx",
            {"name": name, "maxResults": max_results, "callback": "callback", "guid": self.guid},
        )
        if not isinstance(data, dict):
            return []
        return data.get("Names") or []

    async def _get(self, path: str, params: Dict[str, Any]) -> Any:
        logger.info(f"ABR request {path}")
        async with self._client_factory() as client:
            try:
                response = await client.get(f"{self.base_url}/{path}", params=params)
                response.raise_for_status()
            except httpx.HTTPError as e:
                raise fetch_error_from(e, "ABN lookup") from e
        return unwrap_jsonp(response.text)
