import logging
from typing import Any, Dict, List, Optional

from credion.search.schemas import BusinessMatch, SearchResponse
from credion.upstream.abr import AbrClient, sanitize_business_number

logger = logging.getLogger(__name__)

# Anything this long once non-digits are stripped is treated as an ABN.
ABN_MIN_DIGITS = 10


def _format_address(details: Dict[str, Any]) -> Optional[str]:
    address = details.get("Address")
    if isinstance(address, dict):
        parts = [address.get("AddressLine"), address.get("Suburb"), address.get("State"), address.get("Postcode")]
        text = " ".join(str(p) for p in parts if p)
        return text or None
    postcode = details.get("AddressPostcode")
    state = details.get("AddressState")
    if postcode or state:
        return " ".join(str(p) for p in (state, postcode) if p)
    return None


class BusinessSearchService:
    """Resolves a free-text query to candidate businesses via the ABR."""

    def __init__(self, abr: Optional[AbrClient] = None):
        self.abr = abr or AbrClient()

    async def search(self, query: str) -> SearchResponse:
        term = query.strip()
        digits = sanitize_business_number(term)
        if len(digits) >= ABN_MIN_DIGITS and digits == term.replace(" ", ""):
            return SearchResponse(query=term, by_abn=True, results=await self._by_abn(digits))
        return SearchResponse(query=term, by_abn=False, results=await self._by_name(term))

    async def _by_abn(self, abn: str) -> List[BusinessMatch]:
        details = await self.abr.lookup_abn(abn)
        if not details.get("Abn"):
            logger.info(f"ABN lookup for {abn} returned no business")
            return []
        return [
            BusinessMatch(
                abn=str(details["Abn"]),
                name=details.get("EntityName") or "Unknown",
                entity_status=details.get("AbnStatus") or details.get("EntityStatus"),
                entity_type=details.get("EntityTypeName") or details.get("EntityType"),
                address=_format_address(details),
            )
        ]

    async def _by_name(self, name: str) -> List[BusinessMatch]:
        names = await self.abr.search_by_name(name)
        logger.info(f"Name search for {name!r} returned {len(names)} matches")
        return [
            BusinessMatch(
                abn=str(match.get("Abn")),
                name=match.get("Name") or "Unknown",
                entity_status=match.get("AbnStatus"),
                address=" ".join(str(p) for p in (match.get("State"), match.get("Postcode")) if p) or None,
            )
            for match in names
            if isinstance(match, dict) and match.get("Abn")
        ]


def get_search_service() -> BusinessSearchService:
    return BusinessSearchService()
