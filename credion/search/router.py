from fastapi import APIRouter, Depends, HTTPException
from credion.auth.dependencies import get_current_user_id
from credion.search.schemas import SearchRequest, SearchResponse
from credion.search.service import BusinessSearchService, get_search_service
from credion.upstream.errors import FetchError

router = APIRouter(prefix="/search", tags=["search"])


@router.post("", response_model=SearchResponse)
async def search_businesses(
    request: SearchRequest,
    user_id: int = Depends(get_current_user_id),
    service: BusinessSearchService = Depends(get_search_service),
):
    """Look a business up by ABN, or by name when the query is not a number."""
    if not request.query.strip():
        raise HTTPException(status_code=400, detail="Search query is required")
    try:
        return await service.search(request.query)
    except FetchError as e:
        raise HTTPException(status_code=502, detail=f"Business search failed: {e}")
