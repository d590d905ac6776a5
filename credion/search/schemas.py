from typing import List, Optional
from pydantic import BaseModel, Field


class SearchRequest(BaseModel):
    query: str = Field(..., min_length=1)


class BusinessMatch(BaseModel):
    abn: str
    name: str
    entity_status: Optional[str] = None
    entity_type: Optional[str] = None
    address: Optional[str] = None


class SearchResponse(BaseModel):
    query: str
    by_abn: bool
    results: List[BusinessMatch] = []
