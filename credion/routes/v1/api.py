from fastapi import APIRouter

from credion.matter.router import router as matter_router
from credion.reports.router import router as reports_router
from credion.search.router import router as search_router

api_router = APIRouter()

api_router.include_router(matter_router)
api_router.include_router(reports_router)
api_router.include_router(search_router)
