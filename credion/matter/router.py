from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from credion.database import get_db
from credion.auth.dependencies import get_current_user_id
from credion.matter.schemas import MatterCreate, MatterResponse
from credion.matter.models import MatterState
from credion.matter.services import MatterService

router = APIRouter(prefix="/matters", tags=["matters"])


@router.post("", response_model=MatterResponse)
async def create_matter(
    matter: MatterCreate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    service = MatterService(db)
    return await service.create_matter(matter, user_id)


@router.get("", response_model=List[MatterResponse])
async def list_matters(
    skip: int = 0,
    limit: int = 100,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    service = MatterService(db)
    return await service.list_matters(user_id, skip, limit)


@router.get("/{matter_id}", response_model=MatterResponse)
async def get_matter(
    matter_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    service = MatterService(db)
    return await service.get_matter(matter_id, user_id)


@router.patch("/{matter_id}/status", response_model=MatterResponse)
async def update_matter_status(
    matter_id: int,
    status: MatterState,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    service = MatterService(db)
    return await service.update_status(matter_id, user_id, status)
