from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from fastapi import HTTPException
from credion.matter.models import Matter, MatterState
from credion.matter.schemas import MatterCreate

class MatterService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_matter(self, matter_in: MatterCreate, user_id: int) -> Matter:
        matter = Matter(
            name=matter_in.name,
            description=matter_in.description,
            user_id=user_id,
            status=MatterState.OPEN,
        )
        self.db.add(matter)
        await self.db.commit()
        await self.db.refresh(matter)
        return matter

    async def get_matter(self, matter_id: int, user_id: int = None) -> Matter:
        query = select(Matter).filter(Matter.id == matter_id)
        if user_id is not None:
            query = query.filter(Matter.user_id == user_id)
        result = await self.db.execute(query)
        matter = result.scalars().first()
        if not matter:
            raise HTTPException(status_code=404, detail="Matter not found")
        return matter

    async def list_matters(self, user_id: int, skip: int = 0, limit: int = 100) -> list[Matter]:
        result = await self.db.execute(
            select(Matter)
            .filter(Matter.user_id == user_id)
            .order_by(Matter.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def update_status(self, matter_id: int, user_id: int, new_status: MatterState) -> Matter:
        matter = await self.get_matter(matter_id, user_id)
        current_status = matter.status

        valid_transitions = {
            MatterState.OPEN: [MatterState.CLOSED, MatterState.ARCHIVED],
            MatterState.CLOSED: [MatterState.OPEN, MatterState.ARCHIVED],
            MatterState.ARCHIVED: [],
        }

        if new_status not in valid_transitions.get(current_status, []):
            raise HTTPException(
                status_code=400,
                detail=f"Invalid transition from {current_status.value} to {new_status.value}"
            )

        matter.status = new_status
        await self.db.commit()
        await self.db.refresh(matter)
        return matter
