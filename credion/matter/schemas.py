from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict
from credion.matter.models import MatterState

class MatterBase(BaseModel):
    name: str
    description: Optional[str] = None

class MatterCreate(MatterBase):
    pass

class MatterResponse(MatterBase):
    id: int
    user_id: int
    status: MatterState
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
