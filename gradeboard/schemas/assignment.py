from pydantic import BaseModel
from datetime import datetime
from typing import Optional

class AssignmentCreate(BaseModel):
    title: str
    description: Optional[str] = None
    due_at: Optional[datetime] = None
    max_score: float = 100


class AssignmentRead(BaseModel):
    id: int
    title: str
    description: Optional[str]
    due_at: Optional[datetime]
    max_score: float
    closed: bool
    created_at: datetime

    class Config:
        from_attributes = True
