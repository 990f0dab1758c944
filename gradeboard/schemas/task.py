from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


class TaskCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None


class TaskStatusUpdate(BaseModel):
    status: Literal["todo", "in_progress", "done"]


class TaskAssign(BaseModel):
    user_id: int


class TaskAppeal(BaseModel):
    requested_points: float
    reason: Optional[str] = None


class TaskAssigneeRead(BaseModel):
    id: int
    user_id: int

    class Config:
        from_attributes = True


class TaskRead(BaseModel):
    id: int
    group_id: int
    title: str
    description: Optional[str]
    status: str
    created_by_id: Optional[int]
    created_at: datetime
    updated_at: datetime
    assignees: list[TaskAssigneeRead] = []

    class Config:
        from_attributes = True
