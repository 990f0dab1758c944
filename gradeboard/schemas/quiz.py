from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class QuizCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    grade: float = Field(default=0, ge=0)


class QuizRead(BaseModel):
    id: int
    title: str
    grade: float
    closed: bool
    created_at: datetime

    class Config:
        from_attributes = True


class QuizResultCreate(BaseModel):
    score: Optional[float] = None


class QuizResultRead(BaseModel):
    id: int
    quiz_id: int
    user_id: int
    score: Optional[float] = None
    completed_at: datetime

    class Config:
        from_attributes = True
