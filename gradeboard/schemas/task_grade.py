from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from gradeboard.schemas.task import TaskAssigneeRead


class TaskGradeCreate(BaseModel):
    task_id: int
    student_id: int
    points: float
    max_points: Optional[float] = None
    feedback: Optional[str] = None


class AppealResolve(BaseModel):
    task_id: int
    student_id: int
    points: float
    feedback: Optional[str] = None
    admin_response: Optional[str] = None


class TaskGradeRead(BaseModel):
    id: int
    task_id: int
    student_id: int
    grader_id: Optional[int]
    points: float
    max_points: Optional[float] = None
    feedback: Optional[str] = None
    graded_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class GradeTaskResult(BaseModel):
    message: str
    grade: TaskGradeRead


class TaskForGrading(BaseModel):
    id: int
    group_id: int
    title: str
    description: Optional[str]
    status: str
    updated_at: datetime
    assignees: list[TaskAssigneeRead] = []
    grades: list[TaskGradeRead] = []

    class Config:
        from_attributes = True


class GradingStats(BaseModel):
    total_tasks: int
    graded_tasks: int
    pending_tasks: int
    average_score: float
    total_grades: int


class MyTaskGradeRow(BaseModel):
    task_id: int
    task_title: str
    points: float
    graded_at: datetime


class MyTaskGrades(BaseModel):
    total_points_earned: float
    total_tasks_graded: int
    total_tasks: int
    average_score: int
    grades: list[MyTaskGradeRow] = []
