from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class TaskGradeLine(BaseModel):
    task_id: int
    task_title: str
    points: float
    max_points: Optional[float] = None
    feedback: Optional[str] = None
    graded_at: datetime


class StudentGradeSummary(BaseModel):
    student_id: int
    group_id: int
    total_points: float
    graded_task_count: int
    task_grades: list[TaskGradeLine]


class GroupStudentGrade(StudentGradeSummary):
    student_name: str
    student_email: str


class FinalGradeUpdate(BaseModel):
    student_id: int
    group_id: int
    overall_feedback: Optional[str] = None


class FinalEvaluationRead(BaseModel):
    id: int
    group_id: int
    user_id: int
    evaluator_id: Optional[int] = None
    total_points: float
    overall_feedback: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class RecalculationFailure(BaseModel):
    student_id: int
    group_id: int
    error: str


class RecalculationReport(BaseModel):
    recalculated: int
    failed: int
    failures: list[RecalculationFailure] = []


class SimpleGradeStats(BaseModel):
    total_students: int
    students_with_grades: int
    average_points: int
    total_points_awarded: float


class SimpleGradesResponse(BaseModel):
    grade_summary: Optional[StudentGradeSummary] = None
    group_grades: Optional[list[GroupStudentGrade]] = None
    stats: Optional[SimpleGradeStats] = None
