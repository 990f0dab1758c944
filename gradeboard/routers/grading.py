from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gradeboard.core.deps import get_db
from gradeboard.core.permissions import require_staff
from gradeboard.models.user import User
from gradeboard.schemas.task_grade import (
    AppealResolve,
    GradeTaskResult,
    GradingStats,
    TaskForGrading,
    TaskGradeCreate,
    TaskGradeRead,
)
from gradeboard.services import task_grading

router = APIRouter()


@router.get("/tasks", response_model=list[TaskForGrading])
def tasks_for_grading(
    group_id: int | None = None,
    status: str | None = None,
    db: Session = Depends(get_db),
    staff: User = Depends(require_staff),
):
    return task_grading.get_tasks_for_grading(db, group_id=group_id, status=status)


@router.get("/appeals", response_model=list[TaskForGrading])
def appeals(
    group_id: int | None = None,
    db: Session = Depends(get_db),
    staff: User = Depends(require_staff),
):
    return task_grading.get_appeal_tasks(db, group_id=group_id)


@router.get("/stats", response_model=GradingStats)
def grading_stats(
    group_id: int | None = None,
    db: Session = Depends(get_db),
    staff: User = Depends(require_staff),
):
    return task_grading.get_grading_stats(db, group_id=group_id)


@router.post("/grade", response_model=GradeTaskResult)
def grade_task(
    payload: TaskGradeCreate,
    db: Session = Depends(get_db),
    grader: User = Depends(require_staff),
):
    grade, created = task_grading.grade_task(
        db,
        grader,
        task_id=payload.task_id,
        student_id=payload.student_id,
        points=payload.points,
        feedback=payload.feedback,
        max_points=payload.max_points,
    )
    return {
        "message": "Task graded successfully" if created else "Grade updated successfully",
        "grade": grade,
    }


@router.post("/resolve-appeal", response_model=TaskGradeRead)
def resolve_appeal(
    payload: AppealResolve,
    db: Session = Depends(get_db),
    grader: User = Depends(require_staff),
):
    return task_grading.resolve_appeal(
        db,
        grader,
        task_id=payload.task_id,
        student_id=payload.student_id,
        points=payload.points,
        feedback=payload.feedback,
        admin_response=payload.admin_response,
    )
