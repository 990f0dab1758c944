from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from gradeboard.core.deps import get_db
from gradeboard.core.permissions import require_staff
from gradeboard.models.evaluation import FinalEvaluation
from gradeboard.models.user import User
from gradeboard.schemas.final_grade import (
    FinalEvaluationRead,
    FinalGradeUpdate,
    RecalculationReport,
    SimpleGradesResponse,
)
from gradeboard.services import final_grades

router = APIRouter()


@router.get("/simple-grades", response_model=SimpleGradesResponse)
def simple_grades(
    group_id: int | None = None,
    student_id: int | None = None,
    db: Session = Depends(get_db),
    staff: User = Depends(require_staff),
):
    # one student's summary, a whole group, or overall statistics
    if student_id is not None and group_id is None:
        raise HTTPException(status_code=400, detail="student_id requires group_id")
    if group_id is not None and student_id is not None:
        return {
            "grade_summary": final_grades.get_student_grade_summary(db, student_id, group_id)
        }
    if group_id is not None:
        return {"group_grades": final_grades.get_group_final_grades(db, group_id)}
    return {"stats": final_grades.get_simple_grade_stats(db)}


@router.post("/simple-grades/update", response_model=FinalEvaluationRead)
def update_final_grade(
    payload: FinalGradeUpdate,
    db: Session = Depends(get_db),
    staff: User = Depends(require_staff),
):
    return final_grades.update_student_final_grade(
        db,
        payload.student_id,
        payload.group_id,
        overall_feedback=payload.overall_feedback,
        evaluator=staff,
    )


@router.post("/simple-grades/recalculate", response_model=RecalculationReport)
def recalculate_final_grades(
    db: Session = Depends(get_db),
    staff: User = Depends(require_staff),
):
    return final_grades.recalculate_all_final_grades(db)


@router.get("/evaluations", response_model=list[FinalEvaluationRead])
def list_evaluations(
    group_id: int | None = None,
    db: Session = Depends(get_db),
    staff: User = Depends(require_staff),
):
    query = db.query(FinalEvaluation)
    if group_id is not None:
        query = query.filter(FinalEvaluation.group_id == group_id)
    return query.order_by(FinalEvaluation.updated_at.desc(), FinalEvaluation.id.asc()).all()
