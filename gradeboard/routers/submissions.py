from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import and_
from sqlalchemy.orm import Session

from gradeboard.core.current_user import get_current_user
from gradeboard.core.deps import get_db
from gradeboard.core.permissions import require_staff
from gradeboard.models.assignment import Assignment
from gradeboard.models.submission import Submission
from gradeboard.models.user import User
from gradeboard.schemas.submission import SubmissionCreate, SubmissionGradeUpdate, SubmissionRead

router = APIRouter()


def _ensure_assignment_exists(db: Session, assignment_id: int) -> Assignment:
    a = db.query(Assignment).filter(Assignment.id == assignment_id).first()
    if not a:
        raise HTTPException(status_code=404, detail="Assignment not found")
    return a


@router.post(
    "/assignments/{assignment_id}/submissions",
    response_model=SubmissionRead,
    status_code=status.HTTP_201_CREATED,
)
def submit_assignment(
    assignment_id: int,
    payload: SubmissionCreate,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    assignment = _ensure_assignment_exists(db, assignment_id)
    if assignment.closed:
        raise HTTPException(status_code=400, detail="Assignment is closed")

    now = datetime.now(timezone.utc)

    # allow resubmission: update existing submission if it exists
    existing = (
        db.query(Submission)
        .filter(
            and_(
                Submission.assignment_id == assignment_id,
                Submission.student_id == me.id,
            )
        )
        .first()
    )

    if existing:
        existing.content = payload.content
        existing.submitted_at = now

        # clear previous grading on resubmit
        existing.score = None
        existing.feedback = None
        existing.graded_at = None
        submission = existing
    else:
        submission = Submission(
            assignment_id=assignment_id,
            student_id=me.id,
            content=payload.content,
            submitted_at=now,
        )
        db.add(submission)

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(submission)
    return submission


@router.get(
    "/assignments/{assignment_id}/submissions",
    response_model=list[SubmissionRead],
)
def list_submissions_for_assignment(
    assignment_id: int,
    db: Session = Depends(get_db),
    staff: User = Depends(require_staff),
):
    _ensure_assignment_exists(db, assignment_id)
    return (
        db.query(Submission)
        .filter(Submission.assignment_id == assignment_id)
        .order_by(Submission.id.asc())
        .all()
    )


@router.patch(
    "/submissions/{submission_id}/grade",
    response_model=SubmissionRead,
)
def grade_submission(
    submission_id: int,
    payload: SubmissionGradeUpdate,
    db: Session = Depends(get_db),
    staff: User = Depends(require_staff),
):
    sub = db.query(Submission).filter(Submission.id == submission_id).first()
    if not sub:
        raise HTTPException(status_code=404, detail="Submission not found")

    assignment = _ensure_assignment_exists(db, sub.assignment_id)

    if payload.score < 0 or payload.score > assignment.max_score:
        raise HTTPException(
            status_code=400,
            detail=f"score must be between 0 and {assignment.max_score}",
        )

    sub.score = payload.score
    sub.feedback = payload.feedback
    sub.graded_at = datetime.now(timezone.utc)

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(sub)
    return sub
