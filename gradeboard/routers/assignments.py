from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from gradeboard.core.current_user import get_current_user
from gradeboard.core.deps import get_db
from gradeboard.core.permissions import require_staff
from gradeboard.models.assignment import Assignment
from gradeboard.models.user import User
from gradeboard.schemas.assignment import AssignmentCreate, AssignmentRead

router = APIRouter()


def _ensure_assignment_exists(db: Session, assignment_id: int) -> Assignment:
    a = db.query(Assignment).filter(Assignment.id == assignment_id).first()
    if not a:
        raise HTTPException(status_code=404, detail="Assignment not found")
    return a


@router.get("/assignments", response_model=list[AssignmentRead])
def list_assignments(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return (
        db.query(Assignment)
        .order_by(
            Assignment.due_at.is_(None),  # NULLs last (SQLite-safe)
            Assignment.due_at.asc(),
            Assignment.id.asc(),
        )
        .all()
    )


@router.post(
    "/assignments",
    response_model=AssignmentRead,
    status_code=status.HTTP_201_CREATED,
)
def create_assignment(
    payload: AssignmentCreate,
    db: Session = Depends(get_db),
    staff: User = Depends(require_staff),
):
    if payload.max_score < 0:
        raise HTTPException(status_code=400, detail="max_score must be non-negative")

    a = Assignment(
        title=payload.title,
        description=payload.description,
        due_at=payload.due_at,
        max_score=payload.max_score,
    )
    db.add(a)
    db.commit()
    db.refresh(a)
    return a


@router.post("/assignments/{assignment_id}/close", response_model=AssignmentRead)
def close_assignment(
    assignment_id: int,
    db: Session = Depends(get_db),
    staff: User = Depends(require_staff),
):
    a = _ensure_assignment_exists(db, assignment_id)
    a.closed = True
    db.commit()
    db.refresh(a)
    return a
