from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gradeboard.core.current_user import get_current_user
from gradeboard.core.deps import get_db
from gradeboard.core.permissions import require_staff
from gradeboard.models.user import User
from gradeboard.schemas.grades import ExtraPointsUpdate, LeaderboardEntry, StudentGradeRead
from gradeboard.services import grades

router = APIRouter()


@router.get("/grades/me", response_model=StudentGradeRead)
def my_grades(
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    return grades.get_student_grades(db, me)


@router.get("/admin/grades", response_model=list[StudentGradeRead])
def all_grades(
    db: Session = Depends(get_db),
    staff: User = Depends(require_staff),
):
    return grades.get_all_student_grades(db)


@router.post("/admin/grades/{user_id}/extra-points", response_model=StudentGradeRead)
def update_extra_points(
    user_id: int,
    payload: ExtraPointsUpdate,
    db: Session = Depends(get_db),
    staff: User = Depends(require_staff),
):
    return grades.set_extra_points(db, user_id, payload.extra_points)


@router.get("/leaderboard", response_model=list[LeaderboardEntry])
def leaderboard(
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    return grades.get_leaderboard(db)
