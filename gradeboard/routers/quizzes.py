from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gradeboard.core.current_user import get_current_user
from gradeboard.core.deps import get_db
from gradeboard.core.permissions import require_staff
from gradeboard.models.quiz import Quiz, QuizResult
from gradeboard.models.user import User
from gradeboard.schemas.quiz import QuizCreate, QuizRead, QuizResultCreate, QuizResultRead

router = APIRouter()


def _ensure_quiz_exists(db: Session, quiz_id: int) -> Quiz:
    quiz = db.query(Quiz).filter(Quiz.id == quiz_id).first()
    if not quiz:
        raise HTTPException(status_code=404, detail="Quiz not found")
    return quiz


@router.get("", response_model=list[QuizRead])
def list_quizzes(
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    return db.query(Quiz).order_by(Quiz.id.asc()).all()


@router.post("", response_model=QuizRead, status_code=status.HTTP_201_CREATED)
def create_quiz(
    payload: QuizCreate,
    db: Session = Depends(get_db),
    staff: User = Depends(require_staff),
):
    quiz = Quiz(title=payload.title, grade=payload.grade)
    db.add(quiz)
    db.commit()
    db.refresh(quiz)
    return quiz


@router.post("/{quiz_id}/close", response_model=QuizRead)
def close_quiz(
    quiz_id: int,
    db: Session = Depends(get_db),
    staff: User = Depends(require_staff),
):
    quiz = _ensure_quiz_exists(db, quiz_id)
    quiz.closed = True
    db.commit()
    db.refresh(quiz)
    return quiz


@router.post(
    "/{quiz_id}/results",
    response_model=QuizResultRead,
    status_code=status.HTTP_201_CREATED,
)
def submit_quiz_result(
    quiz_id: int,
    payload: QuizResultCreate,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    quiz = _ensure_quiz_exists(db, quiz_id)
    if quiz.closed:
        raise HTTPException(status_code=400, detail="Quiz is closed")

    result = QuizResult(quiz_id=quiz.id, user_id=me.id, score=payload.score)
    db.add(result)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Quiz already taken")

    db.refresh(result)
    return result
