"""Overall student grades and the leaderboard.

Every source is summed on read, so totals never go stale:

- quiz points: the quiz's grade for each result of a closed quiz;
- assignment points: graded submission scores of closed assignments;
- extra points: the manual value kept in ``student_grades``;
- final points: all of the student's final-project task grades.
"""
import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from gradeboard.core.config import LEADERBOARD_SIZE, MAX_POSSIBLE_POINTS
from gradeboard.models.assignment import Assignment
from gradeboard.models.quiz import Quiz, QuizResult
from gradeboard.models.student_grade import StudentGrade
from gradeboard.models.submission import Submission
from gradeboard.models.task_grade import TaskGrade
from gradeboard.models.user import User
from gradeboard.schemas.grades import BaseGrades, LeaderboardEntry, StudentGradeRead
from gradeboard.services.errors import NotFoundError

logger = logging.getLogger(__name__)


def _points_by_user(query, user_column, user_id: int | None) -> dict[int, float]:
    if user_id is not None:
        query = query.filter(user_column == user_id)
    return {row[0]: float(row[1] or 0) for row in query.group_by(user_column).all()}


def _quiz_points(db: Session, user_id: int | None = None) -> dict[int, float]:
    query = (
        db.query(QuizResult.user_id, func.sum(Quiz.grade))
        .join(Quiz, QuizResult.quiz_id == Quiz.id)
        .filter(Quiz.closed.is_(True), Quiz.grade > 0)
    )
    return _points_by_user(query, QuizResult.user_id, user_id)


def _assignment_points(db: Session, user_id: int | None = None) -> dict[int, float]:
    query = (
        db.query(Submission.student_id, func.sum(Submission.score))
        .join(Assignment, Submission.assignment_id == Assignment.id)
        .filter(Assignment.closed.is_(True), Submission.score.is_not(None))
    )
    return _points_by_user(query, Submission.student_id, user_id)


def _extra_points(db: Session, user_id: int | None = None) -> dict[int, float]:
    query = db.query(StudentGrade.user_id, func.sum(StudentGrade.extra_points))
    return _points_by_user(query, StudentGrade.user_id, user_id)


def _final_points(db: Session, user_id: int | None = None) -> dict[int, float]:
    query = db.query(TaskGrade.student_id, func.sum(TaskGrade.points))
    return _points_by_user(query, TaskGrade.student_id, user_id)


def _max_points(db: Session) -> tuple[float, float]:
    max_quiz_points = (
        db.query(func.coalesce(func.sum(Quiz.grade), 0))
        .filter(Quiz.closed.is_(True))
        .scalar()
    )
    max_assignment_points = (
        db.query(func.coalesce(func.sum(Assignment.max_score), 0))
        .filter(Assignment.closed.is_(True))
        .scalar()
    )
    return float(max_quiz_points or 0), float(max_assignment_points or 0)


def calculate_base_grades(db: Session, user_id: int) -> BaseGrades:
    max_quiz_points, max_assignment_points = _max_points(db)
    return BaseGrades(
        quiz_points=_quiz_points(db, user_id).get(user_id, 0.0),
        max_quiz_points=max_quiz_points,
        assignment_points=_assignment_points(db, user_id).get(user_id, 0.0),
        max_assignment_points=max_assignment_points,
        extra_points=_extra_points(db, user_id).get(user_id, 0.0),
        max_possible_points=MAX_POSSIBLE_POINTS,
    )


def _student_grade_row(
    user: User, base: BaseGrades, final_points: float
) -> StudentGradeRead:
    base_total = base.quiz_points + base.assignment_points + base.extra_points
    return StudentGradeRead(
        **base.model_dump(),
        user_id=user.id,
        email=user.email,
        full_name=user.full_name,
        final_points=final_points,
        total_points=base_total + final_points,
    )


def get_student_grades(db: Session, user: User) -> StudentGradeRead:
    base = calculate_base_grades(db, user.id)
    final_points = _final_points(db, user.id).get(user.id, 0.0)
    return _student_grade_row(user, base, final_points)


def get_all_student_grades(db: Session) -> list[StudentGradeRead]:
    students = (
        db.query(User).filter(User.role == "student").order_by(User.email.asc()).all()
    )

    max_quiz_points, max_assignment_points = _max_points(db)
    quiz = _quiz_points(db)
    assignments = _assignment_points(db)
    extra = _extra_points(db)
    final = _final_points(db)

    rows: list[StudentGradeRead] = []
    for student in students:
        base = BaseGrades(
            quiz_points=quiz.get(student.id, 0.0),
            max_quiz_points=max_quiz_points,
            assignment_points=assignments.get(student.id, 0.0),
            max_assignment_points=max_assignment_points,
            extra_points=extra.get(student.id, 0.0),
            max_possible_points=MAX_POSSIBLE_POINTS,
        )
        rows.append(_student_grade_row(student, base, final.get(student.id, 0.0)))
    return rows


def set_extra_points(db: Session, user_id: int, extra_points: float) -> StudentGradeRead:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")

    record = db.query(StudentGrade).filter(StudentGrade.user_id == user_id).first()
    if record is None:
        record = StudentGrade(user_id=user_id)
        db.add(record)
    record.extra_points = extra_points

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Extra points for user %s set to %s", user_id, extra_points)
    return get_student_grades(db, user)


def get_leaderboard(db: Session, limit: int = LEADERBOARD_SIZE) -> list[LeaderboardEntry]:
    """Top students by base + final-project points.

    Ties keep ascending user id order (``sorted`` is stable).
    """
    students = db.query(User).filter(User.role == "student").order_by(User.id.asc()).all()

    quiz = _quiz_points(db)
    assignments = _assignment_points(db)
    extra = _extra_points(db)
    final = _final_points(db)

    totals = []
    for student in students:
        base_points = (
            quiz.get(student.id, 0.0)
            + assignments.get(student.id, 0.0)
            + extra.get(student.id, 0.0)
        )
        final_points = final.get(student.id, 0.0)
        totals.append((student, base_points, final_points, base_points + final_points))

    ranked = sorted(totals, key=lambda row: row[3], reverse=True)[:limit]

    return [
        LeaderboardEntry(
            rank=position,
            user_id=student.id,
            full_name=student.full_name,
            email=student.email,
            avatar_url=student.avatar_url,
            base_points=base_points,
            final_points=final_points,
            total_points=total_points,
        )
        for position, (student, base_points, final_points, total_points) in enumerate(
            ranked, start=1
        )
    ]
