"""Final-project grade aggregation and evaluation snapshots.

A student's final-project total is the plain sum of the points of every
task grade they hold within a group. ``FinalEvaluation`` rows cache that
total per (group, student) and are only refreshed by the recalculation
functions below.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gradeboard.models.evaluation import FinalEvaluation
from gradeboard.models.group import GroupMember
from gradeboard.models.task import Task
from gradeboard.models.task_grade import TaskGrade
from gradeboard.models.user import User
from gradeboard.schemas.final_grade import (
    GroupStudentGrade,
    RecalculationFailure,
    RecalculationReport,
    SimpleGradeStats,
    StudentGradeSummary,
    TaskGradeLine,
)
from gradeboard.services.errors import NoGradedTasksError, NotGroupMemberError
from gradeboard.services.groups import get_group, is_group_member

logger = logging.getLogger(__name__)


def get_student_grade_summary(
    db: Session, student_id: int, group_id: int
) -> StudentGradeSummary | None:
    """Sum the student's task points in the group, or None if nothing is graded."""
    rows = (
        db.query(
            TaskGrade.task_id,
            Task.title.label("task_title"),
            TaskGrade.points,
            TaskGrade.max_points,
            TaskGrade.feedback,
            TaskGrade.graded_at,
        )
        .join(Task, TaskGrade.task_id == Task.id)
        .filter(TaskGrade.student_id == student_id, Task.group_id == group_id)
        .order_by(TaskGrade.graded_at.asc(), TaskGrade.id.asc())
        .all()
    )

    if not rows:
        return None

    return StudentGradeSummary(
        student_id=student_id,
        group_id=group_id,
        total_points=sum(r.points for r in rows),
        graded_task_count=len(rows),
        task_grades=[
            TaskGradeLine(
                task_id=r.task_id,
                task_title=r.task_title,
                points=r.points,
                max_points=r.max_points,
                feedback=r.feedback,
                graded_at=r.graded_at,
            )
            for r in rows
        ],
    )


def _find_evaluation(db: Session, student_id: int, group_id: int) -> FinalEvaluation | None:
    return (
        db.query(FinalEvaluation)
        .filter(FinalEvaluation.user_id == student_id, FinalEvaluation.group_id == group_id)
        .first()
    )


def _apply_summary(
    evaluation: FinalEvaluation,
    summary: StudentGradeSummary,
    overall_feedback: str | None,
    evaluator: User | None,
) -> None:
    evaluation.total_points = summary.total_points
    evaluation.overall_feedback = overall_feedback or None
    if evaluator is not None:
        evaluation.evaluator_id = evaluator.id
    evaluation.updated_at = datetime.now(timezone.utc)


def update_student_final_grade(
    db: Session,
    student_id: int,
    group_id: int,
    overall_feedback: str | None = None,
    evaluator: User | None = None,
) -> FinalEvaluation:
    """Recalculate and store the evaluation snapshot for one student."""
    if not is_group_member(db, group_id, student_id):
        raise NotGroupMemberError("Student is not a member of this group")

    summary = get_student_grade_summary(db, student_id, group_id)
    if summary is None:
        raise NoGradedTasksError("No graded tasks found for this student")

    evaluation = _find_evaluation(db, student_id, group_id)
    if evaluation is None:
        evaluation = FinalEvaluation(group_id=group_id, user_id=student_id)
        db.add(evaluation)
    _apply_summary(evaluation, summary, overall_feedback, evaluator)

    try:
        db.commit()
    except IntegrityError:
        # a concurrent recalculation inserted the row first; update theirs
        db.rollback()
        evaluation = _find_evaluation(db, student_id, group_id)
        if evaluation is None:
            raise
        _apply_summary(evaluation, summary, overall_feedback, evaluator)
        try:
            db.commit()
        except Exception:
            db.rollback()
            raise
    except Exception:
        db.rollback()
        raise

    db.refresh(evaluation)
    logger.info(
        "Final grade for student %s in group %s: %s points over %s tasks",
        student_id,
        group_id,
        summary.total_points,
        summary.graded_task_count,
    )
    return evaluation


def recalculate_all_final_grades(db: Session) -> RecalculationReport:
    """Refresh every existing snapshot; one student's failure does not stop the rest."""
    snapshots = (
        db.query(
            FinalEvaluation.user_id,
            FinalEvaluation.group_id,
            FinalEvaluation.overall_feedback,
        )
        .order_by(FinalEvaluation.id.asc())
        .all()
    )

    recalculated = 0
    failures: list[RecalculationFailure] = []
    for snapshot in snapshots:
        try:
            update_student_final_grade(
                db,
                snapshot.user_id,
                snapshot.group_id,
                snapshot.overall_feedback,
            )
            recalculated += 1
        except Exception as exc:
            db.rollback()
            logger.exception(
                "Failed to recalculate final grade for student %s in group %s",
                snapshot.user_id,
                snapshot.group_id,
            )
            failures.append(
                RecalculationFailure(
                    student_id=snapshot.user_id,
                    group_id=snapshot.group_id,
                    error=str(exc),
                )
            )

    logger.info(
        "Recalculated %s final grades (%s failed)", recalculated, len(failures)
    )
    return RecalculationReport(
        recalculated=recalculated, failed=len(failures), failures=failures
    )


def get_group_final_grades(db: Session, group_id: int) -> list[GroupStudentGrade]:
    get_group(db, group_id)

    members = (
        db.query(User)
        .join(GroupMember, GroupMember.user_id == User.id)
        .filter(GroupMember.group_id == group_id)
        .order_by(User.id.asc())
        .all()
    )

    result: list[GroupStudentGrade] = []
    for member in members:
        summary = get_student_grade_summary(db, member.id, group_id)
        if summary is None:
            continue
        result.append(
            GroupStudentGrade(
                **summary.model_dump(),
                student_name=member.display_name,
                student_email=member.email or "",
            )
        )
    return result


def get_simple_grade_stats(db: Session) -> SimpleGradeStats:
    total_students = db.query(func.count(GroupMember.id)).scalar() or 0
    students_with_grades = db.query(func.count(FinalEvaluation.id)).scalar() or 0
    total_points_awarded = (
        db.query(func.coalesce(func.sum(FinalEvaluation.total_points), 0)).scalar()
        or 0
    )

    average_points = (
        round(total_points_awarded / students_with_grades)
        if students_with_grades > 0
        else 0
    )

    return SimpleGradeStats(
        total_students=total_students,
        students_with_grades=students_with_grades,
        average_points=average_points,
        total_points_awarded=float(total_points_awarded),
    )
