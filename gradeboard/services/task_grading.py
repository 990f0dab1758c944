"""Grading of final-project tasks and the appeal workflow.

Task lifecycle on the grading side:
- a task in "done" (or already "graded") can be graded per student;
- once every assignee holds a grade the task becomes "graded";
- an assignee may appeal a graded task, which moves it to "appeal";
- staff resolve the appeal with a new score, moving it back to "graded".
"""
import logging

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from gradeboard.models.task import Task, TaskAssignee
from gradeboard.models.task_grade import TaskGrade
from gradeboard.models.user import User
from gradeboard.schemas.task_grade import GradingStats, MyTaskGradeRow, MyTaskGrades
from gradeboard.services.errors import (
    ForbiddenError,
    InvalidGradeError,
    InvalidTaskStateError,
    NotFoundError,
    NotGroupMemberError,
)
from gradeboard.services.groups import get_user_membership, is_group_member

logger = logging.getLogger(__name__)

GRADEABLE_STATUSES = ("done", "graded")


def _get_task(db: Session, task_id: int) -> Task:
    task = db.query(Task).filter(Task.id == task_id).first()
    if not task:
        raise NotFoundError("Task not found")
    return task


def _get_student(db: Session, student_id: int) -> User:
    student = db.query(User).filter(User.id == student_id).first()
    if not student:
        raise NotFoundError("Student not found")
    return student


def _validate_points(points: float, max_points: float | None) -> None:
    if points < 0:
        raise InvalidGradeError("Points must be non-negative")
    if max_points is not None and points > max_points:
        raise InvalidGradeError(f"points must be between 0 and {max_points}")


def get_task_grade(db: Session, task_id: int, student_id: int) -> TaskGrade | None:
    return (
        db.query(TaskGrade)
        .filter(TaskGrade.task_id == task_id, TaskGrade.student_id == student_id)
        .first()
    )


def _upsert_grade(
    db: Session,
    task: Task,
    student_id: int,
    grader: User,
    points: float,
    feedback: str | None,
    max_points: float | None,
) -> tuple[TaskGrade, bool]:
    """One grade per (task, student): update it if present, otherwise insert."""
    grade = get_task_grade(db, task.id, student_id)
    created = grade is None

    if not created and max_points is None:
        max_points = grade.max_points
    _validate_points(points, max_points)

    if created:
        grade = TaskGrade(task_id=task.id, student_id=student_id)
        db.add(grade)

    grade.points = points
    grade.max_points = max_points
    if feedback is not None:
        grade.feedback = feedback or None
    grade.grader_id = grader.id
    db.flush()
    return grade, created


def mark_graded_if_complete(db: Session, task: Task) -> None:
    """Move a "done" task to "graded" once every current assignee holds a grade."""
    assignee_ids = {
        row.user_id
        for row in db.query(TaskAssignee.user_id).filter(TaskAssignee.task_id == task.id)
    }
    graded_ids = {
        row.student_id
        for row in db.query(TaskGrade.student_id).filter(TaskGrade.task_id == task.id)
    }
    if graded_ids and assignee_ids <= graded_ids and task.status == "done":
        task.status = "graded"


def _commit(db: Session) -> None:
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise


def grade_task(
    db: Session,
    grader: User,
    task_id: int,
    student_id: int,
    points: float,
    feedback: str | None = None,
    max_points: float | None = None,
) -> tuple[TaskGrade, bool]:
    """Record a grader's score for a (task, student) pair.

    Returns the grade and whether it was newly created.
    """
    task = _get_task(db, task_id)
    _get_student(db, student_id)

    if task.status not in GRADEABLE_STATUSES:
        raise InvalidTaskStateError("Task must be in 'done' status to be graded")

    if not is_group_member(db, task.group_id, student_id):
        raise NotGroupMemberError("Student is not a member of this group")

    grade, created = _upsert_grade(
        db, task, student_id, grader, points, feedback, max_points
    )
    mark_graded_if_complete(db, task)
    _commit(db)

    db.refresh(grade)
    logger.info(
        "Grader %s %s task %s for student %s: %s points",
        grader.id,
        "graded" if created else "regraded",
        task.id,
        student_id,
        points,
    )
    return grade, created


def submit_appeal(
    db: Session,
    student: User,
    group_id: int,
    task_id: int,
    requested_points: float,
    reason: str | None = None,
) -> Task:
    task = _get_task(db, task_id)
    if task.group_id != group_id:
        raise NotFoundError("Task not found")

    if not is_group_member(db, group_id, student.id):
        raise ForbiddenError("Not a member of this group")

    is_assignee = (
        db.query(TaskAssignee)
        .filter(TaskAssignee.task_id == task.id, TaskAssignee.user_id == student.id)
        .first()
        is not None
    )
    if not is_assignee:
        raise ForbiddenError("Only task assignees can appeal a grade")

    if task.status != "graded":
        raise InvalidTaskStateError("Only graded tasks can be appealed")

    if requested_points < 0:
        raise InvalidGradeError("Invalid requested points")

    block = f"\n\n--- GRADE APPEAL ---\nRequested Points: {requested_points:g}\n"
    if reason:
        block += f"Reason: {reason}\n"
    block += "--- END APPEAL ---"

    task.description = (task.description or "") + block
    task.status = "appeal"
    _commit(db)

    db.refresh(task)
    logger.info("Student %s appealed task %s", student.id, task.id)
    return task


def resolve_appeal(
    db: Session,
    grader: User,
    task_id: int,
    student_id: int,
    points: float,
    feedback: str | None = None,
    admin_response: str | None = None,
) -> TaskGrade:
    task = _get_task(db, task_id)
    _get_student(db, student_id)

    if task.status != "appeal":
        raise InvalidTaskStateError("Task is not under appeal")

    if not is_group_member(db, task.group_id, student_id):
        raise NotGroupMemberError("Student is not a member of this group")

    grade, _created = _upsert_grade(db, task, student_id, grader, points, feedback, None)

    if admin_response:
        task.description = (
            f"{task.description or ''}\n\n---\n"
            f"**Admin Response to Appeal:**\n{admin_response}\n---"
        )
    task.status = "graded"
    _commit(db)

    db.refresh(grade)
    logger.info(
        "Grader %s resolved appeal on task %s for student %s: %s points",
        grader.id,
        task.id,
        student_id,
        points,
    )
    return grade


def get_tasks_for_grading(
    db: Session, group_id: int | None = None, status: str | None = None
) -> list[Task]:
    query = db.query(Task).options(
        selectinload(Task.assignees), selectinload(Task.grades)
    )
    if group_id is not None:
        query = query.filter(Task.group_id == group_id)
    if status is not None:
        query = query.filter(Task.status == status)
    return query.order_by(Task.updated_at.desc(), Task.id.desc()).all()


def get_appeal_tasks(db: Session, group_id: int | None = None) -> list[Task]:
    return get_tasks_for_grading(db, group_id=group_id, status="appeal")


def get_grading_stats(db: Session, group_id: int | None = None) -> GradingStats:
    tasks = db.query(Task.id, Task.status)
    grades = db.query(TaskGrade.points, TaskGrade.max_points).join(
        Task, TaskGrade.task_id == Task.id
    )
    if group_id is not None:
        tasks = tasks.filter(Task.group_id == group_id)
        grades = grades.filter(Task.group_id == group_id)

    tasks = tasks.all()
    grades = grades.all()

    # percentage only over grades that carry a maximum
    scored = [g for g in grades if g.max_points]
    total_points = sum(g.points for g in scored)
    total_max_points = sum(g.max_points for g in scored)
    average_score = (
        (total_points / total_max_points) * 100 if total_max_points > 0 else 0.0
    )

    return GradingStats(
        total_tasks=len(tasks),
        graded_tasks=sum(1 for t in tasks if t.status == "graded"),
        pending_tasks=sum(1 for t in tasks if t.status == "done"),
        average_score=round(average_score, 2),
        total_grades=len(grades),
    )


def get_my_task_grades(db: Session, student: User) -> MyTaskGrades:
    membership = get_user_membership(db, student.id)
    if membership is None:
        return MyTaskGrades(
            total_points_earned=0,
            total_tasks_graded=0,
            total_tasks=0,
            average_score=0,
            grades=[],
        )

    total_tasks = (
        db.query(func.count(Task.id))
        .join(TaskAssignee, TaskAssignee.task_id == Task.id)
        .filter(Task.group_id == membership.group_id, TaskAssignee.user_id == student.id)
        .scalar()
    ) or 0

    rows = (
        db.query(
            Task.id.label("task_id"),
            Task.title.label("task_title"),
            TaskGrade.points,
            TaskGrade.graded_at,
        )
        .join(TaskAssignee, TaskAssignee.task_id == Task.id)
        .join(TaskGrade, TaskGrade.task_id == Task.id)
        .filter(
            Task.group_id == membership.group_id,
            Task.status == "graded",
            TaskAssignee.user_id == student.id,
            TaskGrade.student_id == student.id,
        )
        .order_by(TaskGrade.graded_at.asc(), Task.id.asc())
        .all()
    )

    total_points = sum(r.points for r in rows)
    average = round(total_points / len(rows)) if rows else 0

    return MyTaskGrades(
        total_points_earned=total_points,
        total_tasks_graded=len(rows),
        total_tasks=total_tasks,
        average_score=average,
        grades=[
            MyTaskGradeRow(
                task_id=r.task_id,
                task_title=r.task_title,
                points=r.points,
                graded_at=r.graded_at,
            )
            for r in rows
        ],
    )
