from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, selectinload

from gradeboard.core.current_user import get_current_user
from gradeboard.core.deps import get_db
from gradeboard.models.group import FinalGroup, GroupMember
from gradeboard.models.task import Task, TaskAssignee
from gradeboard.models.user import User
from gradeboard.schemas.group import GroupCreate, GroupRead
from gradeboard.schemas.task import (
    TaskAppeal,
    TaskAssign,
    TaskCreate,
    TaskRead,
    TaskStatusUpdate,
)
from gradeboard.schemas.task_grade import MyTaskGrades
from gradeboard.services import task_grading
from gradeboard.services.groups import get_membership, get_user_membership

router = APIRouter()


def _ensure_group_exists(db: Session, group_id: int) -> FinalGroup:
    group = db.query(FinalGroup).filter(FinalGroup.id == group_id).first()
    if not group:
        raise HTTPException(status_code=404, detail="Group not found")
    return group


def _ensure_member(db: Session, group_id: int, user: User) -> GroupMember:
    membership = get_membership(db, group_id, user.id)
    if not membership:
        raise HTTPException(status_code=403, detail="Not a member of this group")
    return membership


def _ensure_task_in_group(db: Session, group_id: int, task_id: int) -> Task:
    task = (
        db.query(Task)
        .filter(Task.id == task_id, Task.group_id == group_id)
        .first()
    )
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


def _ensure_not_in_group(db: Session, user: User) -> None:
    if get_user_membership(db, user.id) is not None:
        raise HTTPException(status_code=409, detail="Already a member of a final group")


def _commit(db: Session) -> None:
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise


@router.get("/groups", response_model=list[GroupRead])
def list_groups(
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    return (
        db.query(FinalGroup)
        .options(selectinload(FinalGroup.members))
        .order_by(FinalGroup.id.asc())
        .all()
    )


@router.post("/groups", response_model=GroupRead, status_code=status.HTTP_201_CREATED)
def create_group(
    payload: GroupCreate,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    _ensure_not_in_group(db, me)

    group = FinalGroup(name=payload.name, description=payload.description)
    group.members.append(GroupMember(user_id=me.id, role="owner"))
    db.add(group)
    _commit(db)

    db.refresh(group)
    return group


@router.get("/groups/mine", response_model=GroupRead)
def my_group(
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    membership = get_user_membership(db, me.id)
    if membership is None:
        raise HTTPException(status_code=404, detail="Not a member of any final group")
    return membership.group


@router.post("/groups/leave", status_code=status.HTTP_204_NO_CONTENT)
def leave_group(
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    membership = get_user_membership(db, me.id)
    if membership is None:
        raise HTTPException(status_code=404, detail="Not a member of any final group")

    group = membership.group
    if membership.role == "owner":
        if len(group.members) > 1:
            raise HTTPException(
                status_code=400,
                detail="Owner cannot leave the group while other members are present",
            )
        # last member: the group goes with them
        db.delete(group)
        _commit(db)
        return

    tasks = db.query(Task).filter(Task.group_id == group.id).all()
    task_ids = [task.id for task in tasks]
    if task_ids:
        db.query(TaskAssignee).filter(
            TaskAssignee.user_id == me.id,
            TaskAssignee.task_id.in_(task_ids),
        ).delete(synchronize_session=False)
    db.delete(membership)
    db.flush()

    # remaining assignees may already all be graded
    for task in tasks:
        task_grading.mark_graded_if_complete(db, task)
    _commit(db)


@router.post(
    "/groups/{group_id}/join",
    response_model=GroupRead,
    status_code=status.HTTP_201_CREATED,
)
def join_group(
    group_id: int,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    group = _ensure_group_exists(db, group_id)
    _ensure_not_in_group(db, me)

    db.add(GroupMember(group_id=group.id, user_id=me.id, role="member"))
    _commit(db)

    db.refresh(group)
    return group


@router.get("/groups/{group_id}/tasks", response_model=list[TaskRead])
def list_tasks(
    group_id: int,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    _ensure_group_exists(db, group_id)
    _ensure_member(db, group_id, me)

    return (
        db.query(Task)
        .options(selectinload(Task.assignees))
        .filter(Task.group_id == group_id)
        .order_by(Task.id.asc())
        .all()
    )


@router.post(
    "/groups/{group_id}/tasks",
    response_model=TaskRead,
    status_code=status.HTTP_201_CREATED,
)
def create_task(
    group_id: int,
    payload: TaskCreate,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    _ensure_group_exists(db, group_id)
    _ensure_member(db, group_id, me)

    task = Task(
        group_id=group_id,
        title=payload.title,
        description=payload.description,
        status="todo",
        created_by_id=me.id,
    )
    db.add(task)
    _commit(db)

    db.refresh(task)
    return task


@router.patch("/groups/{group_id}/tasks/{task_id}", response_model=TaskRead)
def update_task_status(
    group_id: int,
    task_id: int,
    payload: TaskStatusUpdate,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    _ensure_member(db, group_id, me)
    task = _ensure_task_in_group(db, group_id, task_id)

    if task.status in ("graded", "appeal"):
        raise HTTPException(
            status_code=400,
            detail=f"Task is {task.status}; its status is managed by grading",
        )

    task.status = payload.status
    _commit(db)

    db.refresh(task)
    return task


@router.post("/groups/{group_id}/tasks/{task_id}/assign", response_model=TaskRead)
def assign_task(
    group_id: int,
    task_id: int,
    payload: TaskAssign,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    _ensure_member(db, group_id, me)
    task = _ensure_task_in_group(db, group_id, task_id)

    if get_membership(db, group_id, payload.user_id) is None:
        raise HTTPException(status_code=400, detail="Assignee is not a member of this group")

    already = (
        db.query(TaskAssignee)
        .filter(TaskAssignee.task_id == task.id, TaskAssignee.user_id == payload.user_id)
        .first()
    )
    if not already:
        db.add(TaskAssignee(task_id=task.id, user_id=payload.user_id))
        _commit(db)

    db.refresh(task)
    return task


@router.post("/groups/{group_id}/tasks/{task_id}/appeal", response_model=TaskRead)
def appeal_task_grade(
    group_id: int,
    task_id: int,
    payload: TaskAppeal,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    return task_grading.submit_appeal(
        db,
        me,
        group_id,
        task_id,
        requested_points=payload.requested_points,
        reason=payload.reason,
    )


@router.get("/grades/my-tasks", response_model=MyTaskGrades)
def my_task_grades(
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    return task_grading.get_my_task_grades(db, me)
