from sqlalchemy.orm import Session

from gradeboard.models.group import FinalGroup, GroupMember
from gradeboard.services.errors import NotFoundError


def get_group(db: Session, group_id: int) -> FinalGroup:
    group = db.query(FinalGroup).filter(FinalGroup.id == group_id).first()
    if not group:
        raise NotFoundError("Group not found")
    return group


def get_membership(db: Session, group_id: int, user_id: int) -> GroupMember | None:
    return (
        db.query(GroupMember)
        .filter(GroupMember.group_id == group_id, GroupMember.user_id == user_id)
        .first()
    )


def is_group_member(db: Session, group_id: int, user_id: int) -> bool:
    return get_membership(db, group_id, user_id) is not None


def get_user_membership(db: Session, user_id: int) -> GroupMember | None:
    """A student belongs to at most one final group."""
    return db.query(GroupMember).filter(GroupMember.user_id == user_id).first()
