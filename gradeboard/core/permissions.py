from fastapi import Depends, HTTPException, status

from gradeboard.core.config import STAFF_ROLES
from gradeboard.core.current_user import get_current_user
from gradeboard.models.user import User


def is_staff(user: User) -> bool:
    return user.role in STAFF_ROLES


def require_staff(current_user: User = Depends(get_current_user)) -> User:
    if not is_staff(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient permissions",
        )
    return current_user
