from typing import Optional
from fastapi import Depends, Query, Request
from sqlalchemy.orm import Session

from app.core.cache import CacheManager
from app.core.constants import RoleEnum
from app.core.database import get_db
from app.core.exceptions import ForbiddenError, UnauthorizedError
from app.crud.user import user as user_crud
from app.models.user import User

__all__ = ["get_db", "get_cache", "require_admin"]


def get_cache(request: Request) -> CacheManager:
    """The cache built at startup and owned by the application."""
    return request.app.state.cache


def require_admin(
    id: Optional[str] = Query(None, description="ID of the calling admin"),
    db: Session = Depends(get_db),
) -> User:
    if not id:
        raise UnauthorizedError("Please login first as admin")

    user = user_crud.get(db, id=id)
    if not user:
        raise UnauthorizedError("Invalid ID")

    if user.role != RoleEnum.ADMIN:
        raise ForbiddenError("You are not admin")
    return user
