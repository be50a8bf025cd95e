from typing import List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.core.cache import CacheManager
from app.schemas.response import APIResponse
from app.schemas.user import User, UserCreate
from app.services.user import user_service
from app.utils import deps

router = APIRouter()


@router.post("/new", response_model=APIResponse[User], status_code=status.HTTP_201_CREATED)
async def register_user(
    *,
    response: Response,
    db: Session = Depends(deps.get_db),
    cache: CacheManager = Depends(deps.get_cache),
    user_in: UserCreate,
):
    """Register a user signed in through the identity provider. Idempotent per id."""
    user, created = await user_service.register_user(db, cache, user_in=user_in)
    if not created:
        response.status_code = status.HTTP_200_OK
    return APIResponse(message=f"Welcome, {user.name}", data=User.model_validate(user))


@router.get("/all", response_model=APIResponse[List[User]], dependencies=[Depends(deps.require_admin)])
def get_all_users(db: Session = Depends(deps.get_db)):
    users = user_service.get_all_users(db)
    return APIResponse(message="Users retrieved successfully", data=[User.model_validate(u) for u in users])


@router.get("/{user_id}", response_model=APIResponse[User])
def get_user(user_id: str, db: Session = Depends(deps.get_db)):
    user = user_service.get_user(db, user_id=user_id)
    return APIResponse(message="User retrieved successfully", data=User.model_validate(user))


@router.delete("/{user_id}", response_model=APIResponse[None], dependencies=[Depends(deps.require_admin)])
async def delete_user(
    user_id: str,
    db: Session = Depends(deps.get_db),
    cache: CacheManager = Depends(deps.get_cache),
):
    await user_service.delete_user(db, cache, user_id=user_id)
    return APIResponse(message="User deleted successfully")
