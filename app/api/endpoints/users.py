import logging
from typing import List

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.deps import get_current_admin, get_current_user
from app.core.exceptions import NotFoundError
from app.crud.user import UserCRUD
from app.db.base import MAX_DB_INT
from app.db.sessions import get_async_session
from app.models.user import User
from app.schemas.user import UserRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])
my_router = APIRouter(prefix="/my/user", tags=["Users"])


@router.get("", response_model=List[UserRead])
async def list_users(
    skip: int = Query(0, ge=0, le=MAX_DB_INT),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_async_session),
    current_admin: User = Depends(get_current_admin),
):
    """Admin only: list user accounts."""
    return await UserCRUD(db).get_all(skip=skip, limit=limit)


@router.get("/{user_id}", response_model=UserRead)
async def get_user(
    user_id: int = Path(..., ge=1, le=MAX_DB_INT),
    db: AsyncSession = Depends(get_async_session),
    current_admin: User = Depends(get_current_admin),
):
    user = await UserCRUD(db).get_by_id(user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


@my_router.get("", response_model=UserRead)
async def get_my_user(current_user: User = Depends(get_current_user)):
    return current_user
