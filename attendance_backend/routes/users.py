"""
attendance_backend/routes/users.py
Admin user management
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from attendance_backend.database import get_db
from attendance_backend.orm.user import UserRole
from attendance_backend.schemas.users import UserCreate, UserUpdate
from attendance_backend.security.auth import CurrentUser, get_password_hasher
from attendance_backend.security.passwords import PasswordHasher
from attendance_backend.security.rbac import Operation, require
from attendance_backend.services import user_service
from attendance_backend.services.filters import UserFilters
from attendance_backend.utils.pagination import PageParams, page_params
from attendance_backend.utils.responses import envelope, page_envelope

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/users", tags=["Users"])


@router.get("")
async def list_users(
    role: Optional[UserRole] = Query(None),
    search: Optional[str] = Query(None, max_length=100),
    params: PageParams = Depends(page_params),
    current_user: CurrentUser = Depends(require(Operation.USER_LIST)),
    db: AsyncSession = Depends(get_db),
):
    users, pagination = await user_service.list_users(db, UserFilters(role=role, search=search), params)
    return page_envelope("users", (user.to_dict() for user in users), pagination)


@router.get("/{user_id}")
async def get_user(
    user_id: int,
    current_user: CurrentUser = Depends(require(Operation.USER_READ)),
    db: AsyncSession = Depends(get_db),
):
    user = await user_service.get_user(db, user_id)
    return envelope({"user": user.to_dict_with_assignments()})


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    body: UserCreate,
    current_user: CurrentUser = Depends(require(Operation.USER_CREATE)),
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    user = await user_service.create_user(
        db,
        hasher,
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
        role=body.role,
        student_id=body.student_id,
        actor_id=current_user.id,
    )
    return envelope({"user": user.to_dict()}, "User created successfully")


@router.put("/{user_id}")
async def update_user(
    user_id: int,
    body: UserUpdate,
    current_user: CurrentUser = Depends(require(Operation.USER_UPDATE)),
    db: AsyncSession = Depends(get_db),
):
    user = await user_service.update_user(db, user_id, body.changes(), current_user.id)
    return envelope({"user": user.to_dict()}, "User updated successfully")


@router.delete("/{user_id}")
async def delete_user(
    user_id: int,
    current_user: CurrentUser = Depends(require(Operation.USER_DELETE)),
    db: AsyncSession = Depends(get_db),
):
    await user_service.delete_user(db, user_id, current_user.id)
    return envelope(message="User deleted successfully")
