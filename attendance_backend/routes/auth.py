"""
attendance_backend/routes/auth.py
Registration, login and the caller's own profile
"""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from attendance_backend.database import get_db
from attendance_backend.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
)
from attendance_backend.security.auth import CurrentUser, get_password_hasher, get_token_service
from attendance_backend.security.passwords import PasswordHasher
from attendance_backend.security.rbac import Operation, require
from attendance_backend.security.tokens import TokenService
from attendance_backend.services import auth_service
from attendance_backend.utils.responses import envelope

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
):
    """
    Public self-registration. The caller picks the role; STUDENT accounts
    must carry a registry number.
    """
    user, token = await auth_service.register(
        db,
        hasher,
        tokens,
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
        role=body.role,
        student_id=body.student_id,
    )
    return envelope({"user": user.to_dict(), "token": token}, "User registered successfully")


@router.post("/login")
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
):
    user, token = await auth_service.login(
        db,
        hasher,
        tokens,
        email=body.email,
        password=body.password,
        user_type=body.user_type,
    )
    return envelope({"user": user.to_dict(), "token": token}, "Login successful")


@router.get("/profile")
async def get_profile(
    current_user: CurrentUser = Depends(require(Operation.PROFILE_READ)),
    db: AsyncSession = Depends(get_db),
):
    user = await auth_service.get_profile(db, current_user.id)
    return envelope({"user": user.to_dict()})


@router.put("/profile")
async def update_profile(
    body: ProfileUpdateRequest,
    current_user: CurrentUser = Depends(require(Operation.PROFILE_UPDATE)),
    db: AsyncSession = Depends(get_db),
):
    user = await auth_service.update_profile(db, current_user.id, body.first_name, body.last_name)
    return envelope({"user": user.to_dict()}, "Profile updated successfully")


@router.put("/change-password")
async def change_password(
    body: ChangePasswordRequest,
    current_user: CurrentUser = Depends(require(Operation.PASSWORD_CHANGE)),
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    await auth_service.change_password(db, hasher, current_user.id, body.current_password, body.new_password)
    return envelope(message="Password changed successfully")
