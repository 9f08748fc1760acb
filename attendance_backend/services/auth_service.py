"""
attendance_backend/services/auth_service.py
Registration, login and self-service account changes
"""
import logging
from typing import Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from attendance_backend.errors import BadRequestError, ErrorCode, UnauthorizedError
from attendance_backend.orm import User, UserRole
from attendance_backend.security.passwords import PasswordHasher
from attendance_backend.security.tokens import TokenService
from attendance_backend.services.lookups import fetch_or_404
from attendance_backend.services.user_service import create_user

logger = logging.getLogger(__name__)


def issue_token(tokens: TokenService, user: User) -> str:
    return tokens.create_access_token(user.id, user.email, user.role)


async def register(
    db: AsyncSession,
    hasher: PasswordHasher,
    tokens: TokenService,
    *,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    role: UserRole,
    student_id: Optional[str] = None,
) -> Tuple[User, str]:
    user = await create_user(
        db,
        hasher,
        email=email,
        password=password,
        first_name=first_name,
        last_name=last_name,
        role=role,
        student_id=student_id,
    )
    return user, issue_token(tokens, user)


async def login(
    db: AsyncSession,
    hasher: PasswordHasher,
    tokens: TokenService,
    *,
    email: str,
    password: str,
    user_type: UserRole,
) -> Tuple[User, str]:
    """
    Check, in order: the account exists, the declared user type matches the
    stored role, the password verifies.
    """
    user = (await db.execute(select(User).where(User.email == email))).scalar_one_or_none()
    if user is None:
        logger.warning(f"Login rejected: unknown email {email}")
        raise UnauthorizedError("Invalid credentials", ErrorCode.INVALID_CREDENTIALS)

    if user.role != user_type:
        logger.warning(f"Login rejected: {email} is {user.role.value}, declared {user_type.value}")
        raise UnauthorizedError("Invalid user type for this account", ErrorCode.INVALID_CREDENTIALS)

    if not await hasher.verify_async(password, user.password_hash):
        logger.warning(f"Login rejected: wrong password for {email}")
        raise UnauthorizedError("Invalid credentials", ErrorCode.INVALID_CREDENTIALS)

    logger.info(f"✓ Login: {email} ({user.role.value})")
    return user, issue_token(tokens, user)


async def get_profile(db: AsyncSession, user_id: int) -> User:
    return await fetch_or_404(db, User, user_id, "User")


async def update_profile(db: AsyncSession, user_id: int, first_name: str, last_name: str) -> User:
    user = await fetch_or_404(db, User, user_id, "User")
    user.first_name = first_name
    user.last_name = last_name
    await db.commit()
    logger.info(f"Profile updated: user {user_id}")
    return await get_profile(db, user_id)


async def change_password(
    db: AsyncSession,
    hasher: PasswordHasher,
    user_id: int,
    current_password: str,
    new_password: str,
) -> None:
    user = await fetch_or_404(db, User, user_id, "User")

    if not await hasher.verify_async(current_password, user.password_hash):
        logger.warning(f"Password change rejected for user {user_id}: current password mismatch")
        raise BadRequestError("Current password is incorrect")

    user.password_hash = await hasher.hash_async(new_password)
    await db.commit()
    logger.info(f"Password changed: user {user_id}")
