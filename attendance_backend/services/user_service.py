"""
attendance_backend/services/user_service.py
User accounts: creation with the email / registry-number rules, admin
updates, guarded deletes
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from attendance_backend.errors import BadRequestError, ConflictError, DependentRowsError
from attendance_backend.orm import Attendance, Course, Enrollment, User, UserRole
from attendance_backend.security.passwords import PasswordHasher
from attendance_backend.services.filters import UserFilters, build_user_query
from attendance_backend.services.lookups import fetch_or_404, row_exists
from attendance_backend.utils.pagination import PageParams, Pagination, paginate

logger = logging.getLogger(__name__)

USER_DETAIL_OPTIONS = (
    selectinload(User.teacher_courses),
    selectinload(User.enrollments).selectinload(Enrollment.course),
    selectinload(User.enrollments).selectinload(Enrollment.section),
)


async def ensure_email_available(db: AsyncSession, email: str, exclude_id: Optional[int] = None) -> None:
    criteria = [User.email == email]
    if exclude_id is not None:
        criteria.append(User.id != exclude_id)
    if await row_exists(db, *criteria):
        raise ConflictError("User with this email already exists")


async def ensure_student_id_available(db: AsyncSession, student_id: str, exclude_id: Optional[int] = None) -> None:
    criteria = [User.student_id == student_id]
    if exclude_id is not None:
        criteria.append(User.id != exclude_id)
    if await row_exists(db, *criteria):
        raise ConflictError("Student with this ID already exists")


async def create_user(
    db: AsyncSession,
    hasher: PasswordHasher,
    *,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    role: UserRole,
    student_id: Optional[str] = None,
    actor_id: Optional[int] = None,
) -> User:
    """
    Insert a user after the uniqueness checks.

    Only STUDENT accounts keep a registry number; any student_id sent for
    another role is dropped.
    """
    await ensure_email_available(db, email)

    if role == UserRole.STUDENT:
        if not student_id:
            raise BadRequestError("Student ID is required for student accounts")
        await ensure_student_id_available(db, student_id)
    else:
        student_id = None

    user = User(
        email=email,
        password_hash=await hasher.hash_async(password),
        first_name=first_name,
        last_name=last_name,
        role=role,
        student_id=student_id,
    )
    db.add(user)
    await db.commit()

    if actor_id is None:
        logger.info(f"User registered: {email} ({role.value})")
    else:
        logger.info(f"User created: {email} ({role.value}) by user {actor_id}")
    return user


async def list_users(db: AsyncSession, filters: UserFilters, params: PageParams) -> Tuple[List[User], Pagination]:
    return await paginate(db, build_user_query(filters), params)


async def get_user(db: AsyncSession, user_id: int) -> User:
    return await fetch_or_404(db, User, user_id, "User", *USER_DETAIL_OPTIONS)


async def update_user(db: AsyncSession, user_id: int, changes: Dict[str, Any], actor_id: int) -> User:
    """
    Apply a partial admin update.

    The resulting account must still satisfy the role rules: a STUDENT has a
    unique registry number, everyone else has none, and a teacher keeps the
    TEACHER role while courses are assigned to them. A student with
    enrollments or attendance marks stays a STUDENT.
    """
    user = await fetch_or_404(db, User, user_id, "User")

    email = changes.get("email")
    if email is not None and email != user.email:
        await ensure_email_available(db, email, exclude_id=user.id)
        user.email = email

    role = changes.get("role") or user.role
    if user.role == UserRole.TEACHER and role != UserRole.TEACHER:
        if await row_exists(db, Course.teacher_id == user.id):
            raise BadRequestError("Cannot change role of a teacher with assigned courses")
    if user.role == UserRole.STUDENT and role != UserRole.STUDENT:
        if (
            await row_exists(db, Enrollment.student_id == user.id)
            or await row_exists(db, Attendance.student_id == user.id)
        ):
            raise BadRequestError("Cannot change role of a student with enrollments or attendance records")

    if role == UserRole.STUDENT:
        student_id = changes.get("student_id") or user.student_id
        if not student_id:
            raise BadRequestError("Student ID is required for student accounts")
        if student_id != user.student_id:
            await ensure_student_id_available(db, student_id, exclude_id=user.id)
        user.student_id = student_id
    else:
        user.student_id = None
    user.role = role

    for field in ("first_name", "last_name"):
        if changes.get(field) is not None:
            setattr(user, field, changes[field])

    await db.commit()
    logger.info(f"User updated: {user.email} by user {actor_id}")
    return await get_user(db, user.id)


async def delete_user(db: AsyncSession, user_id: int, actor_id: int) -> None:
    user = await fetch_or_404(db, User, user_id, "User")

    if (
        await row_exists(db, Course.teacher_id == user.id)
        or await row_exists(db, Enrollment.student_id == user.id)
        or await row_exists(db, Attendance.student_id == user.id)
    ):
        raise DependentRowsError("Cannot delete user with existing courses or enrollments")

    await db.delete(user)
    await db.commit()
    logger.info(f"User deleted: {user.email} by user {actor_id}")
