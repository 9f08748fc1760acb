"""
attendance_backend/schemas/users.py
Admin user-management bodies
"""
from typing import Optional

from attendance_backend.orm.user import UserRole
from attendance_backend.schemas.common import CamelModel, Email, NonEmptyStr, Password


class UserCreate(CamelModel):
    email: Email
    password: Password
    first_name: NonEmptyStr
    last_name: NonEmptyStr
    role: UserRole
    student_id: Optional[NonEmptyStr] = None


class UserUpdate(CamelModel):
    email: Optional[Email] = None
    first_name: Optional[NonEmptyStr] = None
    last_name: Optional[NonEmptyStr] = None
    role: Optional[UserRole] = None
    student_id: Optional[NonEmptyStr] = None
