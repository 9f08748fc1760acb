"""
attendance_backend/schemas/auth.py
Request bodies for registration, login and self-service profile changes
"""
from typing import Optional

from attendance_backend.orm.user import UserRole
from attendance_backend.schemas.common import CamelModel, Email, NonEmptyStr, Password


class RegisterRequest(CamelModel):
    email: Email
    password: Password
    first_name: NonEmptyStr
    last_name: NonEmptyStr
    role: UserRole = UserRole.STUDENT
    student_id: Optional[NonEmptyStr] = None


class LoginRequest(CamelModel):
    email: Email
    password: NonEmptyStr
    user_type: UserRole


class ProfileUpdateRequest(CamelModel):
    """Both names are required, as in the dashboard's profile form."""
    first_name: NonEmptyStr
    last_name: NonEmptyStr


class ChangePasswordRequest(CamelModel):
    current_password: NonEmptyStr
    new_password: Password
