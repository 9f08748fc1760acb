"""
attendance_backend/security/auth.py
Authentication gate: bearer token -> CurrentUser
"""
import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from attendance_backend.database import get_db
from attendance_backend.errors import ErrorCode, UnauthorizedError
from attendance_backend.orm.user import User, UserRole
from attendance_backend.security.passwords import PasswordHasher
from attendance_backend.security.tokens import TokenService

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    """The verified identity attached to a request."""
    id: int
    email: str
    role: UserRole


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
    db: AsyncSession = Depends(get_db),
) -> Optional[CurrentUser]:
    """
    None when no bearer token was sent. A token that is present but invalid,
    expired, or whose subject was deleted is always a 401.
    """
    if credentials is None or not credentials.credentials:
        return None

    claims = tokens.decode(credentials.credentials)

    # Role and email come from the row, not the token, so role changes apply immediately
    result = await db.execute(
        select(User.id, User.email, User.role).where(User.id == claims.user_id)
    )
    row = result.one_or_none()
    if row is None:
        logger.warning(f"Token for missing user {claims.user_id} rejected")
        raise UnauthorizedError("Invalid token. User not found.", ErrorCode.AUTH_INVALID)

    return CurrentUser(id=row.id, email=row.email, role=row.role)

