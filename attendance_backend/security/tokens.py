"""
attendance_backend/security/tokens.py
Stateless signed access tokens (JWT, HS256)
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt

from attendance_backend.errors import ErrorCode, UnauthorizedError
from attendance_backend.orm.user import UserRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    email: str
    role: UserRole


class TokenService:
    def __init__(self, secret: str, lifetime: timedelta, algorithm: str = "HS256"):
        self.secret = secret
        self.lifetime = lifetime
        self.algorithm = algorithm

    def create_access_token(
        self,
        user_id: int,
        email: str,
        role: UserRole,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        """Create JWT access token embedding subject id, email and role"""
        expire = datetime.now(timezone.utc) + (expires_delta or self.lifetime)
        to_encode = {
            "sub": str(user_id),
            "email": email,
            "role": role.value,
            "exp": expire,
            "type": "access",
        }
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def decode(self, token: str) -> TokenClaims:
        """
        Verify signature and expiry and return the claims.

        Raises UnauthorizedError for anything that is not a valid, unexpired
        access token issued with our secret.
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise UnauthorizedError("Token expired", ErrorCode.AUTH_EXPIRED)
        except JWTError:
            raise UnauthorizedError("Invalid token.", ErrorCode.AUTH_INVALID)

        try:
            return TokenClaims(
                user_id=int(payload["sub"]),
                email=payload["email"],
                role=UserRole(payload["role"]),
            )
        except (KeyError, TypeError, ValueError):
            logger.warning("Token with malformed payload rejected")
            raise UnauthorizedError("Invalid token.", ErrorCode.AUTH_INVALID)
