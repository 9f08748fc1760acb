"""
attendance_backend/errors.py
Centralized error taxonomy

ERROR RESPONSE STRUCTURE:
{
    "success": false,
    "error": "Human-readable description",
    "code": "UNIQUE_ERROR_CODE",
    "details": {} (optional, for validation errors)
}

HTTP STATUS CODE DISCIPLINE:
- 400: Invalid input, uniqueness violation, refused delete
- 401: Authentication missing, invalid or expired; bad credentials
- 403: Role not permitted for the operation
- 404: Resource (or referenced parent) does not exist
- 429: Rate limit exceeded
- 500: Internal only, never caused by user input
"""
import logging
import uuid
from typing import Optional, Dict, Any

from fastapi import status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ErrorCode:
    """Unique error codes for machine-readable error handling"""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    DUPLICATE_VALUE = "DUPLICATE_VALUE"
    INVALID_REFERENCE = "INVALID_REFERENCE"
    HAS_DEPENDENTS = "HAS_DEPENDENTS"

    AUTH_REQUIRED = "AUTH_REQUIRED"
    AUTH_EXPIRED = "AUTH_EXPIRED"
    AUTH_INVALID = "AUTH_INVALID"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"

    FORBIDDEN = "FORBIDDEN"

    NOT_FOUND = "NOT_FOUND"

    RATE_LIMITED = "RATE_LIMITED"

    INTERNAL_ERROR = "INTERNAL_ERROR"


def new_log_id() -> str:
    return str(uuid.uuid4())[:8]


class APIError(Exception):
    """Base API exception with consistent structure"""

    def __init__(
        self,
        status_code: int,
        message: str,
        code: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.status_code = status_code
        self.message = message
        self.code = code
        self.details = details
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "success": False,
            "error": self.message,
            "code": self.code
        }
        if self.details:
            result["details"] = self.details
        return result

    def to_response(self, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
        """Convert to FastAPI JSONResponse"""
        return JSONResponse(status_code=self.status_code, content=self.to_dict(), headers=headers)


class BadRequestError(APIError):
    """400 Bad Request - Invalid input"""
    def __init__(self, message: str, code: str = ErrorCode.INVALID_INPUT, details: Optional[Dict] = None):
        super().__init__(status.HTTP_400_BAD_REQUEST, message, code, details)


class ConflictError(BadRequestError):
    """
    Uniqueness violation. Reported as 400 rather than 409 so clients only
    have to branch on "bad request".
    """
    def __init__(self, message: str, details: Optional[Dict] = None):
        super().__init__(message, ErrorCode.DUPLICATE_VALUE, details)


class DependentRowsError(BadRequestError):
    """400 - delete refused while child rows still reference the target"""
    def __init__(self, message: str):
        super().__init__(message, ErrorCode.HAS_DEPENDENTS)


class UnauthorizedError(APIError):
    """401 Unauthorized - Authentication required"""
    def __init__(self, message: str = "Access denied. No token provided.", code: str = ErrorCode.AUTH_REQUIRED):
        super().__init__(status.HTTP_401_UNAUTHORIZED, message, code)

    def to_response(self, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
        return super().to_response(headers={"WWW-Authenticate": "Bearer", **(headers or {})})


class ForbiddenError(APIError):
    """403 Forbidden - Access denied"""
    def __init__(self, message: str = "Access denied. Insufficient permissions.", code: str = ErrorCode.FORBIDDEN):
        super().__init__(status.HTTP_403_FORBIDDEN, message, code)


class NotFoundError(APIError):
    """404 Not Found - Resource does not exist"""
    def __init__(self, resource: str, code: str = ErrorCode.NOT_FOUND):
        super().__init__(status.HTTP_404_NOT_FOUND, f"{resource} not found", code)


class RateLimitError(APIError):
    """429 Too Many Requests"""
    def __init__(self, message: str = "Too many requests from this IP, please try again later."):
        super().__init__(status.HTTP_429_TOO_MANY_REQUESTS, message, ErrorCode.RATE_LIMITED)


class InternalError(APIError):
    """500 Internal Server Error - Use sparingly, only for true internal failures"""
    def __init__(self, message: str = "Internal Server Error", log_id: Optional[str] = None):
        details = {"log_id": log_id} if log_id else None
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, message, ErrorCode.INTERNAL_ERROR, details)


def raise_if_missing(result: Any, resource: str) -> Any:
    """Return result or raise 404 if None"""
    if result is None:
        raise NotFoundError(resource)
    return result
