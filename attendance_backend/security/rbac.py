"""
attendance_backend/security/rbac.py
Centralized role-based access control

Every route declares the Operation it performs and depends on
require(Operation.X). No route checks roles by hand.

Access is decided by an ordered pipeline of guards. Each guard returns a
GuardResult: proceed, or reject with the APIError to send. The pipeline
stops at the first rejection.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, FrozenSet, Optional, Sequence

from fastapi import Depends

from attendance_backend.errors import APIError, ErrorCode, ForbiddenError, UnauthorizedError
from attendance_backend.orm.user import UserRole
from attendance_backend.security.auth import CurrentUser, get_optional_user

logger = logging.getLogger(__name__)


class Operation(str, Enum):
    # Self-service
    PROFILE_READ = "profile:read"
    PROFILE_UPDATE = "profile:update"
    PASSWORD_CHANGE = "password:change"

    # User administration
    USER_LIST = "user:list"
    USER_READ = "user:read"
    USER_CREATE = "user:create"
    USER_UPDATE = "user:update"
    USER_DELETE = "user:delete"

    # Academic hierarchy
    FACULTY_READ = "faculty:read"
    FACULTY_WRITE = "faculty:write"
    DEPARTMENT_READ = "department:read"
    DEPARTMENT_WRITE = "department:write"
    COURSE_READ = "course:read"
    COURSE_WRITE = "course:write"
    COURSE_LIST_TEACHING = "course:list-teaching"
    COURSE_LIST_ENROLLED = "course:list-enrolled"
    SECTION_READ = "section:read"
    SECTION_WRITE = "section:write"
    SECTION_DELETE = "section:delete"
    ENROLLMENT_WRITE = "enrollment:write"
    LESSON_READ = "lesson:read"
    LESSON_WRITE = "lesson:write"

    # Attendance ledger
    ATTENDANCE_READ = "attendance:read"
    ATTENDANCE_WRITE = "attendance:write"
    ATTENDANCE_DELETE = "attendance:delete"
    ATTENDANCE_READ_OWN = "attendance:read-own"


ALL_ROLES: FrozenSet[UserRole] = frozenset(UserRole)
ADMIN_ONLY: FrozenSet[UserRole] = frozenset({UserRole.ADMIN})
TEACHER_OR_ADMIN: FrozenSet[UserRole] = frozenset({UserRole.TEACHER, UserRole.ADMIN})
STUDENT_ONLY: FrozenSet[UserRole] = frozenset({UserRole.STUDENT})

PERMISSIONS: Dict[Operation, FrozenSet[UserRole]] = {
    Operation.PROFILE_READ: ALL_ROLES,
    Operation.PROFILE_UPDATE: ALL_ROLES,
    Operation.PASSWORD_CHANGE: ALL_ROLES,

    Operation.USER_LIST: ADMIN_ONLY,
    Operation.USER_READ: ADMIN_ONLY,
    Operation.USER_CREATE: ADMIN_ONLY,
    Operation.USER_UPDATE: ADMIN_ONLY,
    Operation.USER_DELETE: ADMIN_ONLY,

    Operation.FACULTY_READ: ALL_ROLES,
    Operation.FACULTY_WRITE: ADMIN_ONLY,
    Operation.DEPARTMENT_READ: ALL_ROLES,
    Operation.DEPARTMENT_WRITE: ADMIN_ONLY,
    Operation.COURSE_READ: ALL_ROLES,
    Operation.COURSE_WRITE: ADMIN_ONLY,
    Operation.COURSE_LIST_TEACHING: TEACHER_OR_ADMIN,
    Operation.COURSE_LIST_ENROLLED: ALL_ROLES,
    Operation.SECTION_READ: ALL_ROLES,
    Operation.SECTION_WRITE: TEACHER_OR_ADMIN,
    Operation.SECTION_DELETE: ADMIN_ONLY,
    Operation.ENROLLMENT_WRITE: ADMIN_ONLY,
    Operation.LESSON_READ: ALL_ROLES,
    Operation.LESSON_WRITE: TEACHER_OR_ADMIN,

    Operation.ATTENDANCE_READ: TEACHER_OR_ADMIN,
    Operation.ATTENDANCE_WRITE: TEACHER_OR_ADMIN,
    Operation.ATTENDANCE_DELETE: ADMIN_ONLY,
    Operation.ATTENDANCE_READ_OWN: STUDENT_ONLY,
}

_missing = set(Operation) - set(PERMISSIONS)
if _missing:
    raise RuntimeError(f"Operations without a permission entry: {sorted(op.value for op in _missing)}")


def permitted_roles(operation: Operation) -> FrozenSet[UserRole]:
    return PERMISSIONS[operation]


def is_permitted(role: UserRole, operation: Operation) -> bool:
    return role in PERMISSIONS[operation]


# ================= GUARD PIPELINE =================

@dataclass(frozen=True)
class GuardResult:
    error: Optional[APIError] = None

    @property
    def passed(self) -> bool:
        return self.error is None

    @classmethod
    def proceed(cls) -> "GuardResult":
        return cls()

    @classmethod
    def reject(cls, error: APIError) -> "GuardResult":
        return cls(error)


Guard = Callable[[Optional[CurrentUser]], GuardResult]


def authenticated(user: Optional[CurrentUser]) -> GuardResult:
    if user is None:
        return GuardResult.reject(UnauthorizedError())
    return GuardResult.proceed()


def role_in(roles: FrozenSet[UserRole]) -> Guard:
    def guard(user: Optional[CurrentUser]) -> GuardResult:
        if user is None:
            return GuardResult.reject(UnauthorizedError("Access denied. User not authenticated."))
        if user.role not in roles:
            return GuardResult.reject(ForbiddenError("Access denied. Insufficient permissions.", ErrorCode.FORBIDDEN))
        return GuardResult.proceed()
    return guard


def run_guards(guards: Sequence[Guard], user: Optional[CurrentUser]) -> GuardResult:
    for guard in guards:
        result = guard(user)
        if not result.passed:
            return result
    return GuardResult.proceed()


def pipeline_for(operation: Operation) -> Sequence[Guard]:
    return (authenticated, role_in(permitted_roles(operation)))


def require(operation: Operation):
    """
    Dependency factory.
    Usage: current_user: CurrentUser = Depends(require(Operation.COURSE_WRITE))
    """
    guards = pipeline_for(operation)

    async def dependency(user: Optional[CurrentUser] = Depends(get_optional_user)) -> CurrentUser:
        result = run_guards(guards, user)
        if not result.passed:
            if user is not None:
                logger.warning(f"Access denied: user {user.id} ({user.role.value}) attempted {operation.value}")
            raise result.error
        return user

    return dependency
