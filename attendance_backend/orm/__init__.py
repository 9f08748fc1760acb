from .base import Base

# Accounts
from .user import User, UserRole

# Academic hierarchy
from .faculty import Faculty
from .department import Department
from .course import Course
from .section import Section
from .lesson import Lesson, LessonStatus

# Ledger
from .enrollment import Enrollment
from .attendance import Attendance, AttendanceStatus

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Faculty",
    "Department",
    "Course",
    "Section",
    "Lesson",
    "LessonStatus",
    "Enrollment",
    "Attendance",
    "AttendanceStatus",
]
