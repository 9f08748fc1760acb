"""
attendance_backend/schemas/academics.py
Bodies for the faculty > department > course > section hierarchy
"""
from typing import Optional

from pydantic import Field

from attendance_backend.schemas.common import CamelModel, NonEmptyStr


# ================= FACULTY =================

class FacultyCreate(CamelModel):
    name: NonEmptyStr
    description: Optional[str] = None


class FacultyUpdate(CamelModel):
    name: Optional[NonEmptyStr] = None
    description: Optional[str] = None


# ================= DEPARTMENT =================

class DepartmentCreate(CamelModel):
    name: NonEmptyStr
    faculty_id: int
    description: Optional[str] = None


class DepartmentUpdate(CamelModel):
    name: Optional[NonEmptyStr] = None
    faculty_id: Optional[int] = None
    description: Optional[str] = None


# ================= COURSE =================

class CourseCreate(CamelModel):
    code: NonEmptyStr
    name: NonEmptyStr
    description: Optional[str] = None
    credits: int = Field(..., ge=1, le=10)
    department_id: int
    teacher_id: int


class CourseUpdate(CamelModel):
    code: Optional[NonEmptyStr] = None
    name: Optional[NonEmptyStr] = None
    description: Optional[str] = None
    credits: Optional[int] = Field(None, ge=1, le=10)
    department_id: Optional[int] = None
    teacher_id: Optional[int] = None


# ================= SECTION =================

class SectionCreate(CamelModel):
    name: NonEmptyStr
    course_id: int
    schedule: NonEmptyStr
    room: NonEmptyStr
    capacity: int = Field(..., ge=1)


class SectionUpdate(CamelModel):
    """The owning course is fixed once a section exists."""
    name: Optional[NonEmptyStr] = None
    schedule: Optional[NonEmptyStr] = None
    room: Optional[NonEmptyStr] = None
    capacity: Optional[int] = Field(None, ge=1)


class EnrollmentRequest(CamelModel):
    student_id: int
