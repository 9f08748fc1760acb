"""
attendance_backend/services/filters.py
Typed list filters and the query builders that turn them into SELECTs.

Equality filters are AND-ed together; the free-text search term is matched
case-insensitively as a substring and OR-ed across the entity's text columns.
"""
from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy import Select, or_, select

from attendance_backend.orm import (
    Attendance,
    AttendanceStatus,
    Course,
    Department,
    Faculty,
    Lesson,
    LessonStatus,
    Section,
    User,
    UserRole,
)


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def contains_any(term: str, *columns):
    """Case-insensitive substring match against any of columns."""
    pattern = _like_pattern(term)
    return or_(*(column.ilike(pattern, escape="\\") for column in columns))


def _search(term: Optional[str]) -> Optional[str]:
    if term is None:
        return None
    term = term.strip()
    return term or None


@dataclass(frozen=True)
class UserFilters:
    role: Optional[UserRole] = None
    search: Optional[str] = None


def build_user_query(filters: UserFilters) -> Select:
    query = select(User)
    if filters.role is not None:
        query = query.where(User.role == filters.role)
    term = _search(filters.search)
    if term:
        query = query.where(contains_any(term, User.first_name, User.last_name, User.email, User.student_id))
    return query.order_by(User.created_at.desc(), User.id.desc())


@dataclass(frozen=True)
class FacultyFilters:
    search: Optional[str] = None


def build_faculty_query(filters: FacultyFilters) -> Select:
    query = select(Faculty)
    term = _search(filters.search)
    if term:
        query = query.where(contains_any(term, Faculty.name, Faculty.description))
    return query.order_by(Faculty.name)


@dataclass(frozen=True)
class DepartmentFilters:
    faculty_id: Optional[int] = None
    search: Optional[str] = None


def build_department_query(filters: DepartmentFilters) -> Select:
    query = select(Department)
    if filters.faculty_id is not None:
        query = query.where(Department.faculty_id == filters.faculty_id)
    term = _search(filters.search)
    if term:
        query = query.where(contains_any(term, Department.name, Department.description))
    return query.order_by(Department.name, Department.id)


@dataclass(frozen=True)
class CourseFilters:
    department_id: Optional[int] = None
    teacher_id: Optional[int] = None
    search: Optional[str] = None


def build_course_query(filters: CourseFilters) -> Select:
    query = select(Course)
    if filters.department_id is not None:
        query = query.where(Course.department_id == filters.department_id)
    if filters.teacher_id is not None:
        query = query.where(Course.teacher_id == filters.teacher_id)
    term = _search(filters.search)
    if term:
        query = query.where(contains_any(term, Course.code, Course.name, Course.description))
    return query.order_by(Course.code)


@dataclass(frozen=True)
class SectionFilters:
    course_id: Optional[int] = None
    search: Optional[str] = None


def build_section_query(filters: SectionFilters) -> Select:
    query = select(Section)
    if filters.course_id is not None:
        query = query.where(Section.course_id == filters.course_id)
    term = _search(filters.search)
    if term:
        query = query.where(contains_any(term, Section.name, Section.room, Section.schedule))
    return query.order_by(Section.name, Section.id)


@dataclass(frozen=True)
class LessonFilters:
    section_id: Optional[int] = None
    status: Optional[LessonStatus] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None


def build_lesson_query(filters: LessonFilters) -> Select:
    query = select(Lesson)
    if filters.section_id is not None:
        query = query.where(Lesson.section_id == filters.section_id)
    if filters.status is not None:
        query = query.where(Lesson.status == filters.status)
    if filters.date_from is not None:
        query = query.where(Lesson.date >= filters.date_from)
    if filters.date_to is not None:
        query = query.where(Lesson.date <= filters.date_to)
    return query.order_by(Lesson.date.desc(), Lesson.start_time, Lesson.id)


@dataclass(frozen=True)
class AttendanceFilters:
    lesson_id: Optional[int] = None
    student_id: Optional[int] = None
    status: Optional[AttendanceStatus] = None


def build_attendance_query(filters: AttendanceFilters) -> Select:
    query = select(Attendance)
    if filters.lesson_id is not None:
        query = query.where(Attendance.lesson_id == filters.lesson_id)
    if filters.student_id is not None:
        query = query.where(Attendance.student_id == filters.student_id)
    if filters.status is not None:
        query = query.where(Attendance.status == filters.status)
    return query.order_by(Attendance.lesson_id.desc(), Attendance.student_id)
