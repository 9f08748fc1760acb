"""
attendance_backend/orm/user.py
User model: credentials, role tag and (for students) the registry number
"""
from enum import Enum

from sqlalchemy import Column, String, Enum as SQLEnum
from sqlalchemy.orm import relationship

from attendance_backend.orm.base import TimestampedBase, iso


class UserRole(str, Enum):
    """Closed set of roles. Every permission decision switches on this."""
    ADMIN = "ADMIN"
    TEACHER = "TEACHER"
    STUDENT = "STUDENT"


class User(TimestampedBase):
    """
    Application user.

    student_id is the university registry number ("S100"), not a foreign key.
    It is required for STUDENT accounts and NULL for everyone else.
    """
    __tablename__ = "users"

    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    role = Column(SQLEnum(UserRole, name="user_role"), nullable=False, default=UserRole.STUDENT, index=True)
    student_id = Column(String(50), nullable=True, unique=True, index=True)

    # Relationships
    teacher_courses = relationship(
        "Course",
        back_populates="teacher",
        order_by="Course.code"
    )

    enrollments = relationship(
        "Enrollment",
        back_populates="student"
    )

    attendances = relationship(
        "Attendance",
        back_populates="student"
    )

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role={self.role})>"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def to_dict(self) -> dict:
        """Public representation. The password hash never leaves the model."""
        return {
            "id": self.id,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "role": self.role.value if self.role else None,
            "studentId": self.student_id,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }

    def to_brief(self) -> dict:
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
        }

    def to_dict_with_assignments(self) -> dict:
        """
        User plus the courses they teach and the sections they attend.
        Requires teacher_courses and enrollments (with course and section) loaded.
        """
        user_dict = self.to_dict()
        user_dict["teacherCourses"] = [course.to_brief() for course in self.teacher_courses]
        user_dict["enrollments"] = [
            {
                "id": enrollment.id,
                "course": enrollment.course.to_brief(),
                "section": {
                    "id": enrollment.section.id,
                    "name": enrollment.section.name,
                    "schedule": enrollment.section.schedule,
                    "room": enrollment.section.room,
                },
            }
            for enrollment in self.enrollments
        ]
        return user_dict
