"""
attendance_backend/orm/department.py
Department: belongs to a faculty, name unique within that faculty
"""
from sqlalchemy import Column, Integer, String, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from attendance_backend.orm.base import TimestampedBase, iso


class Department(TimestampedBase):
    __tablename__ = "departments"

    name = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=True)
    faculty_id = Column(
        Integer,
        ForeignKey("faculties.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )

    faculty = relationship("Faculty", back_populates="departments")
    courses = relationship(
        "Course",
        back_populates="department",
        order_by="Course.code"
    )

    __table_args__ = (
        UniqueConstraint("name", "faculty_id", name="uq_department_name_faculty"),
    )

    def __repr__(self):
        return f"<Department(id={self.id}, name='{self.name}', faculty_id={self.faculty_id})>"

    def to_brief(self) -> dict:
        """Requires faculty loaded."""
        return {
            "id": self.id,
            "name": self.name,
            "faculty": self.faculty.to_brief(),
        }

    def to_dict(self, with_courses: bool = False) -> dict:
        """Requires faculty and courses loaded (and courses' teachers for with_courses)."""
        department_dict = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "facultyId": self.faculty_id,
            "faculty": self.faculty.to_brief(),
            "courseCount": len(self.courses),
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
        if with_courses:
            department_dict["courses"] = [
                {**course.to_brief(), "teacher": course.teacher.to_brief()}
                for course in self.courses
            ]
        return department_dict
