"""
attendance_backend/orm/faculty.py
Faculty: top of the academic hierarchy
"""
from sqlalchemy import Column, String, Text
from sqlalchemy.orm import relationship

from attendance_backend.orm.base import TimestampedBase, iso


class Faculty(TimestampedBase):
    __tablename__ = "faculties"

    name = Column(String(200), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)

    departments = relationship(
        "Department",
        back_populates="faculty",
        order_by="Department.name"
    )

    def __repr__(self):
        return f"<Faculty(id={self.id}, name='{self.name}')>"

    def to_brief(self) -> dict:
        return {"id": self.id, "name": self.name}

    def to_dict(self, with_departments: bool = False) -> dict:
        """
        Requires departments loaded; with_departments also needs each
        department's courses.
        """
        faculty_dict = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "departmentCount": len(self.departments),
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
        if with_departments:
            faculty_dict["departments"] = [
                {
                    "id": department.id,
                    "name": department.name,
                    "courseCount": len(department.courses),
                }
                for department in self.departments
            ]
        return faculty_dict
