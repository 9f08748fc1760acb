"""
attendance_backend/orm/course.py
Course: offered by a department, taught by a TEACHER-role user
"""
from sqlalchemy import Column, Integer, String, Text, ForeignKey
from sqlalchemy.orm import relationship

from attendance_backend.orm.base import TimestampedBase, iso


class Course(TimestampedBase):
    """
    A course such as "CS101 - Introduction to Programming".

    Sections are the scheduled instances students actually enroll in;
    enrollments reference both the course and the chosen section.
    """
    __tablename__ = "courses"

    code = Column(String(50), nullable=False, unique=True, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    credits = Column(Integer, nullable=False)
    department_id = Column(
        Integer,
        ForeignKey("departments.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    teacher_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )

    department = relationship("Department", back_populates="courses")
    teacher = relationship("User", back_populates="teacher_courses")
    sections = relationship(
        "Section",
        back_populates="course",
        order_by="Section.name"
    )
    enrollments = relationship("Enrollment", back_populates="course")

    def __repr__(self):
        return f"<Course(id={self.id}, code='{self.code}')>"

    def to_brief(self) -> dict:
        return {
            "id": self.id,
            "code": self.code,
            "name": self.name,
            "credits": self.credits,
        }

    def to_dict(self, with_sections: bool = False) -> dict:
        """
        Requires department (with faculty), teacher, sections and enrollments
        loaded. with_sections also needs each section's enrollments and
        lessons, and each enrollment's student and section.
        """
        course_dict = {
            "id": self.id,
            "code": self.code,
            "name": self.name,
            "description": self.description,
            "credits": self.credits,
            "departmentId": self.department_id,
            "teacherId": self.teacher_id,
            "department": self.department.to_brief(),
            "teacher": self.teacher.to_brief(),
            "sectionCount": len(self.sections),
            "enrollmentCount": len(self.enrollments),
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
        if with_sections:
            course_dict["sections"] = [
                {**section.to_summary(), "lessonCount": len(section.lessons)}
                for section in self.sections
            ]
            course_dict["enrollments"] = [
                {
                    "id": enrollment.id,
                    "enrolledAt": iso(enrollment.enrolled_at),
                    "student": {**enrollment.student.to_brief(), "studentId": enrollment.student.student_id},
                    "section": {"id": enrollment.section.id, "name": enrollment.section.name},
                }
                for enrollment in self.enrollments
            ]
        return course_dict
