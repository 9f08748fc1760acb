"""
attendance_backend/seed/demo_data.py
Demo university for the dashboard (idempotent)

Every row is looked up by its natural key first, so running the seed twice
creates nothing the second time.
"""
import logging
from datetime import date, time, timedelta
from typing import Any, Dict, Optional, Type

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from attendance_backend.database import Database
from attendance_backend.orm import (
    Course,
    Department,
    Enrollment,
    Faculty,
    Lesson,
    LessonStatus,
    Section,
    User,
    UserRole,
)
from attendance_backend.security.passwords import PasswordHasher

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

USERS = [
    {"email": "admin@university.edu", "first_name": "Ada", "last_name": "Admin", "role": UserRole.ADMIN},
    {"email": "j.smith@university.edu", "first_name": "John", "last_name": "Smith", "role": UserRole.TEACHER},
    {"email": "m.garcia@university.edu", "first_name": "Maria", "last_name": "Garcia", "role": UserRole.TEACHER},
    {"email": "alice@student.university.edu", "first_name": "Alice", "last_name": "Johnson",
     "role": UserRole.STUDENT, "student_id": "S001"},
    {"email": "bob@student.university.edu", "first_name": "Bob", "last_name": "Williams",
     "role": UserRole.STUDENT, "student_id": "S002"},
    {"email": "carol@student.university.edu", "first_name": "Carol", "last_name": "Brown",
     "role": UserRole.STUDENT, "student_id": "S003"},
]

FACULTIES = [
    {"name": "Faculty of Engineering", "description": "Engineering and computing disciplines"},
    {"name": "Faculty of Science", "description": "Natural and formal sciences"},
]

DEPARTMENTS = [
    {"name": "Computer Science", "faculty": "Faculty of Engineering", "description": "Software and theory of computation"},
    {"name": "Mathematics", "faculty": "Faculty of Science", "description": "Pure and applied mathematics"},
]

COURSES = [
    {"code": "CS101", "name": "Introduction to Programming", "credits": 4,
     "department": "Computer Science", "teacher": "j.smith@university.edu"},
    {"code": "CS201", "name": "Data Structures", "credits": 4,
     "department": "Computer Science", "teacher": "j.smith@university.edu"},
    {"code": "MATH101", "name": "Calculus I", "credits": 3,
     "department": "Mathematics", "teacher": "m.garcia@university.edu"},
]

SECTIONS = [
    {"course": "CS101", "name": "A", "schedule": "Mon/Wed 09:00-10:30", "room": "ENG-101", "capacity": 30},
    {"course": "CS101", "name": "B", "schedule": "Tue/Thu 13:00-14:30", "room": "ENG-102", "capacity": 30},
    {"course": "CS201", "name": "A", "schedule": "Mon/Wed 11:00-12:30", "room": "ENG-201", "capacity": 25},
    {"course": "MATH101", "name": "A", "schedule": "Tue/Thu 09:00-10:30", "room": "SCI-110", "capacity": 40},
]

ENROLLMENTS = [
    ("S001", "CS101", "A"),
    ("S001", "MATH101", "A"),
    ("S002", "CS101", "B"),
    ("S002", "CS201", "A"),
    ("S003", "MATH101", "A"),
]

LESSON_TOPICS = ["Course overview", "Core concepts", "Worked examples", "Review session"]


async def _get_or_create(session: AsyncSession, model: Type, lookup: Dict[str, Any], values: Dict[str, Any], counts: Dict[str, int]):
    row = (await session.execute(select(model).filter_by(**lookup))).scalar_one_or_none()
    if row is not None:
        counts["existing"] += 1
        return row
    row = model(**lookup, **values)
    session.add(row)
    await session.flush()
    counts["created"] += 1
    return row


async def seed_demo_data(database: Database, hasher: PasswordHasher, start: Optional[date] = None) -> Dict[str, int]:
    """Insert the demo hierarchy. Returns {"created": n, "existing": m}."""
    counts = {"created": 0, "existing": 0}
    start = start or date.today()

    async with database.session() as session:
        try:
            logger.info("=" * 60)
            logger.info("SEEDING DEMO DATA")
            logger.info("=" * 60)

            password_hash = await hasher.hash_async(DEMO_PASSWORD)
            users = {}
            for data in USERS:
                values = {k: v for k, v in data.items() if k != "email"}
                users[data["email"]] = await _get_or_create(
                    session, User, {"email": data["email"]}, {**values, "password_hash": password_hash}, counts
                )
            students = {user.student_id: user for user in users.values() if user.student_id}

            faculties = {}
            for data in FACULTIES:
                faculties[data["name"]] = await _get_or_create(
                    session, Faculty, {"name": data["name"]}, {"description": data["description"]}, counts
                )

            departments = {}
            for data in DEPARTMENTS:
                departments[data["name"]] = await _get_or_create(
                    session,
                    Department,
                    {"name": data["name"], "faculty_id": faculties[data["faculty"]].id},
                    {"description": data["description"]},
                    counts,
                )

            courses = {}
            for data in COURSES:
                courses[data["code"]] = await _get_or_create(
                    session,
                    Course,
                    {"code": data["code"]},
                    {
                        "name": data["name"],
                        "credits": data["credits"],
                        "department_id": departments[data["department"]].id,
                        "teacher_id": users[data["teacher"]].id,
                    },
                    counts,
                )

            sections = {}
            for data in SECTIONS:
                course = courses[data["course"]]
                section = await _get_or_create(
                    session,
                    Section,
                    {"course_id": course.id, "name": data["name"]},
                    {"schedule": data["schedule"], "room": data["room"], "capacity": data["capacity"]},
                    counts,
                )
                sections[(data["course"], data["name"])] = section

                for offset, topic in enumerate(LESSON_TOPICS):
                    lesson_date = start + timedelta(days=7 * (offset - 2))
                    await _get_or_create(
                        session,
                        Lesson,
                        {"section_id": section.id, "date": lesson_date, "start_time": time(9, 0)},
                        {
                            "end_time": time(10, 30),
                            "topic": topic,
                            "status": LessonStatus.completed if lesson_date < start else LessonStatus.scheduled,
                        },
                        counts,
                    )

            for student_id, course_code, section_name in ENROLLMENTS:
                section = sections[(course_code, section_name)]
                await _get_or_create(
                    session,
                    Enrollment,
                    {"student_id": students[student_id].id, "course_id": section.course_id},
                    {"section_id": section.id},
                    counts,
                )

            await session.commit()

            logger.info("=" * 60)
            logger.info(f"RESULT: {counts['created']} created, {counts['existing']} already exist")
            logger.info(f"Demo accounts use the password '{DEMO_PASSWORD}'")
            logger.info("=" * 60)
        except Exception as e:
            logger.error(f"❌ Error seeding demo data: {str(e)}")
            await session.rollback()
            raise

    return counts
