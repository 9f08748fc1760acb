"""
attendance_backend/tests/conftest.py
Shared fixtures: an isolated app per test on its own SQLite file, an HTTP
client over ASGITransport, and ready-made accounts with bearer headers.
"""
import itertools
from dataclasses import dataclass
from typing import Dict, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from attendance_backend.config import Settings
from attendance_backend.main import create_app
from attendance_backend.orm import User, UserRole

DEFAULT_PASSWORD = "password123"


@dataclass
class Account:
    id: int
    email: str
    role: UserRole
    student_id: Optional[str]
    headers: Dict[str, str]


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        jwt_secret="test-secret",
        bcrypt_rounds=4,
        rate_limit_enabled=False,
        environment="test",
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def app(settings):
    application = create_app(settings)
    # ASGITransport does not run the lifespan, so create the schema here
    await application.state.database.create_all()
    yield application
    application.state.password_hasher.shutdown()
    await application.state.database.dispose()


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def make_account(app):
    """Insert a user straight into the database and mint a token for it."""
    counter = itertools.count(1)

    async def _make(
        role: UserRole = UserRole.STUDENT,
        email: Optional[str] = None,
        student_id: Optional[str] = None,
        password: str = DEFAULT_PASSWORD,
        first_name: str = "Test",
        last_name: str = "User",
    ) -> Account:
        n = next(counter)
        email = email or f"{role.value.lower()}{n}@university.edu"
        if role == UserRole.STUDENT and student_id is None:
            student_id = f"S{n:03d}"

        async with app.state.database.session() as session:
            user = User(
                email=email,
                password_hash=app.state.password_hasher.hash(password),
                first_name=first_name,
                last_name=last_name,
                role=role,
                student_id=student_id if role == UserRole.STUDENT else None,
            )
            session.add(user)
            await session.commit()

        token = app.state.token_service.create_access_token(user.id, user.email, user.role)
        return Account(user.id, email, role, user.student_id, {"Authorization": f"Bearer {token}"})

    return _make


@pytest_asyncio.fixture
async def admin(make_account) -> Account:
    return await make_account(UserRole.ADMIN, email="admin@university.edu")


@pytest_asyncio.fixture
async def teacher(make_account) -> Account:
    return await make_account(UserRole.TEACHER, email="teacher@university.edu")


@pytest_asyncio.fixture
async def student(make_account) -> Account:
    return await make_account(UserRole.STUDENT, email="student@university.edu", student_id="S100")


@pytest_asyncio.fixture
async def catalogue(client, admin, teacher) -> Dict[str, int]:
    """One faculty > department > course > section chain, created through the API."""
    response = await client.post(
        "/api/faculties",
        json={"name": "Faculty of Engineering", "description": "Engineering"},
        headers=admin.headers,
    )
    faculty_id = response.json()["data"]["faculty"]["id"]

    response = await client.post(
        "/api/departments",
        json={"name": "Computer Science", "facultyId": faculty_id},
        headers=admin.headers,
    )
    department_id = response.json()["data"]["department"]["id"]

    response = await client.post(
        "/api/courses",
        json={
            "code": "CS101",
            "name": "Introduction to Programming",
            "description": "Basics",
            "credits": 4,
            "departmentId": department_id,
            "teacherId": teacher.id,
        },
        headers=admin.headers,
    )
    course_id = response.json()["data"]["course"]["id"]

    response = await client.post(
        "/api/sections",
        json={"name": "A", "courseId": course_id, "schedule": "Mon/Wed 09:00", "room": "ENG-101", "capacity": 2},
        headers=admin.headers,
    )
    section_id = response.json()["data"]["section"]["id"]

    return {
        "faculty_id": faculty_id,
        "department_id": department_id,
        "course_id": course_id,
        "section_id": section_id,
    }
