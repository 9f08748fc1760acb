"""
attendance_backend/tests/test_users.py
Admin user management
"""
from attendance_backend.orm import UserRole


class TestUserAccess:

    async def test_non_admin_is_forbidden(self, client, teacher):
        response = await client.get("/api/users", headers=teacher.headers)
        assert response.status_code == 403
        assert response.json()["error"] == "Access denied. Insufficient permissions."

    async def test_anonymous_is_unauthorized(self, client):
        response = await client.get("/api/users")
        assert response.status_code == 401


class TestUserList:

    async def test_filter_by_role_and_search(self, client, admin, make_account):
        await make_account(UserRole.STUDENT, first_name="Alice", last_name="Johnson")
        await make_account(UserRole.STUDENT, first_name="Bob", last_name="Williams")
        await make_account(UserRole.TEACHER, first_name="Alice", last_name="Teacher")

        response = await client.get("/api/users?role=STUDENT", headers=admin.headers)
        assert response.status_code == 200
        data = response.json()["data"]
        assert {user["role"] for user in data["users"]} == {"STUDENT"}
        assert data["pagination"]["total"] == 2

        response = await client.get("/api/users?search=alice", headers=admin.headers)
        names = sorted(user["lastName"] for user in response.json()["data"]["users"])
        assert names == ["Johnson", "Teacher"]

        response = await client.get("/api/users?role=STUDENT&search=ALICE", headers=admin.headers)
        assert [user["lastName"] for user in response.json()["data"]["users"]] == ["Johnson"]

    async def test_search_matches_student_id(self, client, admin, make_account):
        await make_account(UserRole.STUDENT, student_id="S777")
        response = await client.get("/api/users?search=s777", headers=admin.headers)
        assert [user["studentId"] for user in response.json()["data"]["users"]] == ["S777"]

    async def test_search_treats_wildcards_literally(self, client, admin, make_account):
        await make_account(UserRole.TEACHER, last_name="Plain")
        response = await client.get("/api/users?search=%25", headers=admin.headers)
        assert response.json()["data"]["users"] == []

    async def test_invalid_role_filter(self, client, admin):
        response = await client.get("/api/users?role=JANITOR", headers=admin.headers)
        assert response.status_code == 400


class TestUserCrud:

    async def test_create_and_get_with_assignments(self, client, admin, catalogue, student):
        await client.post(
            f"/api/sections/{catalogue['section_id']}/enroll",
            json={"studentId": student.id},
            headers=admin.headers,
        )
        response = await client.get(f"/api/users/{student.id}", headers=admin.headers)
        assert response.status_code == 200
        user = response.json()["data"]["user"]
        assert user["teacherCourses"] == []
        assert len(user["enrollments"]) == 1
        assert user["enrollments"][0]["course"]["code"] == "CS101"
        assert user["enrollments"][0]["section"]["name"] == "A"

    async def test_create_user(self, client, admin):
        response = await client.post(
            "/api/users",
            json={
                "email": "staff@university.edu",
                "password": "secret123",
                "firstName": "Staff",
                "lastName": "Member",
                "role": "TEACHER",
            },
            headers=admin.headers,
        )
        assert response.status_code == 201
        assert response.json()["message"] == "User created successfully"
        assert response.json()["data"]["user"]["role"] == "TEACHER"

    async def test_create_requires_role(self, client, admin):
        response = await client.post(
            "/api/users",
            json={"email": "x@university.edu", "password": "secret123", "firstName": "X", "lastName": "Y"},
            headers=admin.headers,
        )
        assert response.status_code == 400

    async def test_create_duplicate_email(self, client, admin, teacher):
        response = await client.post(
            "/api/users",
            json={
                "email": teacher.email,
                "password": "secret123",
                "firstName": "Dup",
                "lastName": "Licate",
                "role": "TEACHER",
            },
            headers=admin.headers,
        )
        assert response.status_code == 400
        assert response.json()["error"] == "User with this email already exists"

    async def test_get_missing_user(self, client, admin):
        response = await client.get("/api/users/4242", headers=admin.headers)
        assert response.status_code == 404
        assert response.json()["error"] == "User not found"

    async def test_update_email_to_taken_one(self, client, admin, teacher, student):
        response = await client.put(
            f"/api/users/{student.id}",
            json={"email": teacher.email},
            headers=admin.headers,
        )
        assert response.status_code == 400
        assert response.json()["error"] == "User with this email already exists"

    async def test_update_keeps_unsent_fields(self, client, admin, student):
        response = await client.put(
            f"/api/users/{student.id}",
            json={"firstName": "Renamed"},
            headers=admin.headers,
        )
        assert response.status_code == 200
        user = response.json()["data"]["user"]
        assert user["firstName"] == "Renamed"
        assert user["lastName"] == "User"
        assert user["email"] == student.email
        assert user["studentId"] == "S100"

    async def test_promote_to_student_requires_student_id(self, client, admin, make_account):
        staff = await make_account(UserRole.ADMIN)
        response = await client.put(f"/api/users/{staff.id}", json={"role": "STUDENT"}, headers=admin.headers)
        assert response.status_code == 400
        assert response.json()["error"] == "Student ID is required for student accounts"

        response = await client.put(
            f"/api/users/{staff.id}",
            json={"role": "STUDENT", "studentId": "S900"},
            headers=admin.headers,
        )
        assert response.status_code == 200
        assert response.json()["data"]["user"]["studentId"] == "S900"

    async def test_student_id_cleared_when_leaving_student_role(self, client, admin, student):
        response = await client.put(f"/api/users/{student.id}", json={"role": "ADMIN"}, headers=admin.headers)
        assert response.status_code == 200
        assert response.json()["data"]["user"]["studentId"] is None

    async def test_teacher_with_courses_keeps_role(self, client, admin, teacher, catalogue):
        response = await client.put(f"/api/users/{teacher.id}", json={"role": "ADMIN"}, headers=admin.headers)
        assert response.status_code == 400
        assert response.json()["error"] == "Cannot change role of a teacher with assigned courses"

    async def test_enrolled_student_keeps_role(self, client, admin, student, catalogue):
        await client.post(
            f"/api/sections/{catalogue['section_id']}/enroll",
            json={"studentId": student.id},
            headers=admin.headers,
        )
        response = await client.put(f"/api/users/{student.id}", json={"role": "TEACHER"}, headers=admin.headers)
        assert response.status_code == 400
        assert response.json()["error"] == "Cannot change role of a student with enrollments or attendance records"

        response = await client.get(f"/api/users/{student.id}", headers=admin.headers)
        assert response.json()["data"]["user"]["role"] == "STUDENT"
        assert response.json()["data"]["user"]["studentId"] == "S100"

    async def test_delete_refused_while_teaching(self, client, admin, teacher, catalogue):
        response = await client.delete(f"/api/users/{teacher.id}", headers=admin.headers)
        assert response.status_code == 400
        assert response.json()["error"] == "Cannot delete user with existing courses or enrollments"

    async def test_delete_user(self, client, admin, make_account):
        victim = await make_account(UserRole.TEACHER)
        response = await client.delete(f"/api/users/{victim.id}", headers=admin.headers)
        assert response.status_code == 200
        assert response.json()["message"] == "User deleted successfully"

        response = await client.get(f"/api/users/{victim.id}", headers=admin.headers)
        assert response.status_code == 404
        # Its token is dead too
        response = await client.get("/api/auth/profile", headers=victim.headers)
        assert response.status_code == 401
