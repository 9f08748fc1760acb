"""
attendance_backend/tests/test_auth.py
Registration, login, token verification and self-service profile
"""
from datetime import timedelta

from attendance_backend.errors import ErrorCode
from attendance_backend.orm import UserRole

REGISTER_STUDENT = {
    "email": "new.student@university.edu",
    "password": "secret123",
    "firstName": "New",
    "lastName": "Student",
    "role": "STUDENT",
    "studentId": "S100",
}


class TestRegister:

    async def test_register_student_returns_user_and_token(self, client):
        response = await client.post("/api/auth/register", json=REGISTER_STUDENT)
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "User registered successfully"
        assert body["data"]["token"]
        user = body["data"]["user"]
        assert user["email"] == "new.student@university.edu"
        assert user["studentId"] == "S100"
        assert user["role"] == "STUDENT"
        assert "password" not in user and "passwordHash" not in user

    async def test_register_same_email_twice_is_rejected(self, client):
        await client.post("/api/auth/register", json=REGISTER_STUDENT)
        response = await client.post(
            "/api/auth/register",
            json={**REGISTER_STUDENT, "studentId": "S101"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "User with this email already exists"
        assert response.json()["code"] == ErrorCode.DUPLICATE_VALUE

    async def test_email_is_compared_case_insensitively(self, client):
        await client.post("/api/auth/register", json=REGISTER_STUDENT)
        response = await client.post(
            "/api/auth/register",
            json={**REGISTER_STUDENT, "email": "New.Student@University.edu", "studentId": "S101"},
        )
        assert response.status_code == 400

    async def test_student_without_student_id_is_rejected(self, client):
        payload = {k: v for k, v in REGISTER_STUDENT.items() if k != "studentId"}
        response = await client.post("/api/auth/register", json=payload)
        assert response.status_code == 400
        assert response.json()["error"] == "Student ID is required for student accounts"

    async def test_duplicate_student_id_is_rejected(self, client, student):
        response = await client.post("/api/auth/register", json=REGISTER_STUDENT)
        assert response.status_code == 400
        assert response.json()["error"] == "Student with this ID already exists"

    async def test_teacher_student_id_is_dropped(self, client):
        response = await client.post(
            "/api/auth/register",
            json={**REGISTER_STUDENT, "email": "t@university.edu", "role": "TEACHER"},
        )
        assert response.status_code == 201
        assert response.json()["data"]["user"]["studentId"] is None

    async def test_short_password_fails_validation(self, client):
        response = await client.post("/api/auth/register", json={**REGISTER_STUDENT, "password": "123"})
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Validation failed"
        assert body["code"] == ErrorCode.VALIDATION_ERROR
        assert any(error["field"] == "password" for error in body["details"]["errors"])

    async def test_invalid_email_fails_validation(self, client):
        response = await client.post("/api/auth/register", json={**REGISTER_STUDENT, "email": "not-an-email"})
        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"

    async def test_blank_names_fail_validation(self, client):
        response = await client.post("/api/auth/register", json={**REGISTER_STUDENT, "firstName": "   "})
        assert response.status_code == 400


class TestLogin:

    async def test_login_success(self, client, student):
        response = await client.post(
            "/api/auth/login",
            json={"email": student.email, "password": "password123", "userType": "STUDENT"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Login successful"
        assert body["data"]["user"]["id"] == student.id
        assert body["data"]["token"]

    async def test_login_token_authenticates(self, client, student):
        response = await client.post(
            "/api/auth/login",
            json={"email": student.email, "password": "password123", "userType": "STUDENT"},
        )
        token = response.json()["data"]["token"]
        profile = await client.get("/api/auth/profile", headers={"Authorization": f"Bearer {token}"})
        assert profile.status_code == 200
        assert profile.json()["data"]["user"]["email"] == student.email

    async def test_wrong_user_type(self, client, student):
        response = await client.post(
            "/api/auth/login",
            json={"email": student.email, "password": "password123", "userType": "TEACHER"},
        )
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid user type for this account"

    async def test_wrong_password(self, client, student):
        response = await client.post(
            "/api/auth/login",
            json={"email": student.email, "password": "wrong-password", "userType": "STUDENT"},
        )
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid credentials"

    async def test_unknown_email(self, client):
        response = await client.post(
            "/api/auth/login",
            json={"email": "nobody@university.edu", "password": "password123", "userType": "STUDENT"},
        )
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid credentials"
        assert response.json()["code"] == ErrorCode.INVALID_CREDENTIALS

    async def test_unknown_user_type_fails_validation(self, client, student):
        response = await client.post(
            "/api/auth/login",
            json={"email": student.email, "password": "password123", "userType": "JANITOR"},
        )
        assert response.status_code == 400


class TestTokenVerification:

    async def test_missing_token(self, client):
        response = await client.get("/api/auth/profile")
        assert response.status_code == 401
        assert response.json()["error"] == "Access denied. No token provided."
        assert response.headers["www-authenticate"] == "Bearer"

    async def test_garbage_token(self, client):
        response = await client.get("/api/auth/profile", headers={"Authorization": "Bearer not.a.jwt"})
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid token."

    async def test_token_signed_with_other_secret(self, client, student):
        from attendance_backend.security.tokens import TokenService

        forged = TokenService("another-secret", timedelta(hours=1)).create_access_token(
            student.id, student.email, UserRole.ADMIN
        )
        response = await client.get("/api/users", headers={"Authorization": f"Bearer {forged}"})
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid token."

    async def test_expired_token(self, app, client, student):
        token = app.state.token_service.create_access_token(
            student.id, student.email, student.role, expires_delta=timedelta(seconds=-10)
        )
        response = await client.get("/api/auth/profile", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["error"] == "Token expired"
        assert response.json()["code"] == ErrorCode.AUTH_EXPIRED

    async def test_token_of_deleted_user(self, app, client):
        token = app.state.token_service.create_access_token(9999, "ghost@university.edu", UserRole.ADMIN)
        response = await client.get("/api/auth/profile", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid token. User not found."

    async def test_role_is_read_from_database_not_token(self, app, client, student):
        # A token claiming ADMIN for a student account grants nothing extra
        token = app.state.token_service.create_access_token(student.id, student.email, UserRole.ADMIN)
        response = await client.get("/api/users", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 403


class TestProfile:

    async def test_update_profile(self, client, teacher):
        response = await client.put(
            "/api/auth/profile",
            json={"firstName": "Grace", "lastName": "Hopper"},
            headers=teacher.headers,
        )
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Profile updated successfully"
        assert body["data"]["user"]["firstName"] == "Grace"
        assert body["data"]["user"]["lastName"] == "Hopper"

    async def test_update_profile_requires_both_names(self, client, teacher):
        response = await client.put("/api/auth/profile", json={"firstName": "Grace"}, headers=teacher.headers)
        assert response.status_code == 400

    async def test_change_password_with_wrong_current(self, client, student):
        response = await client.put(
            "/api/auth/change-password",
            json={"currentPassword": "wrong-one", "newPassword": "brand-new"},
            headers=student.headers,
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Current password is incorrect"

    async def test_change_password_then_login(self, client, student):
        response = await client.put(
            "/api/auth/change-password",
            json={"currentPassword": "password123", "newPassword": "brand-new"},
            headers=student.headers,
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Password changed successfully"

        old = await client.post(
            "/api/auth/login",
            json={"email": student.email, "password": "password123", "userType": "STUDENT"},
        )
        assert old.status_code == 401
        new = await client.post(
            "/api/auth/login",
            json={"email": student.email, "password": "brand-new", "userType": "STUDENT"},
        )
        assert new.status_code == 200
