"""
attendance_backend/tests/test_courses.py
Courses: reference checks, partial updates and the "my courses" views
"""
from attendance_backend.orm import UserRole


def course_payload(catalogue, teacher_id, **overrides):
    payload = {
        "code": "CS201",
        "name": "Data Structures",
        "credits": 3,
        "departmentId": catalogue["department_id"],
        "teacherId": teacher_id,
    }
    payload.update(overrides)
    return payload


class TestCourseCreate:

    async def test_create(self, client, admin, teacher, catalogue):
        response = await client.post("/api/courses", json=course_payload(catalogue, teacher.id), headers=admin.headers)
        assert response.status_code == 201
        course = response.json()["data"]["course"]
        assert course["code"] == "CS201"
        assert course["teacher"]["id"] == teacher.id
        assert course["department"]["faculty"]["name"] == "Faculty of Engineering"
        assert course["sectionCount"] == 0

    async def test_missing_department(self, client, admin, teacher, catalogue):
        response = await client.post(
            "/api/courses",
            json=course_payload(catalogue, teacher.id, departmentId=999),
            headers=admin.headers,
        )
        assert response.status_code == 404
        assert response.json()["error"] == "Department not found"

    async def test_missing_teacher(self, client, admin, catalogue):
        response = await client.post("/api/courses", json=course_payload(catalogue, 999), headers=admin.headers)
        assert response.status_code == 404
        assert response.json()["error"] == "Teacher not found"

    async def test_teacher_must_have_teacher_role(self, client, admin, student, catalogue):
        response = await client.post("/api/courses", json=course_payload(catalogue, student.id), headers=admin.headers)
        assert response.status_code == 400
        assert response.json()["error"] == "User is not a teacher"

    async def test_duplicate_code(self, client, admin, teacher, catalogue):
        response = await client.post(
            "/api/courses",
            json=course_payload(catalogue, teacher.id, code="CS101"),
            headers=admin.headers,
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Course with this code already exists"

    async def test_credits_range(self, client, admin, teacher, catalogue):
        for credits in (0, 11):
            response = await client.post(
                "/api/courses",
                json=course_payload(catalogue, teacher.id, credits=credits),
                headers=admin.headers,
            )
            assert response.status_code == 400

    async def test_teacher_cannot_create(self, client, teacher, catalogue):
        response = await client.post("/api/courses", json=course_payload(catalogue, teacher.id), headers=teacher.headers)
        assert response.status_code == 403


class TestCourseUpdate:

    async def test_update_description_only(self, client, admin, catalogue):
        course_id = catalogue["course_id"]
        before = (await client.get(f"/api/courses/{course_id}", headers=admin.headers)).json()["data"]["course"]

        response = await client.put(
            f"/api/courses/{course_id}",
            json={"description": "Updated"},
            headers=admin.headers,
        )
        assert response.status_code == 200
        after = response.json()["data"]["course"]
        assert after["description"] == "Updated"
        for field in ("code", "name", "credits", "departmentId", "teacherId"):
            assert after[field] == before[field]

    async def test_reassign_to_non_teacher(self, client, admin, student, catalogue):
        response = await client.put(
            f"/api/courses/{catalogue['course_id']}",
            json={"teacherId": student.id},
            headers=admin.headers,
        )
        assert response.status_code == 400
        assert response.json()["error"] == "User is not a teacher"

    async def test_change_code_to_taken_one(self, client, admin, teacher, catalogue):
        await client.post("/api/courses", json=course_payload(catalogue, teacher.id), headers=admin.headers)
        response = await client.put(
            f"/api/courses/{catalogue['course_id']}",
            json={"code": "CS201"},
            headers=admin.headers,
        )
        assert response.status_code == 400

    async def test_update_missing_course(self, client, admin):
        response = await client.put("/api/courses/999", json={"name": "x"}, headers=admin.headers)
        assert response.status_code == 404
        assert response.json()["error"] == "Course not found"


class TestCourseReadAndDelete:

    async def test_list_filters(self, client, admin, teacher, make_account, catalogue):
        other_teacher = await make_account(UserRole.TEACHER)
        await client.post(
            "/api/courses",
            json=course_payload(catalogue, other_teacher.id, code="AB100", name="Algorithms"),
            headers=admin.headers,
        )

        response = await client.get("/api/courses", headers=admin.headers)
        assert [c["code"] for c in response.json()["data"]["courses"]] == ["AB100", "CS101"]

        response = await client.get(f"/api/courses?teacherId={teacher.id}", headers=admin.headers)
        assert [c["code"] for c in response.json()["data"]["courses"]] == ["CS101"]

        response = await client.get("/api/courses?search=algo", headers=admin.headers)
        assert [c["code"] for c in response.json()["data"]["courses"]] == ["AB100"]

    async def test_detail_includes_sections_and_enrollments(self, client, admin, student, catalogue):
        await client.post(
            f"/api/sections/{catalogue['section_id']}/enroll",
            json={"studentId": student.id},
            headers=admin.headers,
        )
        response = await client.get(f"/api/courses/{catalogue['course_id']}", headers=student.headers)
        assert response.status_code == 200
        course = response.json()["data"]["course"]
        assert course["enrollmentCount"] == 1
        assert course["sections"][0]["enrollmentCount"] == 1
        assert course["enrollments"][0]["student"]["studentId"] == "S100"
        assert course["enrollments"][0]["section"]["name"] == "A"

    async def test_read_paths_with_an_enrolled_student(self, client, admin, teacher, student, catalogue):
        await client.post(
            f"/api/sections/{catalogue['section_id']}/enroll",
            json={"studentId": student.id},
            headers=admin.headers,
        )
        reads = [
            ("/api/courses", admin),
            (f"/api/courses/{catalogue['course_id']}", admin),
            ("/api/courses/my-courses/teacher", teacher),
            ("/api/courses/my-courses/student", student),
            (f"/api/sections/{catalogue['section_id']}", teacher),
            ("/api/sections", teacher),
            (f"/api/departments/{catalogue['department_id']}", student),
            (f"/api/faculties/{catalogue['faculty_id']}", student),
            (f"/api/users/{student.id}", admin),
            ("/api/users", admin),
        ]
        for path, account in reads:
            response = await client.get(path, headers=account.headers)
            assert response.status_code == 200, path

        response = await client.get("/api/courses/my-courses/teacher", headers=teacher.headers)
        assert response.json()["data"]["courses"][0]["enrollmentCount"] == 1

    async def test_delete_guard_then_delete(self, client, admin, catalogue):
        course_id = catalogue["course_id"]
        response = await client.delete(f"/api/courses/{course_id}", headers=admin.headers)
        assert response.status_code == 400
        assert response.json()["error"] == "Cannot delete course with existing sections or enrollments"

        assert (await client.delete(f"/api/sections/{catalogue['section_id']}", headers=admin.headers)).status_code == 200
        response = await client.delete(f"/api/courses/{course_id}", headers=admin.headers)
        assert response.status_code == 200
        assert (await client.get(f"/api/courses/{course_id}", headers=admin.headers)).status_code == 404


class TestMyCourses:

    async def test_teacher_courses(self, client, teacher, catalogue):
        response = await client.get("/api/courses/my-courses/teacher", headers=teacher.headers)
        assert response.status_code == 200
        courses = response.json()["data"]["courses"]
        assert [c["code"] for c in courses] == ["CS101"]
        assert courses[0]["sections"][0]["name"] == "A"

    async def test_student_cannot_list_teaching(self, client, student):
        response = await client.get("/api/courses/my-courses/teacher", headers=student.headers)
        assert response.status_code == 403

    async def test_student_courses_with_recent_lessons(self, client, admin, teacher, student, catalogue):
        section_id = catalogue["section_id"]
        await client.post(f"/api/sections/{section_id}/enroll", json={"studentId": student.id}, headers=admin.headers)
        for day in range(1, 8):
            await client.post(
                "/api/lessons",
                json={
                    "sectionId": section_id,
                    "date": f"2024-03-0{day}",
                    "startTime": "09:00",
                    "endTime": "10:30",
                    "topic": f"Lesson {day}",
                },
                headers=teacher.headers,
            )

        response = await client.get("/api/courses/my-courses/student", headers=student.headers)
        assert response.status_code == 200
        enrollments = response.json()["data"]["enrollments"]
        assert len(enrollments) == 1
        section = enrollments[0]["section"]
        assert section["lessonCount"] == 7
        assert [lesson["date"] for lesson in section["lessons"]] == [
            "2024-03-07", "2024-03-06", "2024-03-05", "2024-03-04", "2024-03-03",
        ]
        assert all(lesson["attendanceStatus"] is None for lesson in section["lessons"])
        assert enrollments[0]["course"]["teacher"]["id"] == teacher.id
