"""Submission and grading endpoints."""

from __future__ import annotations

import pytest

SUBMISSION = {
    "assignment_id": "a1",
    "assignment_title": "Landing page",
    "point_category": "Class Assignments",
    "student_gen": "30",
    "submission_link": "https://github.com/ama/landing",
}


async def _submit(client, headers, **overrides):
    return await client.post("/api/v1/submissions", json={**SUBMISSION, **overrides}, headers=headers)


class TestSubmit:
    @pytest.mark.asyncio
    async def test_created(self, client, student_headers):
        resp = await _submit(client, student_headers)
        assert resp.status_code == 201
        body = resp.json()
        assert body["student_id"] == "student-1"
        assert body["student_name"] == "Ama Mensah"
        assert body["grade"] is None

    @pytest.mark.asyncio
    async def test_duplicate_is_409(self, client, student_headers):
        await _submit(client, student_headers)
        resp = await _submit(client, student_headers)
        assert resp.status_code == 409
        assert resp.json()["detail"] == "Duplicate submission detected"

    @pytest.mark.asyncio
    async def test_missing_link_and_image_is_400(self, client, student_headers):
        resp = await _submit(client, student_headers, submission_link="")
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_teacher_cannot_submit(self, client, teacher_headers):
        resp = await _submit(client, teacher_headers)
        assert resp.status_code == 403


class TestVisibility:
    @pytest.mark.asyncio
    async def test_students_see_only_their_own(self, client, student_headers, auth_headers, teacher_headers):
        other = auth_headers("student-2", "student", "Yaw")
        await _submit(client, student_headers)
        theirs = (await _submit(client, other)).json()

        mine = await client.get("/api/v1/submissions", params={"student_id": "student-2"}, headers=student_headers)
        assert [s["student_id"] for s in mine.json()["submissions"]] == ["student-1"]

        resp = await client.get(f"/api/v1/submissions/{theirs['id']}", headers=student_headers)
        assert resp.status_code == 404

        everyone = await client.get("/api/v1/submissions", headers=teacher_headers)
        assert everyone.json()["total"] == 2

    @pytest.mark.asyncio
    async def test_status_filter(self, client, student_headers, teacher_headers):
        created = (await _submit(client, student_headers)).json()
        await client.post(f"/api/v1/submissions/{created['id']}/grade", json={}, headers=teacher_headers)
        graded = await client.get("/api/v1/submissions", params={"status": "graded"}, headers=teacher_headers)
        pending = await client.get("/api/v1/submissions", params={"status": "pending"}, headers=teacher_headers)
        assert graded.json()["total"] == 1
        assert pending.json()["total"] == 0


class TestGrading:
    @pytest.mark.asyncio
    async def test_grade_awards_points(self, client, student_headers, teacher_headers):
        created = (await _submit(client, student_headers)).json()
        resp = await client.post(
            f"/api/v1/submissions/{created['id']}/grade",
            json={"grade": "Excellent", "feedback": "Clean markup"},
            headers=teacher_headers,
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["points_awarded"] is True
        assert body["total_points"] == 1.0
        assert body["submission"]["grade"] == "Excellent"
        assert body["submission"]["graded_by"] == "teacher-1"

        points = await client.get("/api/v1/points/student-1", headers=student_headers)
        assert points.json()["total_points"] == 1.0

        notes = await client.get("/api/v1/notifications", headers=student_headers)
        assert notes.json()["notifications"][0]["description"] == (
            "Your submission has been graded by Kofi Boateng."
        )

    @pytest.mark.asyncio
    async def test_regrade_keeps_single_award(self, client, student_headers, teacher_headers):
        created = (await _submit(client, student_headers)).json()
        url = f"/api/v1/submissions/{created['id']}/grade"
        await client.post(url, json={}, headers=teacher_headers)
        resp = await client.post(url, json={"grade": "Redo"}, headers=teacher_headers)
        assert resp.json()["success"] is True
        assert resp.json()["points_awarded"] is False
        assert resp.json()["total_points"] == 1.0

    @pytest.mark.asyncio
    async def test_grade_only(self, client, student_headers, teacher_headers):
        created = (await _submit(client, student_headers)).json()
        resp = await client.patch(
            f"/api/v1/submissions/{created['id']}", json={"grade": "Good"}, headers=teacher_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["grade"] == "Good"
        points = await client.get("/api/v1/points/student-1", headers=student_headers)
        assert points.json()["total_points"] == 0.0

    @pytest.mark.asyncio
    async def test_grade_unknown(self, client, teacher_headers):
        resp = await client.post("/api/v1/submissions/nope/grade", json={}, headers=teacher_headers)
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_student_cannot_grade(self, client, student_headers):
        created = (await _submit(client, student_headers)).json()
        resp = await client.post(f"/api/v1/submissions/{created['id']}/grade", json={}, headers=student_headers)
        assert resp.status_code == 403


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_graded_revokes(self, client, student_headers, teacher_headers):
        created = (await _submit(client, student_headers)).json()
        await client.post(f"/api/v1/submissions/{created['id']}/grade", json={}, headers=teacher_headers)

        resp = await client.delete(f"/api/v1/submissions/{created['id']}", headers=teacher_headers)
        assert resp.status_code == 200
        assert resp.json()["message"] == "Submission deleted."
        assert resp.json()["total_points"] == 0.0

        gone = await client.get(f"/api/v1/submissions/{created['id']}", headers=teacher_headers)
        assert gone.status_code == 404

        again = await _submit(client, student_headers)
        assert again.status_code == 201

    @pytest.mark.asyncio
    async def test_delete_unknown(self, client, teacher_headers):
        resp = await client.delete("/api/v1/submissions/nope", headers=teacher_headers)
        assert resp.status_code == 404
