"""Student reports: built from the ledger, refreshed in place."""

from __future__ import annotations

import pytest

from campus.db.models import User
from campus.errors import ReportNotFoundError, StudentNotFoundError
from campus.points.service import award_points, revoke_points
from campus.reports.service import create_report, get_report, list_reports, refresh_report, update_report


async def _student(db, uid="s1", name="Ama Mensah", gen="30"):
    db.add(User(uid=uid, display_name=name, email=f"{uid}@example.com", role="student", gen=gen, total_points=0.0))
    await db.commit()


class TestCreate:
    @pytest.mark.asyncio
    async def test_built_from_ledger(self, db_session):
        await _student(db_session)
        await award_points(db_session, "s1", 1.0, "Class Assignments", "graded-submission-a")
        await award_points(db_session, "s1", 1.0, "Class Assignments", "graded-submission-b")
        await award_points(db_session, "s1", 0.5, "100 Days of Code", "100-days-of-code-2024-01-01")
        await award_points(db_session, "s1", 3.0, "Helped a classmate", "manual-bonus")

        report, created = await create_report(db_session, "s1")

        assert created
        assert report.student_name == "Ama Mensah"
        assert report.gen == "30"
        assert report.email == "s1@example.com"
        assert report.total_points == 5.5
        assert report.academics["assignments"]["current"] == 2.0
        assert report.academics["assignments"]["percentage"] == 4
        assert report.academics["hundred_days_of_code"]["current"] == 0.5
        assert report.academics["attendance"]["current"] == 0.0
        assert report.strengths == []
        assert report.teacher_comments == ""

    @pytest.mark.asyncio
    async def test_existing_returned_unchanged(self, db_session):
        await _student(db_session)
        first, _ = await create_report(db_session, "s1")
        await award_points(db_session, "s1", 1.0, "Class Assignments", "graded-submission-a")

        again, created = await create_report(db_session, "s1")
        assert not created
        assert again.student_id == first.student_id
        assert again.total_points == 0.0

    @pytest.mark.asyncio
    async def test_unknown_student(self, db_session):
        with pytest.raises(StudentNotFoundError):
            await create_report(db_session, "nobody")

    @pytest.mark.asyncio
    async def test_defaults_for_sparse_user(self, db_session):
        db_session.add(User(uid="s2", role="student", total_points=0.0))
        await db_session.commit()
        report, _ = await create_report(db_session, "s2")
        assert report.student_name == "s2"
        assert report.gen == "Unknown"


class TestRefresh:
    @pytest.mark.asyncio
    async def test_picks_up_new_and_revoked_points(self, db_session):
        await _student(db_session)
        await award_points(db_session, "s1", 1.0, "Class Exercises", "graded-exercise-a")
        await create_report(db_session, "s1")
        await db_session.commit()

        await award_points(db_session, "s1", 1.0, "Class Attendance", "attendance-c1-2024-01-09")
        await revoke_points(db_session, "s1", "graded-exercise-a")

        report = await refresh_report(db_session, "s1")
        assert report.total_points == 1.0
        assert report.academics["attendance"]["current"] == 1.0
        assert report.academics["exercises"]["current"] == 0.0

    @pytest.mark.asyncio
    async def test_keeps_staff_fields(self, db_session):
        await _student(db_session)
        await create_report(db_session, "s1")
        await update_report(db_session, "s1", strengths=["Clean code"], teacher_comments="Keep going")
        await db_session.commit()

        report = await refresh_report(db_session, "s1")
        assert report.strengths == ["Clean code"]
        assert report.teacher_comments == "Keep going"

    @pytest.mark.asyncio
    async def test_creates_missing_report(self, db_session):
        await _student(db_session)
        report = await refresh_report(db_session, "s1")
        assert report.student_id == "s1"
        assert (await get_report(db_session, "s1")).student_id == "s1"


class TestQueries:
    @pytest.mark.asyncio
    async def test_list_sorted_and_filtered(self, db_session):
        await _student(db_session, "s1", "Yaw Asante", "30")
        await _student(db_session, "s2", "Ama Mensah", "30")
        await _student(db_session, "s3", "Kwame Osei", "31")
        for uid in ("s1", "s2", "s3"):
            await create_report(db_session, uid)

        assert [r.student_id for r in await list_reports(db_session)] == ["s2", "s3", "s1"]
        assert [r.student_id for r in await list_reports(db_session, gen="30")] == ["s2", "s1"]
        assert [r.student_id for r in await list_reports(db_session, student_id="s3")] == ["s3"]

    @pytest.mark.asyncio
    async def test_missing_report(self, db_session):
        with pytest.raises(ReportNotFoundError):
            await get_report(db_session, "s1")

    @pytest.mark.asyncio
    async def test_update_ignores_derived_fields(self, db_session):
        await _student(db_session)
        await create_report(db_session, "s1")
        report = await update_report(db_session, "s1", total_points=999.0, recommendations=["Pair more"])
        assert report.total_points == 0.0
        assert report.recommendations == ["Pair more"]
