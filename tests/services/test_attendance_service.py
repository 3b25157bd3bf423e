"""Attendance: feedback always saved, one point per class per day."""

from __future__ import annotations

from datetime import date

import pytest

from campus.attendance import service as attendance_service
from campus.attendance.service import list_attendance, mark_attendance
from campus.errors import PointsTransactionError
from campus.points.service import get_total, has_been_awarded


def _mark(db, day=date(2024, 5, 6), **overrides):
    fields = {
        "student_id": "s1",
        "student_name": "Ama Mensah",
        "student_gen": "30",
        "class_id": "c1",
        "class_name": "Intro to Flexbox",
        "learned": "justify-content",
        "challenged": "align-items",
    }
    fields.update(overrides)
    return mark_attendance(db, today=day, **fields)


class TestMarkAttendance:
    @pytest.mark.asyncio
    async def test_first_mark_awards_point(self, db_session):
        outcome = await _mark(db_session)
        assert outcome.success
        assert outcome.points_awarded
        assert outcome.message == "Attendance marked and 1 point awarded!"
        assert outcome.total_points == 1.0
        assert await has_been_awarded(db_session, "s1", "attendance-c1-2024-05-06")

    @pytest.mark.asyncio
    async def test_same_day_keeps_feedback_without_point(self, db_session):
        await _mark(db_session)
        again = await _mark(db_session, learned="grid too")
        assert again.success
        assert not again.points_awarded
        assert "feedback was saved" in again.message
        assert await get_total(db_session, "s1") == 1.0
        assert len(await list_attendance(db_session, student_id="s1")) == 2

    @pytest.mark.asyncio
    async def test_next_day_awards_again(self, db_session):
        await _mark(db_session)
        await _mark(db_session, day=date(2024, 5, 7))
        assert await get_total(db_session, "s1") == 2.0

    @pytest.mark.asyncio
    async def test_failed_award_still_saves_feedback(self, db_session, monkeypatch):
        async def failing_award(*args, **kwargs):
            msg = "Could not process points. Reason: OperationalError"
            raise PointsTransactionError(msg)

        monkeypatch.setattr(attendance_service, "award_points", failing_award)
        outcome = await _mark(db_session)

        assert not outcome.success
        assert outcome.record_id
        records = await list_attendance(db_session, student_id="s1")
        assert [r.id for r in records] == [outcome.record_id]

    @pytest.mark.asyncio
    async def test_list_filters(self, db_session):
        await _mark(db_session)
        await _mark(db_session, student_id="s2", student_name="Yaw", student_gen="31", class_id="c2")
        assert len(await list_attendance(db_session)) == 2
        assert len(await list_attendance(db_session, class_id="c2")) == 1
        assert len(await list_attendance(db_session, gen="30")) == 1
