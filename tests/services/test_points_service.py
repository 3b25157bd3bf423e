"""Points ledger: idempotent awards, revokes and the stored aggregate."""

from __future__ import annotations

import re

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from campus.cache import TTLCache
from campus.db.models import OutboxEvent, PointEntry, User
from campus.errors import PointsTransactionError, ValidationFailed
from campus.points import service as points_service
from campus.points.service import (
    ALREADY_AWARDED,
    ALREADY_REVOKED,
    AWARDED,
    REVOKED,
    audit_total,
    award_manual_points,
    award_points,
    get_point_history,
    get_total,
    has_been_awarded,
    revoke_points,
)


async def _entry_count(db, user_id: str) -> int:
    result = await db.execute(select(func.count()).select_from(PointEntry).where(PointEntry.user_id == user_id))
    return result.scalar_one()


class TestAward:
    """award_points writes one entry and moves the total exactly once."""

    @pytest.mark.asyncio
    async def test_first_award(self, db_session):
        result = await award_points(db_session, "s1", 1.0, "Class Assignments", "graded-submission-x")
        assert result.success
        assert result.message == AWARDED
        assert result.total_points == 1.0
        assert await get_total(db_session, "s1") == 1.0
        assert await has_been_awarded(db_session, "s1", "graded-submission-x")

    @pytest.mark.asyncio
    async def test_creates_missing_user_aggregate(self, db_session):
        assert await db_session.get(User, "new-student") is None
        await award_points(db_session, "new-student", 0.5, "100 Days of Code", "100-days-of-code-2024-01-01")
        user = await db_session.get(User, "new-student", populate_existing=True)
        assert user is not None
        assert user.role == "student"
        assert user.total_points == 0.5

    @pytest.mark.asyncio
    async def test_duplicate_is_reported_and_changes_nothing(self, db_session):
        await award_points(db_session, "s1", 1.0, "Class Assignments", "graded-submission-x")
        again = await award_points(db_session, "s1", 1.0, "Class Assignments", "graded-submission-x")
        assert not again.success
        assert again.duplicate
        assert again.message == ALREADY_AWARDED
        assert again.total_points == 1.0
        assert await _entry_count(db_session, "s1") == 1

    @pytest.mark.asyncio
    async def test_same_activity_different_students(self, db_session):
        await award_points(db_session, "s1", 1.0, "Class Attendance", "attendance-c1-2024-01-01")
        other = await award_points(db_session, "s2", 1.0, "Class Attendance", "attendance-c1-2024-01-01")
        assert other.success
        assert await get_total(db_session, "s2") == 1.0

    @pytest.mark.asyncio
    async def test_running_total_across_awards(self, db_session):
        await award_points(db_session, "s1", 1.0, "Class Assignments", "graded-submission-a")
        await award_points(db_session, "s1", 0.5, "100 Days of Code", "100-days-of-code-2024-01-01")
        third = await award_points(db_session, "s1", 1.0, "Class Exercises", "graded-exercise-b")
        assert third.total_points == 2.5
        assert await get_total(db_session, "s1") == 2.5

    @pytest.mark.asyncio
    async def test_stages_outbox_event(self, db_session):
        await award_points(db_session, "s1", 1.0, "Class Assignments", "graded-submission-x", awarded_by="t1")
        result = await db_session.execute(select(OutboxEvent).where(OutboxEvent.topic == "points.awarded"))
        event = result.scalar_one()
        assert event.payload["activity_id"] == "graded-submission-x"
        assert event.payload["awarded_by"] == "t1"
        assert event.dispatched_at is None

    @pytest.mark.asyncio
    async def test_entry_fields(self, db_session):
        await award_points(
            db_session, "s1", 1.0, "Class Assignments", "graded-submission-x",
            awarded_by="t1", assignment_title="Landing page",
        )
        entries, total = await get_point_history(db_session, "s1")
        assert total == 1.0
        assert len(entries) == 1
        assert entries[0].assignment_title == "Landing page"
        assert entries[0].reason == "Class Assignments"
        assert entries[0].awarded_by == "t1"

    @pytest.mark.asyncio
    async def test_lost_race_reports_duplicate(self, db_session, monkeypatch):
        await award_points(db_session, "s1", 1.0, "Class Assignments", "graded-submission-x")

        real_get_entry = points_service.get_entry
        calls = 0

        async def stale_read(db, user_id, activity_id):
            nonlocal calls
            calls += 1
            if calls == 1:
                return None
            return await real_get_entry(db, user_id, activity_id)

        monkeypatch.setattr(points_service, "get_entry", stale_read)
        result = await award_points(db_session, "s1", 1.0, "Class Assignments", "graded-submission-x")

        assert result.duplicate
        assert await get_total(db_session, "s1") == 1.0
        assert await _entry_count(db_session, "s1") == 1

    @pytest.mark.asyncio
    async def test_store_failure_applies_nothing(self, db_session, monkeypatch):
        def broken_enqueue(*args, **kwargs):
            raise SQLAlchemyError("stream down")

        monkeypatch.setattr(points_service, "enqueue", broken_enqueue)
        with pytest.raises(PointsTransactionError, match="Could not process points"):
            await award_points(db_session, "s1", 1.0, "Class Assignments", "graded-submission-x")

        assert await get_total(db_session, "s1") == 0.0
        assert await _entry_count(db_session, "s1") == 0

    @pytest.mark.asyncio
    async def test_constraint_failure_is_reported_as_integrity(self, db_session, monkeypatch):
        def violating_enqueue(*args, **kwargs):
            raise IntegrityError("INSERT INTO point_entries", {}, Exception("NOT NULL constraint failed"))

        monkeypatch.setattr(points_service, "enqueue", violating_enqueue)
        with pytest.raises(PointsTransactionError, match="integrity check failed"):
            await award_points(db_session, "s1", 1.0, "Class Assignments", "graded-submission-x")

        assert await get_total(db_session, "s1") == 0.0
        assert await _entry_count(db_session, "s1") == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("points", [float("nan"), float("inf"), float("-inf")])
    async def test_non_finite_points_rejected(self, db_session, points):
        with pytest.raises(ValidationFailed, match="finite"):
            await award_points(db_session, "s1", points, "Class Assignments", "graded-submission-x")

        assert await get_total(db_session, "s1") == 0.0
        assert await _entry_count(db_session, "s1") == 0


class TestManual:
    """Manual awards never collide."""

    @pytest.mark.asyncio
    async def test_manual_awards_stack(self, db_session):
        first = await award_manual_points(db_session, "s1", 2.0, "Helped a classmate", awarded_by="t1")
        second = await award_manual_points(db_session, "s1", 2.0, "Helped a classmate", awarded_by="t1")
        assert first.success and second.success
        assert first.activity_id != second.activity_id
        assert await get_total(db_session, "s1") == 4.0

    @pytest.mark.asyncio
    async def test_manual_prefix_gets_suffix(self, db_session):
        a = await award_points(db_session, "s1", 1.0, "Bonus", "manual-bonus")
        b = await award_points(db_session, "s1", 1.0, "Bonus", "manual-bonus")
        assert a.activity_id.startswith("manual-bonus-")
        assert a.activity_id != b.activity_id
        assert b.success

    @pytest.mark.asyncio
    async def test_manual_id_has_one_suffix(self, db_session):
        result = await award_manual_points(db_session, "s1", 2.0, "Helped a classmate", awarded_by="t1")
        assert re.fullmatch(r"manual-award-[0-9a-f]{8}(-[0-9a-f]{4}){3}-[0-9a-f]{12}", result.activity_id)
        entry = (await db_session.execute(select(PointEntry).where(PointEntry.user_id == "s1"))).scalar_one()
        assert entry.activity_id == result.activity_id


class TestRevoke:
    """revoke_points removes the entry and reverses its stored amount."""

    @pytest.mark.asyncio
    async def test_award_then_revoke_restores_total(self, db_session):
        await award_points(db_session, "s1", 1.0, "Class Assignments", "graded-submission-a")
        await award_points(db_session, "s1", 0.5, "100 Days of Code", "100-days-of-code-2024-01-01")
        result = await revoke_points(db_session, "s1", "100-days-of-code-2024-01-01")
        assert result.success
        assert result.message == REVOKED
        assert result.total_points == 1.0
        assert await get_total(db_session, "s1") == 1.0
        assert not await has_been_awarded(db_session, "s1", "100-days-of-code-2024-01-01")

    @pytest.mark.asyncio
    async def test_revoke_missing_is_noop_success(self, db_session):
        result = await revoke_points(db_session, "s1", "graded-submission-nope")
        assert result.success
        assert result.message == ALREADY_REVOKED
        assert result.total_points == 0.0

    @pytest.mark.asyncio
    async def test_double_revoke_decrements_once(self, db_session):
        await award_points(db_session, "s1", 1.0, "Class Assignments", "graded-submission-a")
        await award_points(db_session, "s1", 1.0, "Class Assignments", "graded-submission-b")
        await revoke_points(db_session, "s1", "graded-submission-a")
        second = await revoke_points(db_session, "s1", "graded-submission-a")
        assert second.message == ALREADY_REVOKED
        assert await get_total(db_session, "s1") == 1.0

    @pytest.mark.asyncio
    async def test_reaward_after_revoke(self, db_session):
        await award_points(db_session, "s1", 1.0, "Class Assignments", "graded-submission-a")
        await revoke_points(db_session, "s1", "graded-submission-a")
        again = await award_points(db_session, "s1", 1.0, "Class Assignments", "graded-submission-a")
        assert again.success
        assert await get_total(db_session, "s1") == 1.0

    @pytest.mark.asyncio
    async def test_stages_revoke_event(self, db_session):
        await award_points(db_session, "s1", 1.0, "Class Assignments", "graded-submission-a")
        await revoke_points(db_session, "s1", "graded-submission-a")
        result = await db_session.execute(select(OutboxEvent.topic).order_by(OutboxEvent.id))
        assert [row[0] for row in result] == ["points.awarded", "points.revoked"]


class TestAudit:
    @pytest.mark.asyncio
    async def test_consistent_ledger(self, db_session):
        await award_points(db_session, "s1", 1.0, "Class Assignments", "graded-submission-a")
        await award_points(db_session, "s1", 0.5, "100 Days of Code", "100-days-of-code-2024-01-01")
        audit = await audit_total(db_session, "s1")
        assert audit == {"stored_total": 1.5, "ledger_total": 1.5, "drift": 0.0}

    @pytest.mark.asyncio
    async def test_detects_drift_without_repairing(self, db_session):
        await award_points(db_session, "s1", 1.0, "Class Assignments", "graded-submission-a")
        user = await db_session.get(User, "s1")
        user.total_points = 5.0
        await db_session.commit()

        audit = await audit_total(db_session, "s1")
        assert audit["drift"] == 4.0
        assert await get_total(db_session, "s1") == 5.0

    @pytest.mark.asyncio
    async def test_unknown_user(self, db_session):
        audit = await audit_total(db_session, "ghost")
        assert audit["stored_total"] == 0.0
        assert audit["ledger_total"] == 0.0


class TestRankingsInvalidation:
    @pytest.mark.asyncio
    async def test_award_and_revoke_clear_rankings(self, db_session):
        cache = TTLCache()
        cache.set("rankings:*:50", ["stale"])
        cache.set("unrelated", 1)
        await award_points(db_session, "s1", 1.0, "Class Assignments", "graded-submission-a", cache=cache)
        assert cache.get("rankings:*:50") is None
        assert cache.get("unrelated") == 1

        cache.set("rankings:*:50", ["stale"])
        await revoke_points(db_session, "s1", "graded-submission-a", cache=cache)
        assert cache.get("rankings:*:50") is None

    @pytest.mark.asyncio
    async def test_duplicate_keeps_rankings(self, db_session):
        cache = TTLCache()
        await award_points(db_session, "s1", 1.0, "Class Assignments", "graded-submission-a", cache=cache)
        cache.set("rankings:*:50", ["fresh"])
        await award_points(db_session, "s1", 1.0, "Class Assignments", "graded-submission-a", cache=cache)
        assert cache.get("rankings:*:50") == ["fresh"]
