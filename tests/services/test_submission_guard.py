"""Duplicate submission guard."""

from __future__ import annotations

from datetime import date

import pytest
from sqlalchemy import func, select

from campus.db.models import OutboxEvent, Submission
from campus.errors import DuplicateSubmissionError, SubmissionNotFoundError, ValidationFailed
from campus.submissions.service import (
    DUPLICATE_MESSAGE,
    check_duplicate,
    create_submission,
    get_submission,
    list_submissions,
)


def _submit(db, **overrides):
    fields = {
        "student_id": "s1",
        "student_name": "Ama Mensah",
        "student_gen": "30",
        "assignment_id": "a1",
        "assignment_title": "Landing page",
        "point_category": "Class Assignments",
        "submission_link": "https://github.com/ama/landing",
    }
    fields.update(overrides)
    return create_submission(db, **fields)


async def _count(db) -> int:
    return (await db.execute(select(func.count()).select_from(Submission))).scalar_one()


class TestCreate:
    @pytest.mark.asyncio
    async def test_stores_submission(self, db_session):
        submission = await _submit(db_session)
        stored = await get_submission(db_session, submission.id)
        assert stored.assignment_title == "Landing page"
        assert stored.grade is None

    @pytest.mark.asyncio
    async def test_image_only_is_enough(self, db_session):
        submission = await _submit(db_session, submission_link="", image_url="https://img.example/x.png")
        assert submission.image_url == "https://img.example/x.png"

    @pytest.mark.asyncio
    async def test_needs_link_or_image(self, db_session):
        with pytest.raises(ValidationFailed, match="link or image"):
            await _submit(db_session, submission_link="", image_url="")
        assert await _count(db_session) == 0

    @pytest.mark.asyncio
    async def test_stages_created_event(self, db_session):
        submission = await _submit(db_session)
        event = (await db_session.execute(select(OutboxEvent))).scalar_one()
        assert event.topic == "submission.created"
        assert event.payload["submission_id"] == submission.id


class TestDuplicates:
    """One submission per assignment, one per day for 100 Days of Code."""

    @pytest.mark.asyncio
    async def test_second_submit_rejected(self, db_session):
        await _submit(db_session)
        with pytest.raises(DuplicateSubmissionError, match=DUPLICATE_MESSAGE):
            await _submit(db_session, assignment_title="Landing page v2")
        assert await _count(db_session) == 1

    @pytest.mark.asyncio
    async def test_other_student_may_submit(self, db_session):
        await _submit(db_session)
        await _submit(db_session, student_id="s2", student_name="Yaw")
        assert await _count(db_session) == 2

    @pytest.mark.asyncio
    async def test_hundred_days_one_per_title(self, db_session):
        day1 = {"assignment_id": "100-days-of-code", "point_category": "100 Days of Code"}
        await _submit(db_session, assignment_title="100 Days of Code - 2024-03-01", **day1)
        await _submit(db_session, assignment_title="100 Days of Code - 2024-03-02", **day1)
        with pytest.raises(DuplicateSubmissionError):
            await _submit(db_session, assignment_title="100 Days of Code - 2024-03-02", **day1)
        assert await _count(db_session) == 2

    @pytest.mark.asyncio
    async def test_hundred_days_title_from_date(self, db_session):
        submission = await _submit(
            db_session,
            assignment_id="100-days-of-code",
            assignment_title="",
            point_category="100 Days of Code",
            today=date(2024, 3, 5),
        )
        assert submission.assignment_title == "100 Days of Code - 2024-03-05"

    @pytest.mark.asyncio
    async def test_check_duplicate(self, db_session):
        assert not await check_duplicate(db_session, "s1", "a1", "Landing page")
        await _submit(db_session)
        assert await check_duplicate(db_session, "s1", "a1", "anything")

    @pytest.mark.asyncio
    async def test_unique_key_catches_concurrent_insert(self, db_session):
        # A row committed by a concurrent request that the pre-insert read did not see.
        db_session.add(Submission(
            student_id="someone-else",
            student_name="Race",
            student_gen="30",
            assignment_id="other",
            assignment_title="Landing page",
            point_category="Class Assignments",
            submission_link="x",
            dedup_key="s1:assignment:a1",
        ))
        await db_session.commit()

        with pytest.raises(DuplicateSubmissionError):
            await _submit(db_session)
        assert await _count(db_session) == 1


class TestQueries:
    @pytest.mark.asyncio
    async def test_missing(self, db_session):
        with pytest.raises(SubmissionNotFoundError):
            await get_submission(db_session, "nope")

    @pytest.mark.asyncio
    async def test_list_filters(self, db_session):
        await _submit(db_session)
        await _submit(db_session, assignment_id="a2", assignment_title="Blog")
        await _submit(db_session, student_id="s2", student_name="Yaw", student_gen="31")

        assert len(await list_submissions(db_session, student_id="s1")) == 2
        assert len(await list_submissions(db_session, assignment_id="a1")) == 2
        assert len(await list_submissions(db_session, gen="31")) == 1
        assert len(await list_submissions(db_session, status="pending")) == 3
        assert await list_submissions(db_session, status="graded") == []
