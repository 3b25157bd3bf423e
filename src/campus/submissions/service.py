"""Submission storage and the duplicate guard.

A student may submit each assignment once. The "100 Days of Code" family
shares one assignment id, so for it uniqueness is per title (one post per
day) instead. The rule is enforced twice: a read before insert for a clear
error, and the unique ``dedup_key`` column for concurrent submits.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from campus.db.models import Submission
from campus.errors import DuplicateSubmissionError, SubmissionNotFoundError, ValidationFailed
from campus.points.activity import HUNDRED_DAYS_ASSIGNMENT_ID, hundred_days_title
from campus.sync.outbox import TOPIC_SUBMISSION_CREATED, TOPIC_SUBMISSION_DELETED, enqueue

logger = structlog.get_logger()

DUPLICATE_MESSAGE = "Duplicate submission detected"


def is_hundred_days(assignment_id: str) -> bool:
    return assignment_id == HUNDRED_DAYS_ASSIGNMENT_ID


def dedup_key(student_id: str, assignment_id: str, assignment_title: str) -> str:
    """Uniqueness key stored on every submission.

    >>> dedup_key("s1", "100-days-of-code", "100 Days of Code - 2024-01-01")
    's1:title:100 Days of Code - 2024-01-01'
    >>> dedup_key("s1", "a1", "Landing page")
    's1:assignment:a1'
    """
    if is_hundred_days(assignment_id):
        return f"{student_id}:title:{assignment_title}"
    return f"{student_id}:assignment:{assignment_id}"


async def check_duplicate(
    db: AsyncSession,
    student_id: str,
    assignment_id: str,
    assignment_title: str,
) -> bool:
    """True when the student already has a submission for this assignment (or day)."""
    query = select(Submission.id).where(Submission.student_id == student_id)
    if is_hundred_days(assignment_id):
        query = query.where(Submission.assignment_title == assignment_title)
    else:
        query = query.where(Submission.assignment_id == assignment_id)
    result = await db.execute(query.limit(1))
    return result.first() is not None


async def create_submission(
    db: AsyncSession,
    *,
    student_id: str,
    student_name: str,
    student_gen: str,
    assignment_id: str,
    assignment_title: str,
    point_category: str,
    submission_link: str = "",
    submission_notes: str = "",
    image_url: str = "",
    today: date | None = None,
) -> Submission:
    """Store a new submission.

    Raises:
        ValidationFailed: neither a link nor an image was provided.
        DuplicateSubmissionError: the student already submitted this.
    """
    if not submission_link and not image_url:
        msg = "Either submission link or image is required"
        raise ValidationFailed(msg)

    if is_hundred_days(assignment_id) and not assignment_title:
        assignment_title = hundred_days_title(today or datetime.now(timezone.utc).date())

    if await check_duplicate(db, student_id, assignment_id, assignment_title):
        logger.info("submission_duplicate", student_id=student_id, assignment_id=assignment_id)
        raise DuplicateSubmissionError(DUPLICATE_MESSAGE)

    submission = Submission(
        student_id=student_id,
        student_name=student_name,
        student_gen=student_gen,
        assignment_id=assignment_id,
        assignment_title=assignment_title,
        submission_link=submission_link or "",
        submission_notes=submission_notes or "",
        image_url=image_url or "",
        point_category=point_category,
        submitted_at=datetime.now(timezone.utc),
        dedup_key=dedup_key(student_id, assignment_id, assignment_title),
    )
    db.add(submission)
    try:
        await db.flush()
        enqueue(db, TOPIC_SUBMISSION_CREATED, {
            "submission_id": submission.id,
            "student_id": student_id,
            "assignment_id": assignment_id,
            "assignment_title": assignment_title,
        })
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.info("submission_duplicate_race", student_id=student_id, assignment_id=assignment_id)
        raise DuplicateSubmissionError(DUPLICATE_MESSAGE) from None

    logger.info("submission_created", submission_id=submission.id, student_id=student_id)
    return submission


async def get_submission(db: AsyncSession, submission_id: str) -> Submission:
    submission = await db.get(Submission, submission_id)
    if submission is None:
        msg = "Submission not found."
        raise SubmissionNotFoundError(msg)
    return submission


async def list_submissions(
    db: AsyncSession,
    student_id: str | None = None,
    assignment_id: str | None = None,
    status: str | None = None,
    gen: str | None = None,
) -> list[Submission]:
    """Submissions newest first. ``status`` is ``graded`` or ``pending``."""
    query = select(Submission)
    if student_id is not None:
        query = query.where(Submission.student_id == student_id)
    if assignment_id is not None:
        query = query.where(Submission.assignment_id == assignment_id)
    if gen is not None:
        query = query.where(Submission.student_gen == gen)
    if status == "graded":
        query = query.where(Submission.grade.is_not(None))
    elif status == "pending":
        query = query.where(Submission.grade.is_(None))
    result = await db.execute(query.order_by(Submission.submitted_at.desc()))
    return list(result.scalars().all())


async def delete_submission_record(db: AsyncSession, submission: Submission) -> None:
    """Delete the row and stage a sync event. Does not commit."""
    enqueue(db, TOPIC_SUBMISSION_DELETED, {
        "submission_id": submission.id,
        "student_id": submission.student_id,
        "assignment_id": submission.assignment_id,
    })
    await db.delete(submission)
